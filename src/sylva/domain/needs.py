"""Companion hunger."""
from __future__ import annotations

from sylva.domain.state import MAX_HUNGER, GameState, append_log

HUNGER_TICK_INTERVAL = 6.0
HUNGER_DECREASE = 4
CRITICAL_THRESHOLD = 20

STARVING_MESSAGE = "Your companion is starving and has no energy left!"
HUNGRY_MESSAGE = "Your companion is begging for food."


def update_needs(state: GameState, dt: float) -> None:
    """Drain hunger every ``HUNGER_TICK_INTERVAL`` seconds and warn when it runs low."""
    state.hunger_timer += dt
    if state.hunger_timer < HUNGER_TICK_INTERVAL:
        return
    state.hunger_timer = 0.0
    state.hunger = max(0, state.hunger - HUNGER_DECREASE)
    if state.hunger == 0:
        append_log(state, STARVING_MESSAGE)
    elif state.hunger <= CRITICAL_THRESHOLD:
        append_log(state, HUNGRY_MESSAGE)


def feed(state: GameState, amount: int) -> int:
    """Restore hunger up to the cap and return how much was actually restored."""
    before = state.hunger
    state.hunger = min(MAX_HUNGER, state.hunger + max(0, amount))
    return state.hunger - before


def spend_hunger(state: GameState, cost: int) -> bool:
    if state.hunger < cost:
        return False
    state.hunger -= cost
    return True
