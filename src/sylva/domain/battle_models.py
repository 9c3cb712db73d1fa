"""Battle domain models."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque

from sylva.core.types import TERMINAL_PHASES, BattlePhase


@dataclass(slots=True)
class SideCounters:
    """Monotonic counters a renderer can watch to fire one-shot animations."""

    attacks: int = 0
    hits: int = 0
    last_attack_id: str | None = None


@dataclass(slots=True)
class BattleState:
    """Tracks the state of an ongoing battle.

    Max HP is not stored here; it is derived from each side's stats on demand.
    """

    battle_id: str
    player_species_id: str
    enemy_species_id: str
    player_hp: int
    enemy_hp: int
    phase: BattlePhase = "intro"
    cursor: int = 0
    timer: float = 0.0
    resolved: bool = False
    player: SideCounters = field(default_factory=SideCounters)
    enemy: SideCounters = field(default_factory=SideCounters)
    pending_task_id: str | None = None
    log: Deque[str] = field(default_factory=deque)

    @property
    def is_over(self) -> bool:
        return self.phase in TERMINAL_PHASES
