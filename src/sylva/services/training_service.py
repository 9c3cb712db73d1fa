"""Dojo training stations."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from sylva.domain.defs import TrainingStationDef
from sylva.domain.needs import spend_hunger
from sylva.domain.state import GameState, append_log
from sylva.services.progression_service import apply_stat_boost

logger = logging.getLogger(__name__)

TRAINING_BADGE_ID = "training-badge"

_STAT_LABELS = {
    "power": "Power",
    "defense": "Defense",
    "speed": "Speed",
    "morale": "Morale",
}


@dataclass(slots=True)
class TrainingResult:
    success: bool
    message: str
    badge_awarded: bool = False


def train_at_station(
    state: GameState,
    station: TrainingStationDef,
    scene_station_ids: Iterable[str],
) -> TrainingResult:
    """Spend hunger to raise one stat.

    The badge is granted on the session that completes the scene's full set of
    stations, which can only happen once because the set never shrinks.
    """
    if state.companion is None:
        result = TrainingResult(False, "You need a companion to train.")
        append_log(state, result.message)
        return result
    if not spend_hunger(state, station.hunger_cost):
        result = TrainingResult(False, "Your companion is too hungry to keep going.")
        append_log(state, result.message)
        return result

    apply_stat_boost(state.companion, {station.stat: station.reward})
    label = _STAT_LABELS.get(station.stat, station.stat)
    result = TrainingResult(True, f"Training session complete! {label} rises by {station.reward}.")
    append_log(state, result.message)

    required = set(scene_station_ids)
    already_complete = required.issubset(state.completed_station_ids)
    state.completed_station_ids.add(station.id)
    if not already_complete and required.issubset(state.completed_station_ids):
        state.inventory.add(TRAINING_BADGE_ID)
        append_log(state, "You earned the Training Badge!")
        logger.info("Training badge awarded")
        result.badge_awarded = True
    return result
