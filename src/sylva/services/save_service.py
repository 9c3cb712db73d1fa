"""Serialization helpers for save/continue."""
from __future__ import annotations

from collections import deque
from typing import Any, Dict, List, Mapping, Set

from pygame.math import Vector2

from sylva.core.rng import RNG
from sylva.core.types import GROWABLE_STATS
from sylva.data.repositories import SpeciesRepository
from sylva.domain.entities import MonsterInstance, Stats
from sylva.domain.inventory import InventoryLedger
from sylva.domain.quest_state import QuestProgress
from sylva.domain.state import DEFAULT_LOG_CAPACITY, MAX_HUNGER, GameState
from sylva.services.errors import SaveLoadError

SavePayload = Dict[str, Any]
_VALID_QUEST_STATUSES = ("available", "active", "completed")
_STAT_FIELDS = ("level", *GROWABLE_STATS)


class SaveService:
    """Converts runtime state to and from a flat, JSON-friendly payload.

    The RNG is rebuilt from the stored seed, so a loaded game replays the same
    stream from the beginning rather than resuming mid-stream.
    """

    def __init__(
        self,
        *,
        species_repo: SpeciesRepository | None = None,
        log_capacity: int = DEFAULT_LOG_CAPACITY,
    ) -> None:
        self._species_repo = species_repo
        self._log_capacity = log_capacity

    def serialize(self, state: GameState) -> SavePayload:
        """Return a JSON-serializable payload for disk persistence."""
        companion = None
        if state.companion is not None:
            companion = {
                "species_id": state.companion.species_id,
                "stats": state.companion.stats.to_dict(),
            }
        return {
            "seed": state.seed,
            "position": [float(state.position.x), float(state.position.y)],
            "current_scene_id": state.current_scene_id,
            "unlocked_scene_ids": sorted(state.unlocked_scene_ids),
            "defeated_boss_ids": sorted(state.defeated_boss_ids),
            "completed_station_ids": sorted(state.completed_station_ids),
            "inventory": [
                {"item_id": entry.item_id, "quantity": entry.quantity} for entry in state.inventory.entries
            ],
            "quests": [
                {
                    "quest_id": progress.quest_id,
                    "status": progress.status,
                    "completed_targets": sorted(progress.completed_targets),
                    "requirement_met": progress.requirement_met,
                }
                for progress in state.quests
            ],
            "companion": companion,
            "gold": state.gold,
            "hunger": state.hunger,
            "log": list(state.log),
        }

    def deserialize(self, payload: Mapping[str, Any]) -> GameState:
        """Rehydrate a GameState from a persisted payload."""
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")

        seed = self._require_int(payload.get("seed"), "seed")
        state = GameState(
            seed=seed,
            rng=RNG(seed),
            log=deque(maxlen=self._log_capacity),
        )
        state.position = self._coerce_position(payload.get("position"))
        state.current_scene_id = self._require_str(payload.get("current_scene_id"), "current_scene_id")
        state.unlocked_scene_ids = set(self._require_str_list(payload.get("unlocked_scene_ids"), "unlocked_scene_ids"))
        state.defeated_boss_ids = set(self._require_str_list(payload.get("defeated_boss_ids"), "defeated_boss_ids"))
        state.completed_station_ids = set(
            self._require_str_list(payload.get("completed_station_ids", []), "completed_station_ids")
        )
        state.inventory = self._coerce_inventory(payload.get("inventory"))
        state.quests = self._coerce_quests(payload.get("quests"))
        state.companion = self._coerce_companion(payload.get("companion"))
        state.gold = self._coerce_non_negative_int(payload.get("gold"), "gold", default=0)
        hunger = self._coerce_non_negative_int(payload.get("hunger"), "hunger", default=MAX_HUNGER)
        state.hunger = min(MAX_HUNGER, hunger)
        state.log.extend(self._require_str_list(payload.get("log", []), "log"))
        return state

    def _coerce_position(self, value: Any) -> Vector2:
        if not isinstance(value, list) or len(value) != 2:
            raise SaveLoadError("position must be an [x, y] pair.")
        coords = []
        for index, coord in enumerate(value):
            if isinstance(coord, bool) or not isinstance(coord, (int, float)):
                raise SaveLoadError(f"position[{index}] must be a number.")
            coords.append(float(coord))
        return Vector2(coords[0], coords[1])

    def _coerce_inventory(self, value: Any) -> InventoryLedger:
        ledger = InventoryLedger()
        for index, raw in enumerate(self._require_list(value, "inventory")):
            entry = self._require_dict(raw, f"inventory[{index}]")
            item_id = self._require_str(entry.get("item_id"), f"inventory[{index}].item_id")
            quantity = self._require_int(entry.get("quantity"), f"inventory[{index}].quantity")
            if quantity <= 0:
                raise SaveLoadError(f"inventory[{index}].quantity must be positive.")
            # Split stacks of one item merge into a single stack.
            ledger.add(item_id, quantity)
        return ledger

    def _coerce_quests(self, value: Any) -> List[QuestProgress]:
        quests: List[QuestProgress] = []
        seen: Set[str] = set()
        for index, raw in enumerate(self._require_list(value, "quests")):
            entry = self._require_dict(raw, f"quests[{index}]")
            quest_id = self._require_str(entry.get("quest_id"), f"quests[{index}].quest_id")
            if quest_id in seen:
                raise SaveLoadError(f"quests[{index}] repeats quest '{quest_id}'.")
            seen.add(quest_id)
            status = entry.get("status")
            if status not in _VALID_QUEST_STATUSES:
                raise SaveLoadError(f"quests[{index}].status is invalid: {status}")
            requirement_met = entry.get("requirement_met", False)
            if not isinstance(requirement_met, bool):
                raise SaveLoadError(f"quests[{index}].requirement_met must be a boolean.")
            quests.append(
                QuestProgress(
                    quest_id=quest_id,
                    status=status,
                    completed_targets=set(
                        self._require_str_list(entry.get("completed_targets", []), f"quests[{index}].completed_targets")
                    ),
                    requirement_met=requirement_met,
                )
            )
        return quests

    def _coerce_companion(self, value: Any) -> MonsterInstance | None:
        if value is None:
            return None
        data = self._require_dict(value, "companion")
        species_id = self._require_str(data.get("species_id"), "companion.species_id")
        if self._species_repo is not None and not self._species_repo.has(species_id):
            raise SaveLoadError(f"Unknown companion species '{species_id}'.")
        raw_stats = self._require_dict(data.get("stats"), "companion.stats")
        values = {
            name: self._coerce_non_negative_int(raw_stats.get(name), f"companion.stats.{name}", default=None)
            for name in _STAT_FIELDS
        }
        return MonsterInstance(species_id=species_id, stats=Stats(**values))

    @staticmethod
    def _require_str(value: Any, context: str) -> str:
        if not isinstance(value, str):
            raise SaveLoadError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: Any, context: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise SaveLoadError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_list(value: Any, context: str) -> list:
        if not isinstance(value, list):
            raise SaveLoadError(f"{context} must be a list.")
        return value

    @staticmethod
    def _require_dict(value: Any, context: str) -> Mapping[str, Any]:
        if not isinstance(value, Mapping):
            raise SaveLoadError(f"{context} must be an object.")
        return value

    def _require_str_list(self, value: Any, context: str) -> List[str]:
        return [self._require_str(entry, f"{context}[{index}]") for index, entry in enumerate(self._require_list(value, context))]

    def _coerce_non_negative_int(self, value: Any, context: str, *, default: int | None) -> int:
        if value is None:
            if default is None:
                raise SaveLoadError(f"{context} is required.")
            return default
        value_int = self._require_int(value, context)
        if value_int < 0:
            raise SaveLoadError(f"{context} must be a non-negative integer.")
        return value_int
