"""Quests repository."""
from __future__ import annotations

from typing import AbstractSet, Dict

from sylva.data.errors import DataReferenceError, DataValidationError
from sylva.data.repositories.base import RepositoryBase
from sylva.data.repositories.items_repo import ItemsRepository
from sylva.data.repositories.scenes_repo import ScenesRepository
from sylva.domain.defs import QuestDef, QuestRewardDef


class QuestsRepository(RepositoryBase[QuestDef]):
    """Loads hunt and delivery quest definitions.

    Delivery items, reward items and reward unlocks are checked against the items
    and scenes repositories so a bad reference fails at load time.
    """

    def __init__(
        self,
        items_repo: ItemsRepository | None = None,
        scenes_repo: ScenesRepository | None = None,
        base_path=None,
    ) -> None:
        super().__init__("quests.json", base_path)
        self._items_repo = items_repo or ItemsRepository(base_path=base_path)
        self._scenes_repo = scenes_repo or ScenesRepository(base_path=base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, QuestDef]:
        item_ids = set(self._items_repo.ids())
        scene_ids = set(self._scenes_repo.ids())

        quests: Dict[str, QuestDef] = {}
        for raw_id, payload in raw.items():
            context = f"quest '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_fields(
                data,
                {"title", "description", "type", "reward"},
                {"targets", "item_id"},
                context,
            )
            quest_type = self._require_str(data["type"], f"{context} type")
            targets = self._require_str_list(data.get("targets", []), f"{context} targets")
            item_id = self._optional_str(data.get("item_id"), f"{context} item_id")
            if quest_type == "hunt":
                if not targets:
                    raise DataValidationError(f"{context} hunt quests need at least one target.")
            elif quest_type == "delivery":
                if item_id is None:
                    raise DataValidationError(f"{context} delivery quests need an item_id.")
                if item_id not in item_ids:
                    raise DataReferenceError(f"{context} asks for missing item '{item_id}'.")
            else:
                raise DataValidationError(f"{context} type must be 'hunt' or 'delivery'.")
            quests[raw_id] = QuestDef(
                quest_id=raw_id,
                title=self._require_str(data["title"], f"{context} title"),
                description=self._require_str(data["description"], f"{context} description"),
                quest_type=quest_type,  # type: ignore[arg-type]
                targets=targets,
                item_id=item_id,
                reward=self._parse_reward(data["reward"], f"{context} reward", item_ids, scene_ids),
            )
        return quests

    def _parse_reward(
        self,
        value: object,
        context: str,
        item_ids: AbstractSet[str],
        scene_ids: AbstractSet[str],
    ) -> QuestRewardDef:
        data = self._require_mapping(value, context)
        self._assert_fields(data, set(), {"gold", "items", "stats", "hunger", "unlocks"}, context)
        items = self._require_int_map(data.get("items", {}), f"{context} items")
        unlocks = self._require_str_list(data.get("unlocks", []), f"{context} unlocks")
        for item_id in items:
            if item_id not in item_ids:
                raise DataReferenceError(f"{context} grants missing item '{item_id}'.")
        for scene_id in unlocks:
            if scene_id not in scene_ids:
                raise DataReferenceError(f"{context} unlocks missing scene '{scene_id}'.")
        return QuestRewardDef(
            gold=self._require_int(data.get("gold", 0), f"{context} gold"),
            items=items,
            stats=self._require_int_map(data.get("stats", {}), f"{context} stats"),
            hunger=self._require_int(data.get("hunger", 0), f"{context} hunger"),
            unlocks=unlocks,
        )
