"""Items repository."""
from __future__ import annotations

from typing import Dict

from sylva.core.types import GROWABLE_STATS
from sylva.data.errors import DataValidationError
from sylva.data.repositories.base import RepositoryBase
from sylva.domain.defs import ItemDef

_ITEM_KINDS = {"food", "boost", "quest"}


class ItemsRepository(RepositoryBase[ItemDef]):
    """Loads and validates item definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("items.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ItemDef]:
        items: Dict[str, ItemDef] = {}
        for raw_id, payload in raw.items():
            context = f"item '{raw_id}'"
            item_data = self._require_mapping(payload, context)
            self._assert_fields(
                item_data,
                {"name", "description", "kind"},
                {"hunger_restore", "stat_boost"},
                context,
            )
            kind = self._require_str(item_data["kind"], f"{context} kind")
            if kind not in _ITEM_KINDS:
                raise DataValidationError(f"{context} kind must be one of {sorted(_ITEM_KINDS)}.")
            stat_boost = self._require_int_map(item_data.get("stat_boost", {}), f"{context} stat_boost")
            unknown = set(stat_boost) - set(GROWABLE_STATS)
            if unknown:
                raise DataValidationError(f"{context} boosts unknown stats {sorted(unknown)}.")
            items[raw_id] = ItemDef(
                id=raw_id,
                name=self._require_str(item_data["name"], f"{context} name"),
                description=self._require_str(item_data["description"], f"{context} description"),
                kind=kind,  # type: ignore[arg-type]
                hunger_restore=self._require_int(item_data.get("hunger_restore", 0), f"{context} hunger_restore"),
                stat_boost=stat_boost,
            )
        return items
