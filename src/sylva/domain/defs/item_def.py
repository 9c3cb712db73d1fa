"""Item definition structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from sylva.core.types import ItemKind


@dataclass(slots=True, frozen=True)
class ItemDef:
    """Food restores hunger, boosts raise companion stats, quest items are inert."""

    id: str
    name: str
    description: str
    kind: ItemKind
    hunger_restore: int = 0
    stat_boost: Dict[str, int] = field(default_factory=dict)
