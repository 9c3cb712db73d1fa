"""Quest definition data structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from sylva.core.types import QuestType


@dataclass(slots=True, frozen=True)
class QuestRewardDef:
    gold: int = 0
    items: Dict[str, int] = field(default_factory=dict)
    stats: Dict[str, int] = field(default_factory=dict)
    hunger: int = 0
    unlocks: Tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class QuestDef:
    """Hunt quests list their ``targets``; delivery quests name one ``item_id``."""

    quest_id: str
    title: str
    description: str
    quest_type: QuestType
    targets: Tuple[str, ...] = ()
    item_id: str | None = None
    reward: QuestRewardDef = field(default_factory=QuestRewardDef)
