"""Quest progress state data structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Set

from sylva.core.types import QuestStatus


@dataclass(slots=True)
class QuestProgress:
    """Tracks one quest. Status only moves forward: available, active, completed."""

    quest_id: str
    status: QuestStatus = "available"
    completed_targets: Set[str] = field(default_factory=set)
    requirement_met: bool = False
