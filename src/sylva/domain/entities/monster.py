"""Runtime creature instances."""
from __future__ import annotations

from dataclasses import dataclass

from .stats import Stats


@dataclass(slots=True)
class MonsterInstance:
    """A companion or wild creature. The species is referenced by id only."""

    species_id: str
    stats: Stats
