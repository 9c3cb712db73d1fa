"""Creature stat block."""
from __future__ import annotations

from dataclasses import dataclass, replace

BASE_HP = 12
HP_PER_DEFENSE = 2


@dataclass(slots=True)
class Stats:
    """Level plus the four growable attributes; every field is a non-negative int."""

    level: int
    power: int
    defense: int
    speed: int
    morale: int

    def copy(self) -> "Stats":
        return replace(self)

    def get(self, name: str) -> int:
        return getattr(self, name)

    def to_dict(self) -> dict[str, int]:
        return {
            "level": self.level,
            "power": self.power,
            "defense": self.defense,
            "speed": self.speed,
            "morale": self.morale,
        }


def max_hp(stats: Stats) -> int:
    """Derived hit points; always recomputed, never stored."""
    return BASE_HP + stats.defense * HP_PER_DEFENSE
