"""Runtime entity exports."""

from .monster import MonsterInstance
from .stats import Stats, max_hp

__all__ = [
    "MonsterInstance",
    "Stats",
    "max_hp",
]
