"""Species, attack and evolution definitions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Tuple

from sylva.domain.entities.stats import Stats


@dataclass(slots=True, frozen=True)
class AttackDef:
    """One selectable attack. ``animation`` is cosmetic and passed through untouched."""

    id: str
    name: str
    damage: int
    success_rate: float
    description: str
    animation: Mapping[str, object] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class EvolutionRuleDef:
    """Evolve into ``target`` once every stat in ``requires`` reaches its minimum."""

    target: str
    requires: Dict[str, int]
    description: str = ""

    def is_met(self, stats: Stats) -> bool:
        return all(stats.get(name) >= minimum for name, minimum in self.requires.items())


@dataclass(slots=True, frozen=True)
class SpeciesDef:
    id: str
    name: str
    description: str
    base_stats: Stats
    attacks: Tuple[AttackDef, ...]
    evolutions: Tuple[EvolutionRuleDef, ...] = ()
