"""Experience growth and evolution."""
from __future__ import annotations

import logging
import math
from typing import Dict, List

from sylva.core.types import GROWABLE_STATS
from sylva.data.repositories import SpeciesRepository
from sylva.domain.defs import EvolutionRuleDef
from sylva.domain.entities import MonsterInstance
from sylva.services.factories import get_species

logger = logging.getLogger(__name__)

GROWTH_RATIOS: Dict[str, float] = {
    "power": 0.8,
    "defense": 0.6,
    "speed": 0.7,
    "morale": 0.9,
}

EVOLUTION_POLICIES = ("single", "fixpoint")


def _first_satisfied_rule(instance: MonsterInstance, species_repo: SpeciesRepository) -> EvolutionRuleDef | None:
    species = get_species(instance.species_id, species_repo)
    for rule in species.evolutions:
        if rule.is_met(instance.stats):
            return rule
    return None


def evolve(instance: MonsterInstance, species_id: str, *, species_repo: SpeciesRepository) -> str:
    """Turn ``instance`` into ``species_id`` in place, keeping its level.

    The target is resolved before anything changes, so an unknown id leaves the
    instance untouched.
    """
    target = get_species(species_id, species_repo)
    stats = target.base_stats.copy()
    stats.level = instance.stats.level
    instance.species_id = target.id
    instance.stats = stats
    logger.info("Companion evolved into %s", target.id)
    return f"Evolution! {target.name} joins your team."


def apply_experience(
    instance: MonsterInstance,
    xp: int,
    *,
    species_repo: SpeciesRepository,
    policy: str = "single",
) -> List[str]:
    """Grow ``instance`` by ``xp`` and evaluate evolution; returns log lines.

    ``single`` applies at most the first satisfied rule of the current species.
    ``fixpoint`` keeps evaluating the new species until nothing matches, never
    entering the same species twice in one grant.
    """
    if xp <= 0:
        return []
    if policy not in EVOLUTION_POLICIES:
        raise ValueError(f"Unknown evolution policy '{policy}'.")

    species = get_species(instance.species_id, species_repo)
    instance.stats.level += xp
    for stat in GROWABLE_STATS:
        growth = math.ceil(xp * GROWTH_RATIOS[stat])
        setattr(instance.stats, stat, instance.stats.get(stat) + growth)
    messages = [f"{species.name} gains {xp} experience points!"]

    visited = {instance.species_id}
    while True:
        rule = _first_satisfied_rule(instance, species_repo)
        if rule is None or rule.target in visited:
            break
        messages.append(evolve(instance, rule.target, species_repo=species_repo))
        visited.add(rule.target)
        if policy == "single":
            break
    return messages


def apply_stat_boost(instance: MonsterInstance, boosts: Dict[str, int]) -> None:
    for stat, amount in boosts.items():
        if stat in GROWABLE_STATS and amount:
            setattr(instance.stats, stat, max(0, instance.stats.get(stat) + amount))
