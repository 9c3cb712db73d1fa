"""Factory for creature instances."""
from __future__ import annotations

from sylva.data.repositories import SpeciesRepository
from sylva.domain.defs import SpeciesDef
from sylva.domain.entities import MonsterInstance
from sylva.services.errors import FactoryError


def get_species(species_id: str, species_repo: SpeciesRepository) -> SpeciesDef:
    """Look up a species, converting a missing id into a FactoryError."""
    try:
        return species_repo.get(species_id)
    except KeyError as exc:
        raise FactoryError(f"Species '{species_id}' not found.") from exc


def create_monster_instance(species_id: str, species_repo: SpeciesRepository) -> MonsterInstance:
    """Instantiate a creature at its species' base stats."""
    species = get_species(species_id, species_repo)
    return MonsterInstance(species_id=species.id, stats=species.base_stats.copy())
