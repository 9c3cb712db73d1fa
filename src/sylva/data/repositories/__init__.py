"""Repository exports."""

from .items_repo import ItemsRepository
from .quests_repo import QuestsRepository
from .scenes_repo import ScenesRepository
from .species_repo import SpeciesRepository
from .terrain_repo import TerrainRepository

__all__ = [
    "ItemsRepository",
    "QuestsRepository",
    "ScenesRepository",
    "SpeciesRepository",
    "TerrainRepository",
]
