"""Bundle of repositories and services shared by every scene."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sylva.data.repositories import (
    ItemsRepository,
    QuestsRepository,
    ScenesRepository,
    SpeciesRepository,
    TerrainRepository,
)
from sylva.services.inventory_service import InventoryService
from sylva.services.quest_service import QuestService


@dataclass(slots=True)
class GameServices:
    species_repo: SpeciesRepository
    items_repo: ItemsRepository
    quests_repo: QuestsRepository
    scenes_repo: ScenesRepository
    terrain_repo: TerrainRepository
    quest_service: QuestService
    inventory_service: InventoryService

    @classmethod
    def from_definitions(cls, base_path: Path | str | None = None) -> "GameServices":
        """Wire every repository against one definitions directory."""
        items_repo = ItemsRepository(base_path)
        scenes_repo = ScenesRepository(base_path)
        quests_repo = QuestsRepository(items_repo=items_repo, scenes_repo=scenes_repo, base_path=base_path)
        return cls(
            species_repo=SpeciesRepository(base_path),
            items_repo=items_repo,
            quests_repo=quests_repo,
            scenes_repo=scenes_repo,
            terrain_repo=TerrainRepository(base_path),
            quest_service=QuestService(quests_repo=quests_repo, items_repo=items_repo),
            inventory_service=InventoryService(items_repo=items_repo),
        )
