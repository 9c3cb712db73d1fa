"""Opening terrace where the player picks a companion from three pedestals."""
from __future__ import annotations

from typing import List, Tuple

from pygame.math import Vector2

from sylva.domain.defs import PedestalDef, SceneDef
from sylva.domain.state import append_log
from sylva.domain.tile_grid import TileGrid
from sylva.domain.geometry import tile_to_pixel
from sylva.services.factories import create_monster_instance

from .base import SceneContext
from .exploration_scene import INTERACT_RADIUS, ExplorationScene

UNLOCKED_BY_CHOICE = "village"
STARTING_SUPPLIES: Tuple[Tuple[str, int], ...] = (("meat", 2), ("fruit", 1))


class StarterScene(ExplorationScene):
    def __init__(self, definition: SceneDef, grid: TileGrid) -> None:
        super().__init__(definition, grid)
        self.pedestals: List[Tuple[PedestalDef, Vector2]] = [
            (pedestal, tile_to_pixel(*pedestal.position)) for pedestal in definition.pedestals
        ]

    def _interact_extra(self, ctx: SceneContext) -> bool:
        if ctx.state.companion is not None:
            return False
        position = ctx.state.position
        nearby = [
            (position.distance_to(pedestal_position), pedestal)
            for pedestal, pedestal_position in self.pedestals
            if position.distance_to(pedestal_position) < INTERACT_RADIUS
        ]
        if not nearby:
            return False
        pedestal = min(nearby, key=lambda pair: pair[0])[1]
        self.choose_companion(ctx, pedestal.species_id)
        return True

    def choose_companion(self, ctx: SceneContext, species_id: str) -> None:
        """Create the companion, open the bridge and hand out starting food."""
        state = ctx.state
        species = ctx.services.species_repo.get(species_id)
        state.companion = create_monster_instance(species_id, ctx.services.species_repo)
        state.unlocked_scene_ids.add(UNLOCKED_BY_CHOICE)
        append_log(state, f"You choose {species.name}! {species.description}")
        for item_id, quantity in STARTING_SUPPLIES:
            state.inventory.add(item_id, quantity)
        append_log(state, "You receive a few provisions for the road.")
