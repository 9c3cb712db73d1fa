"""Assemble a scene graph from the scene definitions."""
from __future__ import annotations

from typing import List

from sylva.core.config import EngineConfig
from sylva.core.scheduler import TaskScheduler
from sylva.domain.state import GameState, create_initial_state
from sylva.domain.tile_grid import TileGrid
from sylva.services.game_services import GameServices

from .base import Scene
from .exploration_scene import ExplorationScene
from .graph import SceneGraph
from .starter_scene import StarterScene
from .title_scene import TitleScene


def build_scene_graph(
    state: GameState,
    *,
    services: GameServices | None = None,
    config: EngineConfig | None = None,
    scheduler: TaskScheduler | None = None,
) -> SceneGraph:
    """Build every authored scene plus the title menu. Nothing is entered yet."""
    services = services or GameServices.from_definitions()
    graph = SceneGraph(state=state, services=services, config=config, scheduler=scheduler)
    legend = services.terrain_repo.legend()

    scenes: List[Scene] = [TitleScene()]
    for definition in services.scenes_repo.all():
        grid = TileGrid.from_rows(definition.rows, legend)
        if definition.kind == "starter":
            scenes.append(StarterScene(definition, grid))
        else:
            scenes.append(ExplorationScene(definition, grid))
    graph.register_all(scenes)
    return graph


def start_session(
    seed: int = 0,
    *,
    services: GameServices | None = None,
    config: EngineConfig | None = None,
) -> SceneGraph:
    """Create a fresh state and graph positioned on the title menu."""
    config = config or EngineConfig()
    state = create_initial_state(seed, log_capacity=config.log_capacity)
    graph = build_scene_graph(state, services=services, config=config)
    graph.switch_scene("title")
    return graph
