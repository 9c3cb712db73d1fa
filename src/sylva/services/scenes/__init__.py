"""Scene interface, concrete scenes and the graph that switches between them."""

from .base import KeyHandler, Scene, SceneContext, normalize_key
from .builder import build_scene_graph, start_session
from .exploration_scene import ExplorationScene
from .graph import SceneGraph
from .render_models import RenderModel
from .starter_scene import StarterScene
from .title_scene import TitleScene

__all__ = [
    "ExplorationScene",
    "KeyHandler",
    "RenderModel",
    "Scene",
    "SceneContext",
    "SceneGraph",
    "StarterScene",
    "TitleScene",
    "build_scene_graph",
    "normalize_key",
    "start_session",
]
