"""Scene interface and the context passed into every scene call."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pygame.math import Vector2

from sylva.core.config import EngineConfig
from sylva.core.scheduler import TaskScheduler
from sylva.domain.state import GameState
from sylva.services.game_services import GameServices

from .render_models import RenderModel

if TYPE_CHECKING:
    from .graph import SceneGraph

_KEY_ALIASES = {
    "w": "up",
    "arrowup": "up",
    "s": "down",
    "arrowdown": "down",
    "a": "left",
    "arrowleft": "left",
    "d": "right",
    "arrowright": "right",
    "enter": "confirm",
    "return": "confirm",
    "space": "confirm",
    " ": "confirm",
    "escape": "cancel",
    "esc": "cancel",
    "i": "toggle-inventory",
    "tab": "toggle-inventory",
}
_CANONICAL_KEYS = {"up", "down", "left", "right", "confirm", "cancel", "toggle-inventory"}


def normalize_key(key: str) -> str | None:
    """Map raw key names (WASD, arrows, enter...) onto the named input keys."""
    lowered = key if key == " " else key.strip().lower()
    if lowered in _CANONICAL_KEYS:
        return lowered
    return _KEY_ALIASES.get(lowered)


@dataclass(slots=True)
class SceneContext:
    graph: "SceneGraph"
    state: GameState
    scheduler: TaskScheduler
    services: GameServices
    config: EngineConfig


class KeyHandler(ABC):
    @abstractmethod
    def on_key_down(self, ctx: SceneContext, key: str) -> None:
        ...

    def on_key_up(self, ctx: SceneContext, key: str) -> None:
        """Most handlers only care about presses."""


class Scene(ABC):
    """One screen of the game. Scenes that take no input leave ``key_handler`` as None."""

    scene_id: str
    key_handler: KeyHandler | None = None

    @abstractmethod
    def enter(self, ctx: SceneContext, spawn: Vector2 | None = None) -> None:
        ...

    @abstractmethod
    def update(self, ctx: SceneContext, dt: float) -> None:
        ...

    @abstractmethod
    def render_data(self, ctx: SceneContext) -> RenderModel:
        ...

    def exit(self, ctx: SceneContext) -> None:
        """Called on the outgoing scene after a switch has torn down any battle."""

    def reset(self) -> None:
        """Forget per-session scene state when a new game starts."""
