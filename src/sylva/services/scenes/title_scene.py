"""Title menu: start a new game or resume the last scene."""
from __future__ import annotations

from typing import Tuple

from pygame.math import Vector2

from sylva.domain.state import append_log, reset_state

from .base import KeyHandler, Scene, SceneContext
from .render_models import RenderModel, TitleView

TITLE_SCENE_ID = "title"
FIRST_SCENE_ID = "starter"
MENU_OPTIONS: Tuple[Tuple[str, str], ...] = (("new-game", "New Game"), ("continue", "Continue"))


class TitleScene(Scene, KeyHandler):
    def __init__(self) -> None:
        self.scene_id = TITLE_SCENE_ID
        self.key_handler = self
        self.cursor = 0

    def enter(self, ctx: SceneContext, spawn: Vector2 | None = None) -> None:
        self.cursor = 0
        append_log(ctx.state, "Press confirm to begin your adventure.")

    def update(self, ctx: SceneContext, dt: float) -> None:
        return

    def render_data(self, ctx: SceneContext) -> RenderModel:
        return RenderModel(
            mode="title",
            scene_id=self.scene_id,
            title=TitleView(options=tuple(label for _, label in MENU_OPTIONS), cursor=self.cursor),
        )

    def on_key_down(self, ctx: SceneContext, key: str) -> None:
        if key in ("up", "left"):
            self.cursor = (self.cursor - 1) % len(MENU_OPTIONS)
        elif key in ("down", "right"):
            self.cursor = (self.cursor + 1) % len(MENU_OPTIONS)
        elif key == "confirm":
            option_id = MENU_OPTIONS[self.cursor][0]
            if option_id == "new-game":
                self.start_new_game(ctx)
            else:
                self.continue_game(ctx)

    def start_new_game(self, ctx: SceneContext) -> None:
        reset_state(ctx.state)
        ctx.graph.reset_scenes()
        append_log(ctx.state, "A new adventure begins.")
        ctx.graph.switch_scene(FIRST_SCENE_ID)

    def continue_game(self, ctx: SceneContext) -> None:
        state = ctx.state
        target = state.current_scene_id
        if state.companion is None or target == self.scene_id or not ctx.graph.has_scene(target):
            append_log(state, "Nothing to resume. Start a new game.")
            return
        ctx.graph.switch_scene(target, Vector2(state.position))
