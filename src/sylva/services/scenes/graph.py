"""Scene registry, frame clock entry point and battle ownership."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Dict, Iterable

from pygame.math import Vector2

from sylva.core.config import EngineConfig
from sylva.core.scheduler import TaskScheduler
from sylva.core.types import BattleOutcome
from sylva.domain.state import GameState
from sylva.services.battle_engine import BattleEngine
from sylva.services.errors import SceneError
from sylva.services.game_services import GameServices

from .base import Scene, SceneContext, normalize_key
from .render_models import BattlerView, BattleView, RenderModel

logger = logging.getLogger(__name__)


class SceneGraph:
    """Holds every scene, exactly one of which is active, plus at most one live battle.

    All simulation time enters through ``update``. Switching scenes tears down a
    live battle and cancels every task it scheduled.
    """

    def __init__(
        self,
        *,
        state: GameState,
        services: GameServices,
        config: EngineConfig | None = None,
        scheduler: TaskScheduler | None = None,
    ) -> None:
        self.state = state
        self.services = services
        self.config = config or EngineConfig()
        self.scheduler = scheduler or TaskScheduler()
        self.context = SceneContext(
            graph=self,
            state=state,
            scheduler=self.scheduler,
            services=services,
            config=self.config,
        )
        self._scenes: Dict[str, Scene] = {}
        self._active: Scene | None = None
        self.active_battle: BattleEngine | None = None

    def register(self, scene: Scene) -> None:
        self._scenes[scene.scene_id] = scene

    def register_all(self, scenes: Iterable[Scene]) -> None:
        for scene in scenes:
            self.register(scene)

    def has_scene(self, scene_id: str) -> bool:
        return scene_id in self._scenes

    def get_scene(self, scene_id: str) -> Scene:
        try:
            return self._scenes[scene_id]
        except KeyError as exc:
            raise SceneError(f"Scene '{scene_id}' is not registered.") from exc

    @property
    def active_scene(self) -> Scene:
        if self._active is None:
            raise SceneError("No scene is active.")
        return self._active

    def switch_scene(self, scene_id: str, spawn: Vector2 | None = None) -> None:
        target = self.get_scene(scene_id)
        self._teardown_battle()
        if self._active is not None:
            self._active.exit(self.context)
        logger.debug("Switching scene to %s", scene_id)
        self._active = target
        target.enter(self.context, spawn)

    def reset_scenes(self) -> None:
        self._teardown_battle()
        self.scheduler.clear()
        for scene in self._scenes.values():
            scene.reset()

    def start_battle(
        self,
        enemy_species_id: str,
        on_complete: Callable[[BattleOutcome], None],
    ) -> BattleEngine:
        """Create and activate a battle for the current companion."""
        if self.state.companion is None:
            raise SceneError("A battle needs a companion.")
        self._teardown_battle()
        battle = BattleEngine(
            companion=self.state.companion,
            enemy_species_id=enemy_species_id,
            species_repo=self.services.species_repo,
            scheduler=self.scheduler,
            rng=self.state.rng,
            config=self.config,
            is_active=lambda engine: self.active_battle is engine,
        )

        def _finished(outcome: BattleOutcome) -> None:
            if self.active_battle is battle:
                self.active_battle = None
            on_complete(outcome)

        battle.on_complete(_finished)
        self.active_battle = battle
        return battle

    def _teardown_battle(self) -> None:
        battle = self.active_battle
        if battle is None:
            return
        self.scheduler.cancel_owner(battle.battle_id)
        battle.abort(self.state)
        self.active_battle = None

    def update(self, dt: float) -> None:
        """Advance one frame. ``dt`` is clamped to ``config.max_dt``."""
        step = min(max(0.0, dt), self.config.max_dt)
        if self.active_battle is not None:
            self.active_battle.update(self.state, step)
        else:
            self.active_scene.update(self.context, step)
        self.scheduler.advance(step)

    def key_down(self, key: str) -> None:
        name = normalize_key(key)
        if name is None:
            return
        if self.active_battle is not None:
            self.active_battle.handle_input(self.state, name)
            return
        handler = self.active_scene.key_handler
        if handler is not None:
            handler.on_key_down(self.context, name)

    def key_up(self, key: str) -> None:
        name = normalize_key(key)
        if name is None:
            return
        handler = self.active_scene.key_handler
        if handler is not None:
            handler.on_key_up(self.context, name)

    def render_data(self) -> RenderModel:
        model = self.active_scene.render_data(self.context)
        battle = self.active_battle
        if battle is None:
            return model
        player = battle.get_player_snapshot()
        enemy = battle.get_enemy_snapshot()
        animations = battle.get_animations()
        view = BattleView(
            phase=battle.phase,
            player=BattlerView(player.name, player.species_id, player.level, player.hp, player.max_hp),
            enemy=BattlerView(enemy.name, enemy.species_id, enemy.level, enemy.hp, enemy.max_hp),
            menu_options=tuple(option.label for option in battle.get_menu_options()),
            cursor=battle.cursor,
            player_attacks=animations.player_attacks,
            player_hits=animations.player_hits,
            player_attack_id=animations.player_attack_id,
            enemy_attacks=animations.enemy_attacks,
            enemy_hits=animations.enemy_hits,
            enemy_attack_id=animations.enemy_attack_id,
            log_lines=tuple(battle.get_log()),
        )
        return replace(model, mode="battle", inventory=None, battle=view)
