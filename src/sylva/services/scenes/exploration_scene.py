"""Tile-map exploration: movement, wild encounters, NPCs, training and edge links."""
from __future__ import annotations

import logging
from typing import List, Set

from pygame.math import Vector2

from sylva.core.types import BattleOutcome
from sylva.domain.defs import NpcDef, SceneDef, TrainingStationDef, TransitionDef
from sylva.domain.encounters import (
    CONFIRM_RADIUS,
    DEFEAT_COOLDOWN,
    ESCAPE_COOLDOWN,
    TRIGGER_RADIUS,
    EncounterEntity,
    EncounterRoster,
)
from sylva.domain.geometry import TILE_SIZE, tile_to_pixel
from sylva.domain.movement import facing_for, movement_intent, resolve_movement
from sylva.domain.needs import update_needs
from sylva.domain.state import append_log
from sylva.domain.tile_grid import TileGrid
from sylva.services.progression_service import apply_experience
from sylva.services.training_service import train_at_station

from .base import KeyHandler, Scene, SceneContext
from .render_models import (
    EncounterView,
    InventoryEntryView,
    InventoryView,
    NpcView,
    PanelView,
    PlayerView,
    RenderModel,
)

logger = logging.getLogger(__name__)

EDGE_THRESHOLD = TILE_SIZE * 0.9
INTERACT_RADIUS = 40.0
BOSS_XP = 4
NORMAL_XP = 2

NO_COMPANION_MESSAGE = "You must choose a companion before fighting."
ESCAPE_MESSAGE = "You flee and return to a safe spot."
DEFEAT_MESSAGE = "Your companion is too weak. Go back and prepare."


class ExplorationScene(Scene, KeyHandler):
    """A walkable map built from a scene definition."""

    def __init__(self, definition: SceneDef, grid: TileGrid) -> None:
        self.scene_id = definition.scene_id
        self.definition = definition
        self.grid = grid
        self.key_handler = self
        self.spawn = tile_to_pixel(*definition.spawn)
        self.roster = EncounterRoster.from_defs(definition.encounters)
        self.npcs = [(npc, tile_to_pixel(*npc.position)) for npc in definition.npcs]
        self.stations = [(station, tile_to_pixel(*station.position)) for station in definition.stations]
        self.facing = "down"
        self.inventory_open = False
        self.inventory_cursor = 0
        self._pressed: Set[str] = set()
        self._blocked_edges: Set[str] = set()
        self._pre_battle_position: Vector2 | None = None

    # ------------------------------------------------------------------ Scene
    def enter(self, ctx: SceneContext, spawn: Vector2 | None = None) -> None:
        state = ctx.state
        state.current_scene_id = self.scene_id
        state.unlocked_scene_ids.add(self.scene_id)
        state.position = Vector2(spawn) if spawn is not None else Vector2(self.spawn)
        self._pressed.clear()
        self._blocked_edges.clear()
        self.inventory_open = False
        append_log(state, self.definition.intro)
        logger.debug("Entered scene %s at %s", self.scene_id, state.position)

    def exit(self, ctx: SceneContext) -> None:
        self._pressed.clear()
        self.inventory_open = False

    def reset(self) -> None:
        self.roster.reset()
        self.facing = "down"
        self._pressed.clear()
        self._blocked_edges.clear()
        self._pre_battle_position = None
        self.inventory_open = False

    def update(self, ctx: SceneContext, dt: float) -> None:
        state = ctx.state
        update_needs(state, dt)
        if not self.inventory_open:
            intent = movement_intent(self._pressed)
            self.facing = facing_for(intent, self.facing)
            state.position = resolve_movement(self.grid, state.position, intent, ctx.config.player_speed, dt)
        self.roster.animate(dt)

        if state.companion is not None:
            entity = self.roster.find_nearby(state.position, TRIGGER_RADIUS)
            if entity is not None:
                self._start_battle(ctx, entity)
                return
        self._check_transitions(ctx)

    def render_data(self, ctx: SceneContext) -> RenderModel:
        state = ctx.state
        services = ctx.services
        companion_name = "None"
        if state.companion is not None:
            companion_name = services.species_repo.get(state.companion.species_id).name
        panel = PanelView(
            title=self.definition.name,
            terrain=self.grid.terrain_name_at(state.position.x, state.position.y),
            companion_name=companion_name,
            gold=state.gold,
            hunger=state.hunger,
            quest_lines=tuple(services.quest_service.build_quest_lines(state)),
            log_lines=tuple(state.log),
        )
        inventory = None
        if self.inventory_open:
            views = services.inventory_service.build_inventory_view(state)
            inventory = InventoryView(
                entries=tuple(
                    InventoryEntryView(
                        item_id=view.item_id,
                        name=view.name,
                        quantity=view.quantity,
                        selected=index == self.inventory_cursor,
                    )
                    for index, view in enumerate(views)
                ),
                cursor=self.inventory_cursor,
            )
        return RenderModel(
            mode="inventory" if self.inventory_open else "exploration",
            scene_id=self.scene_id,
            tiles=self.grid.rows,
            encounters=tuple(
                EncounterView(
                    entity_id=entity.id,
                    species_id=entity.species_id,
                    x=float(entity.position.x),
                    y=float(entity.position.y),
                    status=entity.status,
                    boss=entity.boss,
                )
                for entity in self.roster.entities
            ),
            npcs=tuple(
                NpcView(npc_id=npc.id, name=npc.name, x=float(position.x), y=float(position.y))
                for npc, position in self.npcs
            ),
            player=PlayerView(x=float(state.position.x), y=float(state.position.y), facing=self.facing),
            panel=panel,
            inventory=inventory,
        )

    # ------------------------------------------------------------------ Input
    def on_key_down(self, ctx: SceneContext, key: str) -> None:
        if self.inventory_open:
            self._handle_inventory_key(ctx, key)
            return
        if key == "toggle-inventory":
            self.inventory_open = True
            self.inventory_cursor = 0
            self._pressed.clear()
        elif key == "confirm":
            self._interact(ctx)
        elif key in ("up", "down", "left", "right"):
            self._pressed.add(key)

    def on_key_up(self, ctx: SceneContext, key: str) -> None:
        self._pressed.discard(key)

    def _handle_inventory_key(self, ctx: SceneContext, key: str) -> None:
        if key in ("cancel", "toggle-inventory"):
            self.inventory_open = False
            return
        entries = ctx.state.inventory.entries
        if not entries:
            return
        if key == "up":
            self.inventory_cursor = (self.inventory_cursor - 1) % len(entries)
        elif key == "down":
            self.inventory_cursor = (self.inventory_cursor + 1) % len(entries)
        elif key == "confirm":
            index = min(self.inventory_cursor, len(entries) - 1)
            result = ctx.services.inventory_service.use_item(ctx.state, entries[index].item_id)
            append_log(ctx.state, result.message)
            remaining = len(ctx.state.inventory.entries)
            self.inventory_cursor = min(self.inventory_cursor, max(0, remaining - 1))

    # ------------------------------------------------------------ Interaction
    def _interact(self, ctx: SceneContext) -> None:
        """Confirm priority: NPC, training station, scene extras, nearby creature."""
        position = ctx.state.position
        npc = self._nearest_npc(position)
        if npc is not None:
            ctx.services.quest_service.talk_to_npc(ctx.state, npc)
            return
        station = self._nearest_station(position)
        if station is not None:
            train_at_station(ctx.state, station, [candidate.id for candidate, _ in self.stations])
            return
        if self._interact_extra(ctx):
            return

        entity = self.roster.find_nearby(position, CONFIRM_RADIUS)
        if entity is None:
            return
        if ctx.state.companion is None:
            append_log(ctx.state, NO_COMPANION_MESSAGE)
            return
        self._start_battle(ctx, entity)

    def _interact_extra(self, ctx: SceneContext) -> bool:
        """Hook for scene-specific interactables; True when the confirm was consumed."""
        return False

    def _nearest_npc(self, position: Vector2) -> NpcDef | None:
        candidates = [
            (position.distance_to(npc_position), npc)
            for npc, npc_position in self.npcs
            if position.distance_to(npc_position) < INTERACT_RADIUS
        ]
        return min(candidates, key=lambda pair: pair[0])[1] if candidates else None

    def _nearest_station(self, position: Vector2) -> TrainingStationDef | None:
        candidates = [
            (position.distance_to(station_position), station)
            for station, station_position in self.stations
            if position.distance_to(station_position) < INTERACT_RADIUS
        ]
        return min(candidates, key=lambda pair: pair[0])[1] if candidates else None

    # ------------------------------------------------------------- Transitions
    def _edge_reached(self, edge: str, position: Vector2) -> bool:
        if edge == "west":
            return position.x < EDGE_THRESHOLD
        if edge == "east":
            return position.x > self.grid.pixel_width - EDGE_THRESHOLD
        if edge == "north":
            return position.y < EDGE_THRESHOLD
        return position.y > self.grid.pixel_height - EDGE_THRESHOLD

    def _check_transitions(self, ctx: SceneContext) -> None:
        state = ctx.state
        reached: List[TransitionDef] = [
            transition
            for transition in self.definition.transitions
            if self._edge_reached(transition.edge, state.position)
        ]
        reached_edges = {transition.edge for transition in reached}
        self._blocked_edges &= reached_edges

        for transition in reached:
            if transition.unlock_id and transition.unlock_id not in state.unlocked_scene_ids:
                if transition.edge not in self._blocked_edges:
                    self._blocked_edges.add(transition.edge)
                    append_log(state, transition.locked_message or "The way is blocked for now.")
                    logger.debug("Transition %s -> %s refused", self.scene_id, transition.target)
                continue
            append_log(state, transition.message)
            ctx.graph.switch_scene(transition.target, tile_to_pixel(*transition.spawn))
            return

    # ------------------------------------------------------------------ Battle
    def _start_battle(self, ctx: SceneContext, entity: EncounterEntity) -> None:
        entity.begin_battle()
        self._pre_battle_position = Vector2(ctx.state.position)
        self._pressed.clear()
        append_log(ctx.state, "The battle begins! Use up/down to choose an action.")
        ctx.graph.start_battle(
            entity.species_id,
            lambda outcome: self._handle_battle_outcome(ctx, entity, outcome),
        )

    def _handle_battle_outcome(self, ctx: SceneContext, entity: EncounterEntity, outcome: BattleOutcome) -> None:
        state = ctx.state
        if outcome == "victory":
            entity.mark_defeated()
            self._reward_victory(ctx, entity)
        elif outcome == "escape":
            entity.release(ESCAPE_COOLDOWN)
            if self._pre_battle_position is not None:
                state.position = Vector2(self._pre_battle_position)
            append_log(state, ESCAPE_MESSAGE)
        else:
            entity.release(DEFEAT_COOLDOWN)
            state.position = Vector2(self.spawn)
            append_log(state, DEFEAT_MESSAGE)
        self._pre_battle_position = None

    def _reward_victory(self, ctx: SceneContext, entity: EncounterEntity) -> None:
        state = ctx.state
        services = ctx.services
        if state.companion is not None:
            messages = apply_experience(
                state.companion,
                BOSS_XP if entity.boss else NORMAL_XP,
                species_repo=services.species_repo,
                policy=ctx.config.evolution_policy,
            )
            for message in messages:
                append_log(state, message)
        for item_id in entity.loot_item_ids:
            services.inventory_service.add_loot(state, item_id)
        if entity.boss:
            state.defeated_boss_ids.add(entity.species_id)
        if entity.quest_id:
            services.quest_service.mark_boss_defeated(state, entity.quest_id, entity.species_id)
