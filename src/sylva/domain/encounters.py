"""Roaming wild creatures and their encounter lifecycle."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from pygame.math import Vector2

from sylva.core.types import EncounterStatus
from sylva.domain.defs import EncounterDef
from sylva.domain.geometry import tile_to_pixel

TRIGGER_RADIUS = 32.0
CONFIRM_RADIUS = 36.0
DEFAULT_ROAM_RADIUS = 12.0
ESCAPE_COOLDOWN = 3.0
DEFEAT_COOLDOWN = 5.0


@dataclass(slots=True)
class EncounterEntity:
    """One wild creature on a map.

    Status only moves idle -> battle -> idle or defeated. A defeated entity
    comes back only when it has a respawn time.
    """

    id: str
    species_id: str
    spawn: Vector2
    position: Vector2
    roam_radius: float = DEFAULT_ROAM_RADIUS
    respawn_time: float = 0.0
    boss: bool = False
    loot_item_ids: Tuple[str, ...] = ()
    quest_id: str | None = None
    status: EncounterStatus = "idle"
    cooldown: float = 0.0
    oscillation: float = 0.0

    @classmethod
    def from_def(cls, definition: EncounterDef) -> "EncounterEntity":
        spawn = tile_to_pixel(*definition.spawn)
        return cls(
            id=definition.id,
            species_id=definition.species_id,
            spawn=spawn,
            position=Vector2(spawn),
            roam_radius=definition.roam_radius,
            respawn_time=definition.respawn_time,
            boss=definition.boss,
            loot_item_ids=definition.loot,
            quest_id=definition.quest_id,
        )

    @property
    def available(self) -> bool:
        return self.status == "idle" and self.cooldown <= 0

    def begin_battle(self) -> None:
        self.status = "battle"

    def release(self, cooldown: float) -> None:
        """Return to idle after an escape or a player defeat."""
        self.status = "idle"
        self.cooldown = max(0.0, cooldown)

    def mark_defeated(self) -> None:
        self.status = "defeated"
        self.cooldown = self.respawn_time


@dataclass(slots=True)
class EncounterRoster:
    entities: List[EncounterEntity] = field(default_factory=list)

    @classmethod
    def from_defs(cls, definitions: Iterable[EncounterDef]) -> "EncounterRoster":
        return cls(entities=[EncounterEntity.from_def(definition) for definition in definitions])

    def get(self, entity_id: str) -> EncounterEntity | None:
        for entity in self.entities:
            if entity.id == entity_id:
                return entity
        return None

    def animate(self, dt: float) -> None:
        """Advance roaming, cooldowns and respawns by one tick."""
        for entity in self.entities:
            if entity.status == "battle":
                continue
            if entity.status == "defeated":
                if entity.respawn_time <= 0:
                    continue
                entity.cooldown = max(0.0, entity.cooldown - dt)
                if entity.cooldown == 0:
                    entity.position = Vector2(entity.spawn)
                    entity.oscillation = 0.0
                    entity.status = "idle"
                continue

            entity.cooldown = max(0.0, entity.cooldown - dt)
            entity.oscillation += dt
            radius = entity.roam_radius
            entity.position = Vector2(
                entity.spawn.x + math.sin(entity.oscillation) * radius,
                entity.spawn.y + math.cos(entity.oscillation * 0.5) * radius * 0.6,
            )

    def find_nearby(self, position: Vector2, radius: float) -> EncounterEntity | None:
        """First available entity strictly within ``radius`` of ``position``."""
        for entity in self.entities:
            if entity.available and entity.position.distance_to(position) < radius:
                return entity
        return None

    def reset(self) -> None:
        for entity in self.entities:
            entity.status = "idle"
            entity.cooldown = 0.0
            entity.oscillation = 0.0
            entity.position = Vector2(entity.spawn)
