"""Exploration scene definitions: map, links, creatures and interactables.

All positions are stored as tile coordinates ``(col, row)``; scenes convert them
to pixel centres when they are built.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from sylva.core.types import Edge, NpcRole

TileCoord = Tuple[int, int]


@dataclass(slots=True, frozen=True)
class TransitionDef:
    edge: Edge
    target: str
    spawn: TileCoord
    message: str = ""
    unlock_id: str | None = None
    locked_message: str = ""


@dataclass(slots=True, frozen=True)
class EncounterDef:
    id: str
    species_id: str
    spawn: TileCoord
    roam_radius: float = 12.0
    respawn_time: float = 0.0
    boss: bool = False
    loot: Tuple[str, ...] = ()
    quest_id: str | None = None


@dataclass(slots=True, frozen=True)
class NpcDef:
    id: str
    name: str
    position: TileCoord
    dialogue: Tuple[str, ...] = ()
    quest_id: str | None = None
    role: NpcRole = "giver"


@dataclass(slots=True, frozen=True)
class TrainingStationDef:
    id: str
    position: TileCoord
    stat: str
    description: str
    hunger_cost: int
    reward: int


@dataclass(slots=True, frozen=True)
class PedestalDef:
    species_id: str
    position: TileCoord


@dataclass(slots=True, frozen=True)
class SceneDef:
    """``kind`` is ``exploration`` or ``starter``."""

    scene_id: str
    name: str
    kind: str
    intro: str
    rows: Tuple[str, ...]
    spawn: TileCoord
    transitions: Tuple[TransitionDef, ...] = ()
    encounters: Tuple[EncounterDef, ...] = ()
    npcs: Tuple[NpcDef, ...] = ()
    stations: Tuple[TrainingStationDef, ...] = ()
    pedestals: Tuple[PedestalDef, ...] = ()
