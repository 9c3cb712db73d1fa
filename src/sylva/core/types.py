"""Shared type aliases for the simulation core."""
from __future__ import annotations

from typing import Literal

BattlePhase = Literal["intro", "player-turn", "enemy-turn", "victory", "defeat", "escape"]
BattleOutcome = Literal["victory", "defeat", "escape"]
EncounterStatus = Literal["idle", "battle", "defeated"]
QuestStatus = Literal["available", "active", "completed"]
QuestType = Literal["hunt", "delivery"]
NpcRole = Literal["giver", "turnin"]
ItemKind = Literal["food", "boost", "quest"]
Edge = Literal["north", "south", "east", "west"]
Facing = Literal["up", "down", "left", "right"]
InputKey = Literal["up", "down", "left", "right", "confirm", "cancel", "toggle-inventory"]
RenderMode = Literal["title", "exploration", "inventory", "battle"]
EvolutionPolicy = Literal["single", "fixpoint"]
StatName = Literal["power", "defense", "speed", "morale"]

TERMINAL_PHASES: tuple[str, ...] = ("victory", "defeat", "escape")
MOVEMENT_KEYS: tuple[str, ...] = ("up", "down", "left", "right")
GROWABLE_STATS: tuple[str, ...] = ("power", "defense", "speed", "morale")
