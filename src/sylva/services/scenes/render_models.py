"""Plain-data snapshots handed to an external renderer.

Every field is a primitive, a tuple or another snapshot; nothing here holds a
reference back into live state.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from sylva.core.types import RenderMode


@dataclass(slots=True, frozen=True)
class EncounterView:
    entity_id: str
    species_id: str
    x: float
    y: float
    status: str
    boss: bool


@dataclass(slots=True, frozen=True)
class NpcView:
    npc_id: str
    name: str
    x: float
    y: float


@dataclass(slots=True, frozen=True)
class PlayerView:
    x: float
    y: float
    facing: str


@dataclass(slots=True, frozen=True)
class PanelView:
    title: str
    terrain: str
    companion_name: str
    gold: int
    hunger: int
    quest_lines: Tuple[str, ...]
    log_lines: Tuple[str, ...]


@dataclass(slots=True, frozen=True)
class InventoryEntryView:
    item_id: str
    name: str
    quantity: int
    selected: bool


@dataclass(slots=True, frozen=True)
class InventoryView:
    entries: Tuple[InventoryEntryView, ...]
    cursor: int


@dataclass(slots=True, frozen=True)
class BattlerView:
    name: str
    species_id: str
    level: int
    hp: int
    max_hp: int


@dataclass(slots=True, frozen=True)
class BattleView:
    phase: str
    player: BattlerView
    enemy: BattlerView
    menu_options: Tuple[str, ...]
    cursor: int
    player_attacks: int
    player_hits: int
    player_attack_id: str | None
    enemy_attacks: int
    enemy_hits: int
    enemy_attack_id: str | None
    log_lines: Tuple[str, ...]


@dataclass(slots=True, frozen=True)
class TitleView:
    options: Tuple[str, ...]
    cursor: int


@dataclass(slots=True, frozen=True)
class RenderModel:
    mode: RenderMode
    scene_id: str
    tiles: Tuple[str, ...] = ()
    encounters: Tuple[EncounterView, ...] = ()
    npcs: Tuple[NpcView, ...] = ()
    player: PlayerView | None = None
    panel: PanelView | None = None
    inventory: InventoryView | None = None
    battle: BattleView | None = None
    title: TitleView | None = None
