"""Domain-level state tracking."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Set

from pygame.math import Vector2

from sylva.core.rng import RNG
from sylva.domain.entities import MonsterInstance
from sylva.domain.inventory import InventoryLedger
from sylva.domain.quest_state import QuestProgress

DEFAULT_LOG_CAPACITY = 8
MAX_HUNGER = 100
START_SCENE_ID = "title"


@dataclass
class GameState:
    """The single mutable aggregate shared by every engine for one session."""

    seed: int
    rng: RNG
    position: Vector2 = field(default_factory=lambda: Vector2(0, 0))
    companion: MonsterInstance | None = None
    inventory: InventoryLedger = field(default_factory=InventoryLedger)
    quests: List[QuestProgress] = field(default_factory=list)
    unlocked_scene_ids: Set[str] = field(default_factory=set)
    defeated_boss_ids: Set[str] = field(default_factory=set)
    completed_station_ids: Set[str] = field(default_factory=set)
    log: Deque[str] = field(default_factory=lambda: deque(maxlen=DEFAULT_LOG_CAPACITY))
    current_scene_id: str = START_SCENE_ID
    gold: int = 0
    hunger: int = MAX_HUNGER
    hunger_timer: float = 0.0

    @property
    def log_capacity(self) -> int:
        return self.log.maxlen or DEFAULT_LOG_CAPACITY

    def find_quest(self, quest_id: str) -> QuestProgress | None:
        for progress in self.quests:
            if progress.quest_id == quest_id:
                return progress
        return None

    def quest_progress(self, quest_id: str) -> QuestProgress:
        """Return the progress record for ``quest_id``, creating an available one if needed."""
        progress = self.find_quest(quest_id)
        if progress is None:
            progress = QuestProgress(quest_id=quest_id)
            self.quests.append(progress)
        return progress


def append_log(state: GameState, message: str) -> None:
    """Push a player-facing line; the oldest line drops once capacity is reached."""
    if message:
        state.log.append(message)


def create_initial_state(seed: int = 0, *, log_capacity: int = DEFAULT_LOG_CAPACITY) -> GameState:
    return GameState(seed=seed, rng=RNG(seed), log=deque(maxlen=log_capacity))


def reset_state(state: GameState) -> None:
    """Return ``state`` to a fresh game in place, reseeding the RNG from its seed."""
    state.rng = RNG(state.seed)
    state.position = Vector2(0, 0)
    state.companion = None
    state.inventory.clear()
    state.quests.clear()
    state.unlocked_scene_ids.clear()
    state.defeated_boss_ids.clear()
    state.completed_station_ids.clear()
    state.log.clear()
    state.current_scene_id = START_SCENE_ID
    state.gold = 0
    state.hunger = MAX_HUNGER
    state.hunger_timer = 0.0
