"""Turn-based battle state machine between the companion and one wild creature."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, List

from sylva.core.config import EngineConfig
from sylva.core.rng import RNG
from sylva.core.scheduler import TaskScheduler
from sylva.core.types import BattleOutcome
from sylva.data.repositories import SpeciesRepository
from sylva.domain.battle_models import BattleState, SideCounters
from sylva.domain.defs import AttackDef, SpeciesDef
from sylva.domain.entities import MonsterInstance, max_hp
from sylva.domain.state import GameState, append_log
from sylva.services.factories import create_monster_instance, get_species, make_instance_id

logger = logging.getLogger(__name__)

RETREAT_OPTION_ID = "retreat"
RETREAT_LABEL = "Retreat"


@dataclass(slots=True)
class MenuOption:
    option_id: str
    label: str
    is_retreat: bool = False


@dataclass(slots=True)
class BattlerSnapshot:
    name: str
    species_id: str
    level: int
    hp: int
    max_hp: int


@dataclass(slots=True)
class BattleAnimations:
    """Counters only ever increase; a renderer compares them with the last seen value."""

    player_attacks: int
    player_hits: int
    player_attack_id: str | None
    enemy_attacks: int
    enemy_hits: int
    enemy_attack_id: str | None


class BattleEngine:
    """Runs one battle from intro to a terminal phase.

    The enemy turn is a deferred task on the shared scheduler, owned by this
    battle's id. When it fires it re-checks the ``resolved`` latch, the phase and
    (through ``is_active``) whether this battle is still the live one, so a task
    that outlives its battle does nothing.
    """

    def __init__(
        self,
        *,
        companion: MonsterInstance,
        enemy_species_id: str,
        species_repo: SpeciesRepository,
        scheduler: TaskScheduler,
        rng: RNG,
        config: EngineConfig | None = None,
        is_active: Callable[["BattleEngine"], bool] | None = None,
    ) -> None:
        self._player_species: SpeciesDef = get_species(companion.species_id, species_repo)
        self._enemy = create_monster_instance(enemy_species_id, species_repo)
        self._enemy_species: SpeciesDef = get_species(enemy_species_id, species_repo)
        self._companion = companion
        self._scheduler = scheduler
        self._rng = rng
        self._config = config or EngineConfig()
        self._is_active = is_active
        self._callbacks: List[Callable[[BattleOutcome], None]] = []

        self.state = BattleState(
            battle_id=make_instance_id("battle", rng),
            player_species_id=companion.species_id,
            enemy_species_id=self._enemy.species_id,
            player_hp=max_hp(companion.stats),
            enemy_hp=max_hp(self._enemy.stats),
            log=deque(maxlen=self._config.log_capacity),
        )
        logger.debug(
            "Battle %s created: %s vs %s", self.state.battle_id, companion.species_id, enemy_species_id
        )

    @property
    def battle_id(self) -> str:
        return self.state.battle_id

    @property
    def phase(self) -> str:
        return self.state.phase

    @property
    def cursor(self) -> int:
        return self.state.cursor

    @property
    def resolved(self) -> bool:
        return self.state.resolved

    @property
    def enemy(self) -> MonsterInstance:
        return self._enemy

    def on_complete(self, callback: Callable[[BattleOutcome], None]) -> None:
        self._callbacks.append(callback)

    def get_menu_options(self) -> List[MenuOption]:
        options = [MenuOption(option_id=attack.id, label=attack.name) for attack in self._player_species.attacks]
        options.append(MenuOption(option_id=RETREAT_OPTION_ID, label=RETREAT_LABEL, is_retreat=True))
        return options

    def get_player_snapshot(self) -> BattlerSnapshot:
        return BattlerSnapshot(
            name=self._player_species.name,
            species_id=self._player_species.id,
            level=self._companion.stats.level,
            hp=self.state.player_hp,
            max_hp=max_hp(self._companion.stats),
        )

    def get_enemy_snapshot(self) -> BattlerSnapshot:
        return BattlerSnapshot(
            name=self._enemy_species.name,
            species_id=self._enemy_species.id,
            level=self._enemy.stats.level,
            hp=self.state.enemy_hp,
            max_hp=max_hp(self._enemy.stats),
        )

    def get_animations(self) -> BattleAnimations:
        return BattleAnimations(
            player_attacks=self.state.player.attacks,
            player_hits=self.state.player.hits,
            player_attack_id=self.state.player.last_attack_id,
            enemy_attacks=self.state.enemy.attacks,
            enemy_hits=self.state.enemy.hits,
            enemy_attack_id=self.state.enemy.last_attack_id,
        )

    def get_log(self) -> List[str]:
        return list(self.state.log)

    def update(self, game_state: GameState, dt: float) -> None:
        if self.state.resolved:
            return
        self.state.timer += dt
        if self.state.phase == "intro" and self.state.timer >= self._config.intro_delay:
            self.state.phase = "player-turn"
            self._log(game_state, f"What will {self._player_species.name} do?")

    def handle_input(self, game_state: GameState, key: str) -> None:
        """Menu navigation and selection; ignored outside the player's turn."""
        if self.state.resolved or self.state.phase != "player-turn":
            return
        option_count = len(self.get_menu_options())
        if key in ("up", "left"):
            self.state.cursor = (self.state.cursor - 1) % option_count
        elif key in ("down", "right"):
            self.state.cursor = (self.state.cursor + 1) % option_count
        elif key == "confirm":
            self._select(game_state, self.state.cursor)

    def abort(self, game_state: GameState) -> None:
        """Tear down an unfinished battle as an escape."""
        if not self.state.resolved:
            self._finish(game_state, "escape")

    def _select(self, game_state: GameState, index: int) -> None:
        option = self.get_menu_options()[index]
        if option.is_retreat:
            self._finish(game_state, "escape")
            return

        attack = self._player_species.attacks[index]
        self._resolve_attack(
            game_state,
            attacker_name=self._player_species.name,
            attack=attack,
            attacker=self.state.player,
            defender=self.state.enemy,
            target="enemy",
        )
        if self.state.enemy_hp == 0:
            self._finish(game_state, "victory")
            return

        self.state.phase = "enemy-turn"
        self.state.pending_task_id = self._scheduler.schedule(
            self._config.enemy_delay,
            lambda: self._run_enemy_turn(game_state),
            owner=self.battle_id,
        )

    def _run_enemy_turn(self, game_state: GameState) -> None:
        if self.state.resolved or self.state.phase != "enemy-turn":
            logger.debug("Stale enemy turn ignored for %s", self.battle_id)
            return
        if self._is_active is not None and not self._is_active(self):
            logger.debug("Enemy turn ignored for inactive battle %s", self.battle_id)
            return
        self.state.pending_task_id = None

        attack = self._rng.choice(self._enemy_species.attacks)
        self._resolve_attack(
            game_state,
            attacker_name=self._enemy_species.name,
            attack=attack,
            attacker=self.state.enemy,
            defender=self.state.player,
            target="player",
        )
        if self.state.player_hp == 0:
            self._finish(game_state, "defeat")
            return
        self.state.phase = "player-turn"

    def _resolve_attack(
        self,
        game_state: GameState,
        *,
        attacker_name: str,
        attack: AttackDef,
        attacker: SideCounters,
        defender: SideCounters,
        target: str,
    ) -> None:
        attacker.attacks += 1
        attacker.last_attack_id = attack.id
        if not self._rng.roll(attack.success_rate):
            self._log(game_state, f"{attacker_name} uses {attack.name}... but it misses.")
            return

        defender.hits += 1
        if target == "enemy":
            self.state.enemy_hp = max(0, self.state.enemy_hp - attack.damage)
        else:
            self.state.player_hp = max(0, self.state.player_hp - attack.damage)
        self._log(game_state, f"{attacker_name} uses {attack.name} and deals {attack.damage} damage!")

    def _finish(self, game_state: GameState, outcome: BattleOutcome) -> None:
        if self.state.resolved:
            return
        self.state.resolved = True
        self.state.phase = outcome
        self._scheduler.cancel_owner(self.battle_id)
        self.state.pending_task_id = None

        if outcome == "victory":
            self._log(game_state, f"{self._enemy_species.name} is defeated!")
        elif outcome == "defeat":
            self._log(game_state, f"{self._player_species.name} can no longer fight.")
        else:
            self._log(game_state, "You flee the battle.")
        logger.debug("Battle %s finished with %s", self.battle_id, outcome)

        for callback in list(self._callbacks):
            callback(outcome)

    def _log(self, game_state: GameState, message: str) -> None:
        self.state.log.append(message)
        append_log(game_state, message)
