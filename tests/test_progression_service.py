import json
from pathlib import Path

import pytest

from sylva.core.config import EngineConfig
from sylva.core.rng import RNG
from sylva.core.scheduler import TaskScheduler
from sylva.data.repositories import SpeciesRepository
from sylva.domain.entities import MonsterInstance, Stats, max_hp
from sylva.services.battle_engine import BattleEngine
from sylva.services.errors import FactoryError
from sylva.services.factories import create_monster_instance
from sylva.services.progression_service import apply_experience, apply_stat_boost, evolve


def _make_cycle_repo(tmp_path: Path) -> SpeciesRepository:
    """Three species that evolve into each other in a ring."""
    definitions_dir = tmp_path / "definitions"
    definitions_dir.mkdir()
    ring = {"alpha": "beta", "beta": "gamma", "gamma": "alpha"}
    payload = {}
    for species_id, target in ring.items():
        payload[species_id] = {
            "name": species_id.title(),
            "description": "Test species.",
            "base_stats": {"level": 1, "power": 5, "defense": 5, "speed": 5, "morale": 5},
            "attacks": [
                {"id": "tap", "name": "Tap", "damage": 1, "success_rate": 1.0, "description": "A tap."}
            ],
            "evolutions": [{"target": target, "requires": {"power": 1}}],
        }
    (definitions_dir / "species.json").write_text(json.dumps(payload), encoding="utf-8")
    return SpeciesRepository(base_path=definitions_dir)


def test_experience_grows_stats_by_ratio() -> None:
    repo = SpeciesRepository()
    sproutle = create_monster_instance("sproutle", repo)

    messages = apply_experience(sproutle, 2, species_repo=repo)

    assert messages == ["Sproutle gains 2 experience points!"]
    assert sproutle.species_id == "sproutle"
    assert sproutle.stats == Stats(level=3, power=8, defense=6, speed=7, morale=7)


def test_zero_experience_is_a_no_op() -> None:
    repo = SpeciesRepository()
    sproutle = create_monster_instance("sproutle", repo)

    assert apply_experience(sproutle, 0, species_repo=repo) == []
    assert sproutle.stats == repo.get("sproutle").base_stats


def test_first_satisfied_rule_evolves_and_keeps_level() -> None:
    repo = SpeciesRepository()
    sproutle = create_monster_instance("sproutle", repo)

    messages = apply_experience(sproutle, 8, species_repo=repo)

    assert sproutle.species_id == "bloomtail"
    assert sproutle.stats.level == 9
    assert sproutle.stats.power == repo.get("bloomtail").base_stats.power
    assert messages[-1] == "Evolution! Bloomtail joins your team."


def test_evolution_raises_max_hp_for_the_next_battle() -> None:
    repo = SpeciesRepository()
    sproutle = create_monster_instance("sproutle", repo)
    assert max_hp(sproutle.stats) == 12 + 2 * 4

    apply_experience(sproutle, 8, species_repo=repo)

    bloomtail = repo.get("bloomtail")
    assert sproutle.species_id == "bloomtail"
    assert max_hp(sproutle.stats) == 12 + 2 * bloomtail.base_stats.defense

    battle = BattleEngine(
        companion=sproutle,
        enemy_species_id="flaruba",
        species_repo=repo,
        scheduler=TaskScheduler(),
        rng=RNG(1),
        config=EngineConfig(),
    )
    snapshot = battle.get_player_snapshot()
    assert snapshot.max_hp == snapshot.hp == 12 + 2 * bloomtail.base_stats.defense

    apply_stat_boost(sproutle, {"defense": 1})
    assert battle.get_player_snapshot().max_hp == 12 + 2 * (bloomtail.base_stats.defense + 1)


def test_single_policy_evolves_at_most_once(tmp_path: Path) -> None:
    repo = _make_cycle_repo(tmp_path)
    instance = create_monster_instance("alpha", repo)

    messages = apply_experience(instance, 1, species_repo=repo, policy="single")

    assert instance.species_id == "beta"
    assert sum(message.startswith("Evolution!") for message in messages) == 1


def test_fixpoint_policy_chains_but_never_revisits(tmp_path: Path) -> None:
    repo = _make_cycle_repo(tmp_path)
    instance = create_monster_instance("alpha", repo)

    messages = apply_experience(instance, 1, species_repo=repo, policy="fixpoint")

    assert instance.species_id == "gamma"
    assert sum(message.startswith("Evolution!") for message in messages) == 2
    assert instance.stats.level == 2


def test_unknown_policy_is_rejected_before_any_change() -> None:
    repo = SpeciesRepository()
    sproutle = create_monster_instance("sproutle", repo)

    with pytest.raises(ValueError):
        apply_experience(sproutle, 3, species_repo=repo, policy="sometimes")
    assert sproutle.stats == repo.get("sproutle").base_stats


def test_evolve_to_unknown_species_leaves_instance_untouched() -> None:
    repo = SpeciesRepository()
    instance = MonsterInstance(species_id="sproutle", stats=Stats(level=4, power=1, defense=1, speed=1, morale=1))

    with pytest.raises(FactoryError):
        evolve(instance, "missingno", species_repo=repo)
    assert instance.species_id == "sproutle"
    assert instance.stats.level == 4


def test_stat_boost_ignores_unknown_stats_and_floors_at_zero() -> None:
    instance = MonsterInstance(species_id="sproutle", stats=Stats(level=1, power=2, defense=2, speed=2, morale=2))

    apply_stat_boost(instance, {"power": 3, "defense": -5, "luck": 9})

    assert instance.stats == Stats(level=1, power=5, defense=0, speed=2, morale=2)
