import json
from pathlib import Path

import pytest

from sylva.data.errors import DataLoadError, DataReferenceError, DataValidationError
from sylva.data.repositories import (
    ItemsRepository,
    QuestsRepository,
    ScenesRepository,
    SpeciesRepository,
    TerrainRepository,
)


def _make_definitions_dir(tmp_path: Path) -> Path:
    definitions_dir = tmp_path / "definitions"
    definitions_dir.mkdir()
    return definitions_dir


def _write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


def _species_payload(**overrides: object) -> dict:
    payload = {
        "name": "Pebble",
        "description": "A small stone.",
        "base_stats": {"level": 1, "power": 2, "defense": 2, "speed": 2, "morale": 2},
        "attacks": [
            {"id": "roll", "name": "Roll", "damage": 2, "success_rate": 0.9, "description": "It rolls."}
        ],
    }
    payload.update(overrides)
    return payload


def test_species_repo_loads_attacks_and_evolutions(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "species.json",
        {
            "pebble": _species_payload(evolutions=[{"target": "boulder", "requires": {"defense": 5}}]),
            "boulder": _species_payload(name="Boulder"),
        },
    )
    repo = SpeciesRepository(base_path=definitions_dir)

    pebble = repo.get("pebble")
    assert pebble.attacks[0].success_rate == 0.9
    assert pebble.attacks[0].animation == {}
    assert pebble.evolutions[0].target == "boulder"
    assert repo.ids() == ["boulder", "pebble"]


def test_species_with_unknown_evolution_target_is_rejected(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "species.json",
        {"pebble": _species_payload(evolutions=[{"target": "mountain", "requires": {"defense": 5}}])},
    )
    with pytest.raises(DataReferenceError):
        SpeciesRepository(base_path=definitions_dir).get("pebble")


@pytest.mark.parametrize(
    "overrides",
    [
        {"attacks": []},
        {"attacks": [{"id": "x", "name": "X", "damage": 1, "success_rate": 1.5, "description": ""}]},
        {"base_stats": {"level": 1, "power": 2, "defense": 2, "speed": 2}},
        {"base_stats": {"level": 1, "power": -1, "defense": 2, "speed": 2, "morale": 2}},
        {"colour": "grey"},
    ],
)
def test_malformed_species_is_rejected(tmp_path: Path, overrides: dict) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "species.json", {"pebble": _species_payload(**overrides)})
    with pytest.raises(DataValidationError):
        SpeciesRepository(base_path=definitions_dir).all()


def test_missing_file_raises_load_error(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    with pytest.raises(DataLoadError):
        ItemsRepository(base_path=definitions_dir).all()


def test_invalid_json_raises_load_error(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    (definitions_dir / "tiles.json").write_text("{", encoding="utf-8")
    with pytest.raises(DataLoadError):
        TerrainRepository(base_path=definitions_dir).legend()


def test_items_repo_rejects_unknown_kind(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "items.json", {"rock": {"name": "Rock", "description": "", "kind": "weapon"}})
    with pytest.raises(DataValidationError):
        ItemsRepository(base_path=definitions_dir).get("rock")


def test_quests_repo_requires_targets_for_hunts(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "items.json", {})
    _write_json(definitions_dir / "scenes.json", {})
    _write_json(
        definitions_dir / "quests.json",
        {"hunt": {"title": "Hunt", "description": "", "type": "hunt", "targets": [], "reward": {}}},
    )
    with pytest.raises(DataValidationError):
        QuestsRepository(base_path=definitions_dir).all()


def _write_quest_fixtures(definitions_dir: Path, reward: dict) -> None:
    _write_json(
        definitions_dir / "items.json",
        {"meat": {"name": "Hearty Meat", "description": "", "kind": "food", "hunger_restore": 35}},
    )
    _write_json(definitions_dir / "scenes.json", {})
    _write_json(
        definitions_dir / "quests.json",
        {
            "feast": {
                "title": "Feast",
                "description": "",
                "type": "delivery",
                "item_id": "meat",
                "reward": reward,
            }
        },
    )


def test_quests_repo_rejects_missing_reward_item(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_quest_fixtures(definitions_dir, {"items": {"ghost-item": 1}})
    with pytest.raises(DataReferenceError):
        QuestsRepository(base_path=definitions_dir).get("feast")


def test_quests_repo_rejects_missing_unlock_scene(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_quest_fixtures(definitions_dir, {"unlocks": ["nowhere"]})
    with pytest.raises(DataReferenceError):
        QuestsRepository(base_path=definitions_dir).get("feast")


def test_quests_repo_accepts_known_reward_references(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_quest_fixtures(definitions_dir, {"gold": 5, "items": {"meat": 2}})
    quest = QuestsRepository(base_path=definitions_dir).get("feast")
    assert quest.reward.items == {"meat": 2}


def test_scenes_repo_strips_spaces_and_checks_links(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    scene = {
        "name": "Field",
        "kind": "exploration",
        "intro": "Open field.",
        "spawn": [1, 1],
        "map": ["m m m", "m g m", "m m m"],
        "transitions": [{"edge": "north", "target": "field", "spawn": [1, 1]}],
    }
    _write_json(definitions_dir / "scenes.json", {"field": scene})
    field = ScenesRepository(base_path=definitions_dir).get("field")
    assert field.rows == ("mmm", "mgm", "mmm")
    assert field.transitions[0].unlock_id is None

    scene["transitions"] = [{"edge": "north", "target": "elsewhere", "spawn": [1, 1]}]
    _write_json(definitions_dir / "scenes.json", {"field": scene})
    with pytest.raises(DataReferenceError):
        ScenesRepository(base_path=definitions_dir).get("field")


def test_scenes_repo_rejects_unknown_edge(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    scene = {
        "name": "Field",
        "kind": "exploration",
        "intro": "",
        "spawn": [1, 1],
        "map": ["g"],
        "transitions": [{"edge": "up", "target": "field", "spawn": [0, 0]}],
    }
    _write_json(definitions_dir / "scenes.json", {"field": scene})
    with pytest.raises(DataValidationError):
        ScenesRepository(base_path=definitions_dir).all()


def test_repository_get_unknown_id_raises_key_error() -> None:
    with pytest.raises(KeyError):
        SpeciesRepository().get("missingno")
