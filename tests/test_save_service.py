from __future__ import annotations

import json

import pytest
from pygame.math import Vector2

from sylva.data.repositories import SpeciesRepository
from sylva.domain.state import create_initial_state
from sylva.services.errors import SaveLoadError
from sylva.services.factories import create_monster_instance
from sylva.services.save_service import SaveService


def _make_played_state():
    species_repo = SpeciesRepository()
    state = create_initial_state(4242)
    state.companion = create_monster_instance("tidebble", species_repo)
    state.companion.stats.level = 6
    state.position = Vector2(123.5, 88.0)
    state.current_scene_id = "wild-gorge"
    state.unlocked_scene_ids.update({"starter", "village", "wild-gorge"})
    state.defeated_boss_ids.add("brasemire")
    state.completed_station_ids.add("speed-wind")
    state.inventory.add("meat", 2)
    state.inventory.add("dew-petal")
    progress = state.quest_progress("twin-fangs")
    progress.status = "active"
    progress.completed_targets.add("azure-alpha")
    state.gold = 55
    state.hunger = 61
    state.log.append("You reach the Azure Gorge.")
    return state, species_repo


def test_round_trip_preserves_state() -> None:
    state, species_repo = _make_played_state()
    service = SaveService(species_repo=species_repo)

    payload = json.loads(json.dumps(service.serialize(state)))
    loaded = service.deserialize(payload)

    assert loaded.seed == 4242
    assert loaded.position == Vector2(123.5, 88.0)
    assert loaded.current_scene_id == "wild-gorge"
    assert loaded.unlocked_scene_ids == state.unlocked_scene_ids
    assert loaded.defeated_boss_ids == {"brasemire"}
    assert loaded.completed_station_ids == {"speed-wind"}
    assert [(entry.item_id, entry.quantity) for entry in loaded.inventory.entries] == [
        ("meat", 2),
        ("dew-petal", 1),
    ]
    assert loaded.quest_progress("twin-fangs").completed_targets == {"azure-alpha"}
    assert loaded.companion == state.companion
    assert loaded.gold == 55
    assert loaded.hunger == 61
    assert list(loaded.log) == ["You reach the Azure Gorge."]


def test_loaded_rng_restarts_from_seed() -> None:
    state, species_repo = _make_played_state()
    state.rng.random()
    service = SaveService(species_repo=species_repo)

    loaded = service.deserialize(service.serialize(state))

    assert loaded.rng.random() == create_initial_state(4242).rng.random()


def test_state_without_companion_round_trips() -> None:
    service = SaveService()
    loaded = service.deserialize(service.serialize(create_initial_state(1)))
    assert loaded.companion is None
    assert loaded.current_scene_id == "title"


def test_hunger_above_cap_is_clamped() -> None:
    state, species_repo = _make_played_state()
    service = SaveService(species_repo=species_repo)
    payload = service.serialize(state)
    payload["hunger"] = 250

    assert service.deserialize(payload).hunger == 100


@pytest.mark.parametrize(
    "field, value",
    [
        ("seed", "abc"),
        ("position", [1]),
        ("position", [1, "x"]),
        ("inventory", [{"item_id": "meat", "quantity": 0}]),
        ("quests", [{"quest_id": "twin-fangs", "status": "finished"}]),
        (
            "quests",
            [
                {"quest_id": "twin-fangs", "status": "active"},
                {"quest_id": "twin-fangs", "status": "completed"},
            ],
        ),
        ("companion", {"species_id": "missingno", "stats": {}}),
        ("gold", -5),
        ("unlocked_scene_ids", "village"),
    ],
)
def test_malformed_payload_raises(field: str, value: object) -> None:
    state, species_repo = _make_played_state()
    service = SaveService(species_repo=species_repo)
    payload = service.serialize(state)
    payload[field] = value

    with pytest.raises(SaveLoadError):
        service.deserialize(payload)


def test_split_inventory_stacks_merge_on_load() -> None:
    state, species_repo = _make_played_state()
    service = SaveService(species_repo=species_repo)
    payload = service.serialize(state)
    payload["inventory"] = [
        {"item_id": "meat", "quantity": 1},
        {"item_id": "fruit", "quantity": 1},
        {"item_id": "meat", "quantity": 1},
    ]

    loaded = service.deserialize(payload)

    assert [entry.item_id for entry in loaded.inventory.entries] == ["meat", "fruit"]
    assert loaded.inventory.quantity_of("meat") == 2
    assert loaded.inventory.remove("meat", 2) is True
    assert loaded.inventory.quantity_of("meat") == 0


def test_non_mapping_payload_raises() -> None:
    with pytest.raises(SaveLoadError):
        SaveService().deserialize(["not", "a", "save"])


def test_missing_companion_stat_raises() -> None:
    state, species_repo = _make_played_state()
    service = SaveService(species_repo=species_repo)
    payload = service.serialize(state)
    del payload["companion"]["stats"]["morale"]

    with pytest.raises(SaveLoadError):
        service.deserialize(payload)
