import pytest
from pygame.math import Vector2

from sylva.core.config import EngineConfig
from sylva.domain.defs import SceneDef, TransitionDef
from sylva.domain.geometry import tile_to_pixel
from sylva.domain.tile_grid import TileGrid
from sylva.services.errors import SceneError
from sylva.services.factories import create_monster_instance
from sylva.services.scenes import ExplorationScene, SceneGraph, exploration_scene, start_session
from sylva.services.scenes.exploration_scene import DEFEAT_MESSAGE, ESCAPE_MESSAGE, NO_COMPANION_MESSAGE


def _make_graph(seed: int = 0, config: EngineConfig | None = None) -> SceneGraph:
    return start_session(seed, config=config)


def _enter_with_companion(graph: SceneGraph, scene_id: str, species_id: str = "sproutle"):
    graph.switch_scene(scene_id)
    graph.state.companion = create_monster_instance(species_id, graph.services.species_repo)
    return graph.active_scene


def _start_boss_battle(graph: SceneGraph):
    scene = _enter_with_companion(graph, "wild-clearing")
    entity = scene.roster.get("clearing-brasemire")
    graph.state.position = Vector2(entity.spawn)
    graph.update(0.01)
    assert graph.active_battle is not None
    return scene, entity, graph.active_battle


def _finish_intro(graph: SceneGraph) -> None:
    for _ in range(11):
        graph.update(0.1)
    assert graph.active_battle.phase == "player-turn"


def _make_gate_scene(graph: SceneGraph) -> ExplorationScene:
    definition = SceneDef(
        scene_id="gate-test",
        name="Gate Test",
        kind="exploration",
        intro="A quiet lane.",
        rows=tuple("g" * 10 for _ in range(6)),
        spawn=(4, 3),
        transitions=(
            TransitionDef(
                edge="west",
                target="village",
                spawn=(2, 6),
                message="You slip through the gate.",
                unlock_id="hidden-lane",
                locked_message="The gate is locked.",
            ),
        ),
    )
    grid = TileGrid.from_rows(definition.rows, graph.services.terrain_repo.legend())
    scene = ExplorationScene(definition, grid)
    graph.register(scene)
    return scene


def test_session_starts_on_title() -> None:
    graph = _make_graph()
    model = graph.render_data()

    assert model.mode == "title"
    assert model.title.options == ("New Game", "Continue")


def test_new_game_enters_starter_at_spawn() -> None:
    graph = _make_graph()

    graph.key_down("enter")

    assert graph.state.current_scene_id == "starter"
    assert graph.state.position == tile_to_pixel(5, 8)
    assert graph.render_data().mode == "exploration"
    assert "Choose your companion from the three mystic stones." in graph.state.log


def test_continue_without_progress_stays_on_title() -> None:
    graph = _make_graph()

    graph.key_down("down")
    graph.key_down("enter")

    assert graph.active_scene.scene_id == "title"
    assert graph.state.log[-1] == "Nothing to resume. Start a new game."


def test_pedestal_choice_sets_companion_and_supplies() -> None:
    graph = _make_graph()
    graph.key_down("enter")
    graph.state.position = tile_to_pixel(10, 6)

    graph.key_down("space")

    state = graph.state
    assert state.companion is not None
    assert state.companion.species_id == "flaruba"
    assert "village" in state.unlocked_scene_ids
    assert state.inventory.quantity_of("meat") == 2
    assert state.inventory.quantity_of("fruit") == 1


def test_gated_west_transition_near_x5_is_refused_and_logged_once() -> None:
    graph = _make_graph()
    _make_gate_scene(graph)
    graph.switch_scene("gate-test", Vector2(5, 80))

    graph.update(0.05)
    graph.update(0.05)

    assert graph.active_scene.scene_id == "gate-test"
    assert graph.state.position == Vector2(5, 80)
    assert list(graph.state.log).count("The gate is locked.") == 1


def test_gated_transition_logs_again_after_leaving_the_edge() -> None:
    graph = _make_graph()
    _make_gate_scene(graph)
    graph.switch_scene("gate-test", Vector2(5, 80))
    graph.update(0.05)

    graph.state.position = Vector2(100, 80)
    graph.update(0.05)
    graph.state.position = Vector2(5, 80)
    graph.update(0.05)

    assert list(graph.state.log).count("The gate is locked.") == 2


def test_unlocked_transition_switches_with_explicit_spawn() -> None:
    graph = _make_graph()
    _make_gate_scene(graph)
    graph.state.unlocked_scene_ids.add("hidden-lane")
    graph.switch_scene("gate-test", Vector2(5, 80))

    graph.update(0.05)

    assert graph.active_scene.scene_id == "village"
    assert graph.state.position == tile_to_pixel(2, 6)
    assert "You slip through the gate." in graph.state.log


def test_starter_bridge_opens_after_choosing_companion() -> None:
    graph = _make_graph()
    graph.key_down("enter")
    starter = graph.active_scene
    edge = Vector2(630, tile_to_pixel(19, 6).y)
    graph.state.position = Vector2(edge)

    graph.update(0.05)
    assert graph.active_scene is starter
    assert graph.state.position == edge
    assert graph.state.log[-1].startswith("The bridge spirit will not let you pass alone.")

    starter.choose_companion(graph.context, "sproutle")
    graph.update(0.05)

    assert graph.active_scene.scene_id == "village"
    assert graph.state.position == tile_to_pixel(2, 6)


def test_switching_to_unknown_scene_raises() -> None:
    graph = _make_graph()
    with pytest.raises(SceneError):
        graph.switch_scene("nowhere")


def test_update_clamps_large_frame_times() -> None:
    graph = _make_graph(config=EngineConfig(max_dt=0.1))

    graph.update(5.0)
    graph.update(-1.0)

    assert graph.scheduler.clock == pytest.approx(0.1)


def test_confirm_near_creature_without_companion_logs_hint() -> None:
    graph = _make_graph()
    graph.switch_scene("wild-clearing")
    entity = graph.active_scene.roster.get("clearing-brasemire")
    graph.state.position = Vector2(entity.position)

    graph.key_down("enter")

    assert graph.active_battle is None
    assert graph.state.log[-1] == NO_COMPANION_MESSAGE


def test_proximity_starts_battle_and_render_switches_mode() -> None:
    graph = _make_graph()
    _, entity, battle = _start_boss_battle(graph)

    assert entity.status == "battle"
    model = graph.render_data()
    assert model.mode == "battle"
    assert model.battle.enemy.species_id == "brasemire"
    assert model.battle.menu_options[-1] == "Retreat"


def test_escape_restores_position_and_cooldown_prevents_retrigger() -> None:
    graph = _make_graph()
    _, entity, battle = _start_boss_battle(graph)
    pre_battle = Vector2(entity.spawn)
    _finish_intro(graph)

    graph.key_down("up")
    graph.key_down("enter")

    assert battle.phase == "escape"
    assert graph.active_battle is None
    assert entity.status == "idle"
    assert graph.state.position == pre_battle
    assert ESCAPE_MESSAGE in graph.state.log

    for _ in range(20):
        graph.update(0.1)
    assert graph.active_battle is None

    for _ in range(15):
        graph.update(0.1)
    assert graph.active_battle is not None


def test_victory_grants_experience_once(monkeypatch) -> None:
    graph = _make_graph()
    calls: list[int] = []
    original = exploration_scene.apply_experience

    def _counting(instance, xp, **kwargs):
        calls.append(xp)
        return original(instance, xp, **kwargs)

    monkeypatch.setattr(exploration_scene, "apply_experience", _counting)
    _, entity, battle = _start_boss_battle(graph)
    monkeypatch.setattr(graph.state.rng, "roll", lambda probability: True)
    _finish_intro(graph)
    battle.state.enemy_hp = 1

    graph.key_down("enter")
    for _ in range(10):
        graph.update(0.1)

    state = graph.state
    assert battle.phase == "victory"
    assert calls == [4]
    assert state.companion.stats.level == 5
    assert entity.status == "defeated"
    assert "brasemire" in state.defeated_boss_ids
    assert state.inventory.quantity_of("ember-core") == 1
    assert state.quest_progress("ember-guardian").status == "completed"
    assert "wild-gorge" in state.unlocked_scene_ids


def test_defeat_returns_player_to_scene_spawn(monkeypatch) -> None:
    graph = _make_graph()
    _, entity, battle = _start_boss_battle(graph)
    monkeypatch.setattr(graph.state.rng, "roll", lambda probability: True)
    _finish_intro(graph)
    battle.state.player_hp = 1

    graph.key_down("enter")
    for _ in range(5):
        graph.update(0.1)

    assert battle.phase == "defeat"
    assert graph.active_battle is None
    assert graph.state.position == tile_to_pixel(10, 10)
    assert entity.status == "idle"
    assert DEFEAT_MESSAGE in graph.state.log


def test_scene_switch_cancels_pending_enemy_turn(monkeypatch) -> None:
    graph = _make_graph()
    _, _, battle = _start_boss_battle(graph)
    monkeypatch.setattr(graph.state.rng, "roll", lambda probability: True)
    _finish_intro(graph)

    graph.key_down("enter")
    assert battle.phase == "enemy-turn"
    assert [task.owner for task in graph.scheduler.pending()] == [battle.battle_id]
    player_hp = battle.state.player_hp

    graph.switch_scene("village")
    for _ in range(10):
        graph.update(0.1)

    assert graph.scheduler.pending() == []
    assert graph.active_battle is None
    assert battle.resolved
    assert battle.state.player_hp == player_hp
    assert battle.state.enemy.attacks == 0
    assert graph.state.current_scene_id == "village"


def test_talking_to_quest_giver_activates_quest() -> None:
    graph = _make_graph()
    graph.switch_scene("village")
    graph.state.position = tile_to_pixel(5, 7)

    graph.key_down("enter")

    assert graph.state.quest_progress("ember-guardian").status == "active"
    assert "[ ] Ember Guardian" in graph.render_data().panel.quest_lines


def test_inventory_overlay_uses_items_and_blocks_movement() -> None:
    graph = _make_graph()
    scene = _enter_with_companion(graph, "village")
    graph.state.hunger = 50
    graph.state.inventory.add("fruit")
    start = Vector2(graph.state.position)

    graph.key_down("i")
    graph.key_down("d")
    graph.update(0.1)
    assert graph.render_data().mode == "inventory"
    assert graph.state.position == start

    graph.key_down("enter")
    assert graph.state.hunger == 70
    graph.key_down("esc")
    assert not scene.inventory_open
    assert graph.render_data().mode == "exploration"


def test_held_keys_move_the_player() -> None:
    graph = _make_graph()
    _enter_with_companion(graph, "village")
    start = Vector2(graph.state.position)

    graph.key_down("d")
    graph.update(0.1)
    graph.key_up("d")
    moved = Vector2(graph.state.position)
    graph.update(0.1)

    assert moved.x == pytest.approx(start.x + 12.0)
    assert graph.state.position == moved


def test_continue_resumes_last_scene_and_position() -> None:
    graph = _make_graph()
    graph.key_down("enter")
    graph.state.position = tile_to_pixel(10, 6)
    graph.key_down("enter")
    graph.state.position = tile_to_pixel(7, 8)

    graph.switch_scene("title")
    graph.key_down("down")
    graph.key_down("enter")

    assert graph.active_scene.scene_id == "starter"
    assert graph.state.position == tile_to_pixel(7, 8)
