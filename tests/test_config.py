import json
from pathlib import Path

from sylva.core.config import EngineConfig, load_config, normalize_config, save_config


def test_load_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "missing.json")
    assert config == EngineConfig()


def test_load_config_invalid_json_returns_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_config(path) == EngineConfig()


def test_normalize_config_falls_back_per_field() -> None:
    config = normalize_config(
        {
            "max_dt": -1,
            "intro_delay": 2.5,
            "enemy_delay": "slow",
            "log_capacity": True,
            "evolution_policy": "fixpoint",
        }
    )
    assert config.max_dt == EngineConfig().max_dt
    assert config.intro_delay == 2.5
    assert config.enemy_delay == EngineConfig().enemy_delay
    assert config.log_capacity == EngineConfig().log_capacity
    assert config.evolution_policy == "fixpoint"


def test_unknown_evolution_policy_becomes_single() -> None:
    assert normalize_config({"evolution_policy": "chain"}).evolution_policy == "single"


def test_save_then_load_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"
    config = EngineConfig(intro_delay=0.5, log_capacity=12, evolution_policy="fixpoint")

    save_config(config, path)

    assert json.loads(path.read_text(encoding="utf-8"))["log_capacity"] == 12
    assert load_config(path) == config
