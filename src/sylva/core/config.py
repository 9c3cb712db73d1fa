"""Engine configuration persistence."""
from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path

_DEFAULT_MAX_DT = 0.1
_DEFAULT_INTRO_DELAY = 1.0
_DEFAULT_ENEMY_DELAY = 0.4
_DEFAULT_LOG_CAPACITY = 8
_DEFAULT_EVOLUTION_POLICY = "single"
_DEFAULT_PLAYER_SPEED = 120.0


@dataclass(slots=True)
class EngineConfig:
    """Tunable timings and policies for one simulation session."""

    max_dt: float = _DEFAULT_MAX_DT
    intro_delay: float = _DEFAULT_INTRO_DELAY
    enemy_delay: float = _DEFAULT_ENEMY_DELAY
    log_capacity: int = _DEFAULT_LOG_CAPACITY
    evolution_policy: str = _DEFAULT_EVOLUTION_POLICY
    player_speed: float = _DEFAULT_PLAYER_SPEED


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "Sylva"
        return Path.home() / "Sylva"
    return Path.home() / ".config" / "sylva"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def _positive_float(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value) if value > 0 else default


def _positive_int(value: object, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value if value > 0 else default


def _normalize_policy(value: object) -> str:
    return "fixpoint" if value == "fixpoint" else _DEFAULT_EVOLUTION_POLICY


def normalize_config(raw: dict[str, object]) -> EngineConfig:
    """Build a config from a loose mapping, falling back per field on bad values."""
    return EngineConfig(
        max_dt=_positive_float(raw.get("max_dt"), _DEFAULT_MAX_DT),
        intro_delay=_positive_float(raw.get("intro_delay"), _DEFAULT_INTRO_DELAY),
        enemy_delay=_positive_float(raw.get("enemy_delay"), _DEFAULT_ENEMY_DELAY),
        log_capacity=_positive_int(raw.get("log_capacity"), _DEFAULT_LOG_CAPACITY),
        evolution_policy=_normalize_policy(raw.get("evolution_policy")),
        player_speed=_positive_float(raw.get("player_speed"), _DEFAULT_PLAYER_SPEED),
    )


def load_config(path: Path | None = None) -> EngineConfig:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return EngineConfig()
    except (OSError, json.JSONDecodeError):
        return EngineConfig()
    if not isinstance(raw, dict):
        return EngineConfig()
    return normalize_config(raw)


def save_config(config: EngineConfig, path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = asdict(normalize_config(asdict(config)))
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
