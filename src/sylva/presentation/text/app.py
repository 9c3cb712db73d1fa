"""Console driver: type key names and clock commands, see the render model as text."""
from __future__ import annotations

import logging
import secrets

from sylva.core.config import EngineConfig, load_config
from sylva.core.logging_setup import setup_logging
from sylva.services.errors import SaveLoadError
from sylva.services.save_service import SaveService
from sylva.services.scenes import SceneGraph, TitleScene, build_scene_graph, start_session

from .render import render_lines
from .save_slots import SaveSlotStore

logger = logging.getLogger(__name__)

_MAX_RANDOM_SEED = 2**31 - 1
HELP_LINES = (
    "Keys: w a s d, enter, esc, i (tap once)",
    "hold <key> <seconds>  keep a key down while time passes",
    "wait [seconds]        let time pass",
    "save <slot> / load <slot>",
    "quit",
)


class TextSession:
    """Feeds typed commands into a scene graph one frame at a time."""

    def __init__(
        self,
        graph: SceneGraph,
        *,
        save_store: SaveSlotStore | None = None,
    ) -> None:
        self.graph = graph
        self._save_store = save_store or SaveSlotStore()
        self._save_service = SaveService(
            species_repo=graph.services.species_repo,
            log_capacity=graph.config.log_capacity,
        )

    def execute(self, command: str) -> bool:
        """Run one command. Returns False when the session should end."""
        parts = command.strip().split()
        if not parts:
            return True
        verb = parts[0].lower()
        if verb == "quit":
            return False
        if verb == "help":
            for line in HELP_LINES:
                print(line)
        elif verb == "wait":
            self.advance(_parse_seconds(parts[1:], default=self.graph.config.max_dt))
        elif verb == "hold" and len(parts) >= 2:
            self.graph.key_down(parts[1])
            self.advance(_parse_seconds(parts[2:], default=self.graph.config.max_dt))
            self.graph.key_up(parts[1])
        elif verb in ("save", "load") and len(parts) == 2 and parts[1].isdigit():
            self._save_or_load(verb, int(parts[1]))
        else:
            self.graph.key_down(verb)
            self.graph.key_up(verb)
        return True

    def advance(self, seconds: float) -> None:
        """Step the graph in ``max_dt`` frames until ``seconds`` have passed."""
        remaining = max(0.0, seconds)
        step = self.graph.config.max_dt
        while remaining > 1e-9:
            self.graph.update(min(step, remaining))
            remaining -= step

    def render(self) -> list[str]:
        return render_lines(self.graph.render_data())

    def _save_or_load(self, verb: str, slot: int) -> None:
        try:
            if verb == "save":
                self._save_store.write_slot(slot, self._save_service.serialize(self.graph.state))
                print(f"Saved to slot {slot}.")
                return
            payload = self._save_store.read_slot(slot)
            state = self._save_service.deserialize(payload)
        except (ValueError, OSError, SaveLoadError) as exc:
            # json.JSONDecodeError is a ValueError
            print(f"Could not {verb} slot {slot}: {exc}")
            logger.debug("Slot %s %s failed", slot, verb, exc_info=True)
            return
        self.graph = build_scene_graph(state, services=self.graph.services, config=self.graph.config)
        self.graph.switch_scene("title")
        title = self.graph.active_scene
        if isinstance(title, TitleScene):
            title.continue_game(self.graph.context)
        print(f"Loaded slot {slot}.")


def _parse_seconds(args: list[str], *, default: float) -> float:
    if not args:
        return default
    try:
        return float(args[0])
    except ValueError:
        return default


def _prompt_seed() -> int:
    while True:
        raw_value = input("Enter seed (blank for random): ").strip()
        if not raw_value:
            return secrets.randbelow(_MAX_RANDOM_SEED)
        try:
            return int(raw_value)
        except ValueError:
            print("Invalid seed. Please enter a valid integer.")


def create_session(seed: int, *, config: EngineConfig | None = None) -> TextSession:
    return TextSession(start_session(seed, config=config or load_config()))


def main() -> None:
    """Start the interactive console session."""
    setup_logging()
    print("=== Sylva ===")
    session = create_session(_prompt_seed())
    print("Type 'help' for commands.")
    while True:
        print()
        print("\n".join(session.render()))
        try:
            command = input("> ")
        except EOFError:
            break
        if not session.execute(command):
            break
    print("Goodbye!")
