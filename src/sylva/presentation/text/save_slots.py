"""Numbered save slots on disk."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from sylva.core.config import get_user_data_dir


def get_save_dir() -> Path:
    return get_user_data_dir() / "saves"


@dataclass(slots=True)
class SlotSummary:
    slot: int
    exists: bool
    scene_id: str | None = None
    is_corrupt: bool = False


class SaveSlotStore:
    """Reads and writes save payloads as ``slot_<n>.json`` files."""

    def __init__(self, base_dir: Path | str | None = None, slot_count: int = 3) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else get_save_dir()
        self._slot_count = slot_count

    def list_slots(self) -> List[SlotSummary]:
        slots: List[SlotSummary] = []
        for slot_index in range(1, self._slot_count + 1):
            path = self._slot_path(slot_index)
            if not path.exists():
                slots.append(SlotSummary(slot=slot_index, exists=False))
                continue
            try:
                payload = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError):
                slots.append(SlotSummary(slot=slot_index, exists=True, is_corrupt=True))
                continue
            scene_id = payload.get("current_scene_id") if isinstance(payload, dict) else None
            slots.append(
                SlotSummary(
                    slot=slot_index,
                    exists=True,
                    scene_id=scene_id if isinstance(scene_id, str) else None,
                    is_corrupt=not isinstance(payload, dict),
                )
            )
        return slots

    def slot_exists(self, slot: int) -> bool:
        self._validate_slot(slot)
        return self._slot_path(slot).exists()

    def read_slot(self, slot: int) -> Dict[str, Any]:
        self._validate_slot(slot)
        return json.loads(self._slot_path(slot).read_text(encoding="utf-8"))

    def write_slot(self, slot: int, payload: Dict[str, Any]) -> None:
        self._validate_slot(slot)
        self._base_dir.mkdir(parents=True, exist_ok=True)
        self._slot_path(slot).write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")

    def _slot_path(self, slot: int) -> Path:
        return self._base_dir / f"slot_{slot}.json"

    def _validate_slot(self, slot: int) -> None:
        if not 1 <= slot <= self._slot_count:
            raise ValueError(f"Slot index must be between 1 and {self._slot_count}.")
