"""Plain-text rendering of render models."""
from __future__ import annotations

import textwrap
from typing import Dict, List, Sequence, Tuple

from sylva.domain.geometry import pixel_to_tile
from sylva.services.scenes.render_models import BattlerView, BattleView, PanelView, RenderModel

PLAYER_GLYPH = "@"
NPC_GLYPH = "N"
CREATURE_GLYPH = "c"
BOSS_GLYPH = "B"
PANEL_WIDTH = 56


def wrap_text_for_box(text: str, width: int, *, indent_continuation: bool = True) -> list[str]:
    """
    Wrap text to fit within a fixed width, breaking on word boundaries.

    Args:
        text: The text to wrap
        width: Maximum width per line
        indent_continuation: If True, indent continuation lines with 2 spaces

    Returns:
        List of wrapped lines, each <= width characters
    """
    if not text or width <= 0:
        return [text] if text else [""]
    wrapped = textwrap.fill(
        text,
        width=width,
        subsequent_indent="  " if indent_continuation else "",
        break_long_words=False,
        break_on_hyphens=False,
    )
    return wrapped.split("\n")


def heading(title: str) -> str:
    return f"=== {title} ==="


def render_menu(options: Sequence[str], cursor: int) -> list[str]:
    """Numbered options with a marker on the highlighted one."""
    return [
        f"{'>' if index == cursor else ' '} {index + 1}. {label}"
        for index, label in enumerate(options)
    ]


def render_map(model: RenderModel) -> list[str]:
    """Tile rows with NPCs, creatures and the player drawn over them."""
    overlay: Dict[Tuple[int, int], str] = {}
    for npc in model.npcs:
        overlay[pixel_to_tile(npc.x, npc.y)] = NPC_GLYPH
    for encounter in model.encounters:
        if encounter.status == "defeated":
            continue
        overlay[pixel_to_tile(encounter.x, encounter.y)] = BOSS_GLYPH if encounter.boss else CREATURE_GLYPH
    if model.player is not None:
        overlay[pixel_to_tile(model.player.x, model.player.y)] = PLAYER_GLYPH

    lines: List[str] = []
    for row_index, row in enumerate(model.tiles):
        lines.append(
            "".join(overlay.get((col_index, row_index), symbol) for col_index, symbol in enumerate(row))
        )
    return lines


def render_panel(panel: PanelView) -> list[str]:
    lines = [
        f"Terrain: {panel.terrain}",
        f"Companion: {panel.companion_name}",
        f"Gold: {panel.gold}  Hunger: {panel.hunger}",
    ]
    if panel.quest_lines:
        lines.append("Quests:")
        lines.extend(f"  {line}" for line in panel.quest_lines)
    lines.extend(render_log(panel.log_lines))
    return lines


def render_log(log_lines: Sequence[str]) -> list[str]:
    if not log_lines:
        return []
    lines = ["Log:"]
    for entry in log_lines:
        lines.extend(wrap_text_for_box(f"- {entry}", PANEL_WIDTH))
    return lines


def _battler_line(label: str, battler: BattlerView) -> str:
    return f"{label}: {battler.name} Lv{battler.level}  HP {battler.hp}/{battler.max_hp}"


def render_battle(battle: BattleView) -> list[str]:
    lines = [
        heading("Battle"),
        _battler_line("Enemy", battle.enemy),
        _battler_line("You", battle.player),
    ]
    if battle.phase == "player-turn":
        lines.extend(render_menu(battle.menu_options, battle.cursor))
    else:
        lines.append(f"[{battle.phase}]")
    lines.extend(render_log(battle.log_lines))
    return lines


def render_lines(model: RenderModel) -> list[str]:
    """Turn one render model into printable lines."""
    if model.mode == "title":
        lines = [heading("Sylva")]
        if model.title is not None:
            lines.extend(render_menu(model.title.options, model.title.cursor))
        return lines
    if model.mode == "battle" and model.battle is not None:
        return render_battle(model.battle)

    title = model.panel.title if model.panel is not None else model.scene_id
    lines = [heading(title)]
    lines.extend(render_map(model))
    if model.mode == "inventory" and model.inventory is not None:
        lines.append(heading("Inventory"))
        if not model.inventory.entries:
            lines.append("(empty)")
        for entry in model.inventory.entries:
            marker = ">" if entry.selected else " "
            lines.append(f"{marker} {entry.name} x{entry.quantity}")
    if model.panel is not None:
        lines.extend(render_panel(model.panel))
    return lines
