"""Axis-aligned movement with corner probes and wall sliding."""
from __future__ import annotations

from typing import Iterable

from pygame.math import Vector2

from sylva.domain.geometry import PLAYER_COLLISION_PADDING, PLAYER_SIZE
from sylva.domain.tile_grid import TileGrid

_PROBE_OFFSETS = ((-1, -1), (1, -1), (-1, 1), (1, 1))
_KEY_VECTORS = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def is_walkable(grid: TileGrid, position: Vector2) -> bool:
    """True when all four inset corner probes of the player box are on open tiles."""
    half = PLAYER_SIZE / 2 - PLAYER_COLLISION_PADDING
    return all(
        not grid.is_solid_at(position.x + dx * half, position.y + dy * half) for dx, dy in _PROBE_OFFSETS
    )


def clamp_to_bounds(grid: TileGrid, position: Vector2) -> Vector2:
    margin = PLAYER_SIZE / 2
    return Vector2(
        _clamp(position.x, margin, grid.pixel_width - margin),
        _clamp(position.y, margin, grid.pixel_height - margin),
    )


def resolve_movement(
    grid: TileGrid,
    position: Vector2,
    intent: tuple[float, float],
    speed: float,
    dt: float,
) -> Vector2:
    """Return the new position for one tick of movement.

    The intent is normalized so diagonal motion is no faster than axial motion.
    A blocked full move falls back to horizontal-only and vertical-only
    candidates; a fully blocked move leaves the position unchanged.
    """
    direction = Vector2(intent)
    if direction.length_squared() == 0:
        return Vector2(position)
    direction.normalize_ip()

    proposed = clamp_to_bounds(grid, position + direction * speed * dt)
    if is_walkable(grid, proposed):
        return proposed

    resolved = Vector2(position)
    horizontal = Vector2(proposed.x, position.y)
    if is_walkable(grid, horizontal):
        resolved.x = proposed.x
    vertical = Vector2(resolved.x, proposed.y)
    if is_walkable(grid, vertical):
        resolved.y = proposed.y
    return resolved


def movement_intent(pressed: Iterable[str]) -> tuple[float, float]:
    """Sum the held movement keys into a (vx, vy) intent."""
    vx = vy = 0
    for key in set(pressed):
        dx, dy = _KEY_VECTORS.get(key, (0, 0))
        vx += dx
        vy += dy
    return float(vx), float(vy)


def facing_for(intent: tuple[float, float], previous: str) -> str:
    vx, vy = intent
    if vx == 0 and vy == 0:
        return previous
    if abs(vx) > abs(vy):
        return "right" if vx > 0 else "left"
    return "down" if vy > 0 else "up"
