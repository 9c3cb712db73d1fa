"""World-space constants and tile/pixel conversion.

Positions are ``pygame.math.Vector2`` values measured in pixels.
"""
from __future__ import annotations

import math

from pygame.math import Vector2

TILE_SIZE = 32
PLAYER_SIZE = 24
PLAYER_COLLISION_PADDING = 4


def tile_to_pixel(col: int, row: int) -> Vector2:
    """Return the pixel centre of a tile."""
    return Vector2(col * TILE_SIZE + TILE_SIZE / 2, row * TILE_SIZE + TILE_SIZE / 2)


def pixel_to_tile(x: float, y: float) -> tuple[int, int]:
    return math.floor(x / TILE_SIZE), math.floor(y / TILE_SIZE)
