"""Immutable terrain grid used for collision and terrain lookups."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence, Tuple

from sylva.data.errors import DataValidationError
from sylva.domain.defs import TerrainDef
from sylva.domain.geometry import TILE_SIZE, pixel_to_tile

BOUNDARY_SYMBOL = "m"


class TileMapError(DataValidationError):
    """Raised when a tile map is empty, ragged or uses unknown symbols."""


@dataclass(slots=True, frozen=True)
class TileGrid:
    rows: Tuple[str, ...]
    legend: Mapping[str, TerrainDef]

    @classmethod
    def from_rows(cls, rows: Sequence[str], legend: Mapping[str, TerrainDef]) -> "TileGrid":
        """Validate and build a grid. Whitespace inside rows is ignored."""
        normalized = tuple("".join(row.split()) for row in rows)
        if not normalized or not normalized[0]:
            raise TileMapError("Tile map must contain at least one non-empty row.")
        width = len(normalized[0])
        for index, row in enumerate(normalized):
            if len(row) != width:
                raise TileMapError(f"Tile map row {index} has width {len(row)}, expected {width}.")
            unknown = sorted(set(row) - set(legend))
            if unknown:
                raise TileMapError(f"Tile map row {index} uses unknown symbols {unknown}.")
        if BOUNDARY_SYMBOL not in legend:
            raise TileMapError(f"Terrain legend must define the boundary symbol '{BOUNDARY_SYMBOL}'.")
        return cls(rows=normalized, legend=dict(legend))

    @property
    def width(self) -> int:
        return len(self.rows[0])

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def pixel_width(self) -> int:
        return self.width * TILE_SIZE

    @property
    def pixel_height(self) -> int:
        return self.height * TILE_SIZE

    def symbol_at(self, col: int, row: int) -> str:
        if 0 <= row < self.height and 0 <= col < self.width:
            return self.rows[row][col]
        return BOUNDARY_SYMBOL

    def is_solid(self, col: int, row: int) -> bool:
        return self.legend[self.symbol_at(col, row)].solid

    def terrain_at(self, x: float, y: float) -> str:
        """Symbol under a pixel position; anything off the map reads as boundary."""
        col, row = pixel_to_tile(x, y)
        return self.symbol_at(col, row)

    def is_solid_at(self, x: float, y: float) -> bool:
        col, row = pixel_to_tile(x, y)
        return self.is_solid(col, row)

    def terrain_name_at(self, x: float, y: float) -> str:
        return self.legend[self.terrain_at(x, y)].name
