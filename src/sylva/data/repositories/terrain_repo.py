"""Terrain legend repository."""
from __future__ import annotations

from typing import Dict

from sylva.data.errors import DataValidationError
from sylva.data.repositories.base import RepositoryBase
from sylva.domain.defs import TerrainDef


class TerrainRepository(RepositoryBase[TerrainDef]):
    """Loads the tile symbol legend used by every map."""

    def __init__(self, base_path=None) -> None:
        super().__init__("tiles.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, TerrainDef]:
        legend: Dict[str, TerrainDef] = {}
        for symbol, payload in raw.items():
            context = f"tile '{symbol}'"
            if len(symbol) != 1:
                raise DataValidationError(f"{context} symbol must be a single character.")
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(data, {"name", "solid"}, context)
            legend[symbol] = TerrainDef(
                symbol=symbol,
                name=self._require_str(data["name"], f"{context} name"),
                solid=self._require_bool(data["solid"], f"{context} solid"),
            )
        return legend

    def legend(self) -> Dict[str, TerrainDef]:
        return {terrain.symbol: terrain for terrain in self.all()}
