"""Terrain legend entries."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class TerrainDef:
    symbol: str
    name: str
    solid: bool
