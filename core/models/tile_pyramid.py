# ============================================================================
# TILE PYRAMID MODELS
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Domain model - Tile pyramid plan and result
# PURPOSE: Describe zoom levels, tile boxes and the built pyramid metadata
# CREATED: 03 OCT 2026
# ============================================================================
"""
Tile Pyramid Models

ZoomLevel and TileBox are the data passed between pipeline stages;
TilePyramid is what gets written onto the Map.
"""

from dataclasses import dataclass
from typing import Tuple

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class TileBox:
    """One tile of a level: grid cell and pixel box (left, top, right, bottom)."""
    zoom: int
    col: int
    row: int
    left: int
    top: int
    width: int
    height: int

    @property
    def box(self) -> Tuple[int, int, int, int]:
        return (self.left, self.top, self.left + self.width, self.top + self.height)

    def filename(self, ext: str) -> str:
        return f"{self.zoom}-{self.col}-{self.row}.{ext}"


@dataclass(frozen=True)
class ZoomLevel:
    """Resized image size at one zoom."""
    zoom: int
    width: int
    height: int


class TilePyramid(BaseModel):
    """Metadata of a built pyramid."""
    path: str
    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)
    max_zoom: int = Field(..., ge=0, alias="maxZoom")

    model_config = {"populate_by_name": True}


__all__ = ["TileBox", "ZoomLevel", "TilePyramid"]
