# ============================================================================
# MAP MODEL
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Domain model - Floor plan
# PURPOSE: Floor plan image with pixel dimensions, owning ChokePoints
# CREATED: 02 OCT 2026
# ============================================================================
"""
Map Model

A floor plan. `path`, `width`, `height` and `maxZoom` come from the tile
pyramid built out of the uploaded image; ChokePoint positions are pixel
coordinates inside (width, height).

Maps to collection: map
"""

from typing import ClassVar, List, Optional

from pydantic import Field

from core.contracts import EntityType
from core.models.base import Entity
from core.models.summaries import AssetSummary, ChokePointSummary


class Map(Entity):
    """Floor plan."""

    __entity_type__: ClassVar[EntityType] = EntityType.MAP

    name: str = Field(..., min_length=1, max_length=100)
    asset: Optional[AssetSummary] = None
    path: Optional[str] = None
    width: Optional[int] = Field(default=None, ge=1)
    height: Optional[int] = Field(default=None, ge=1)
    max_zoom: Optional[int] = Field(default=None, ge=0, alias="maxZoom")
    ratio: Optional[float] = Field(default=None, gt=0)
    choke_points: List[ChokePointSummary] = Field(default_factory=list, alias="chokePoints")

    @property
    def has_dimensions(self) -> bool:
        return bool(self.width) and bool(self.height)

    def fits(self, x: float, y: float) -> bool:
        """True if (x, y) lies on the image, edges included."""
        if not self.has_dimensions:
            return False
        return 0 <= x <= self.width and 0 <= y <= self.height


__all__ = ["Map"]
