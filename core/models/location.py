# ============================================================================
# LOCATION MODEL
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Domain model - Point of interest
# PURPOSE: Named real-world position referencing a set of ChokePoints
# CREATED: 02 OCT 2026
# ============================================================================
"""
Location Model

Maps to collection: location
"""

from typing import ClassVar, List, Optional

from pydantic import Field

from core.contracts import EntityType
from core.models.base import Entity
from core.models.summaries import AssetSummary, ChokePointSummary, Position


class Location(Entity):
    """Point of interest."""

    __entity_type__: ClassVar[EntityType] = EntityType.LOCATION

    name: str = Field(..., min_length=1, max_length=100)
    position: Position
    asset: Optional[AssetSummary] = None
    choke_points: List[ChokePointSummary] = Field(default_factory=list, alias="chokePoints")


__all__ = ["Location"]
