# ============================================================================
# ASSET MODEL
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Domain model - Top-level physical site
# PURPOSE: Building/campus owning Maps and Locations
# CREATED: 02 OCT 2026
# ============================================================================
"""
Asset Model

Root of the graph. Holds summaries of its Maps and Locations; it is
undeletable while either array is non-empty.

Maps to collection: asset
"""

from typing import ClassVar, List

from pydantic import Field

from core.contracts import EntityType
from core.models.base import Entity
from core.models.summaries import LocationSummary, MapSummary


class Asset(Entity):
    """Physical site (building, campus)."""

    __entity_type__: ClassVar[EntityType] = EntityType.ASSET

    name: str = Field(..., min_length=1, max_length=100)
    maps: List[MapSummary] = Field(default_factory=list)
    locations: List[LocationSummary] = Field(default_factory=list)


__all__ = ["Asset"]
