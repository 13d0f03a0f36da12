# ============================================================================
# SUMMARY MODELS
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Domain model - Embedded summary copies
# PURPOSE: Shapes of the partial copies embedded inside related documents
# CREATED: 02 OCT 2026
# ============================================================================
"""
Summary Models

Field sets must match core.contracts.SUMMARY_FIELDS.
"""

from typing import Optional

from pydantic import BaseModel, Field

from core.models.base import Summary


class AssetSummary(Summary):
    name: str


class MapSummary(Summary):
    name: str


class LocationSummary(Summary):
    name: str


class ChokePointSummary(Summary):
    name: str
    mac_address: Optional[str] = Field(default=None, alias="macAddress")
    x: Optional[float] = None
    y: Optional[float] = None


class Position(BaseModel):
    """Real-world position of a Location."""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


__all__ = [
    "AssetSummary",
    "MapSummary",
    "LocationSummary",
    "ChokePointSummary",
    "Position",
]
