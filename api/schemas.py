# ============================================================================
# API SCHEMAS
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - Request schemas
# PURPOSE: Pydantic models for JSON request bodies
# CREATED: 12 OCT 2026
# ============================================================================
"""
API Schemas

Request bodies use the wire names (camelCase); Python attributes are
snake_case. Domain rules (name length, lat/lng range, ratio > 0) are
enforced by the entity models, so these only check shape.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


_CAMEL = {"populate_by_name": True}


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

class AssetRequest(BaseModel):
    """Create or rename an asset."""
    name: Optional[str] = Field(None, max_length=100)


class PositionIn(BaseModel):
    lat: float
    lng: float


class LocationRequest(BaseModel):
    """Create or replace a location."""
    name: Optional[str] = Field(None, max_length=100)
    position: Optional[PositionIn] = None
    choke_point_ids: Optional[List[str]] = Field(None, alias="chokePointIds")
    asset_id: Optional[str] = Field(None, alias="assetId")

    model_config = {
        **_CAMEL,
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Entrance",
                    "position": {"lat": 41.0082, "lng": 28.9784},
                    "chokePointIds": [],
                    "assetId": None,
                }
            ]
        },
    }


class ChokePointRequest(BaseModel):
    """Create or replace a chokepoint."""
    name: Optional[str] = Field(None, max_length=100)
    mac_address: Optional[str] = Field(None, max_length=64, alias="macAddress")

    model_config = _CAMEL


class SetMapRequest(BaseModel):
    """Place a chokepoint on a map. Missing values surface as MissingParameter."""
    map_id: Optional[str] = Field(None, alias="mapId")
    x: Optional[float] = None
    y: Optional[float] = None

    model_config = _CAMEL


class PositionRequest(BaseModel):
    """Move a chokepoint on its map (pixel coordinates)."""
    x: float
    y: float


class RatioRequest(BaseModel):
    ratio: float


__all__ = [
    "AssetRequest",
    "PositionIn",
    "LocationRequest",
    "ChokePointRequest",
    "SetMapRequest",
    "PositionRequest",
    "RatioRequest",
]
