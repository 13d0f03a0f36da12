# ============================================================================
# MODELS MODULE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Model exports
# PURPOSE: Central export point for all Pydantic models
# CREATED: 02 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

All Pydantic models for the spatial asset graph. ENTITY_MODELS maps each
EntityType to its model class.
"""

from typing import Dict, Type

from core.contracts import EntityType
from core.models.base import Entity, Summary, new_id
from core.models.summaries import (
    AssetSummary,
    MapSummary,
    LocationSummary,
    ChokePointSummary,
    Position,
)
from core.models.asset import Asset
from core.models.map import Map
from core.models.location import Location
from core.models.choke_point import ChokePoint
from core.models.tile_pyramid import TileBox, ZoomLevel, TilePyramid

ENTITY_MODELS: Dict[EntityType, Type[Entity]] = {
    EntityType.ASSET: Asset,
    EntityType.MAP: Map,
    EntityType.LOCATION: Location,
    EntityType.CHOKE_POINT: ChokePoint,
}

__all__ = [
    "Entity",
    "Summary",
    "new_id",
    # Summaries
    "AssetSummary",
    "MapSummary",
    "LocationSummary",
    "ChokePointSummary",
    "Position",
    # Entities
    "Asset",
    "Map",
    "Location",
    "ChokePoint",
    "ENTITY_MODELS",
    # Tiles
    "TileBox",
    "ZoomLevel",
    "TilePyramid",
]
