# ============================================================================
# SERVICES MODULE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - Business logic layer
# PURPOSE: Entity services, consistency engine, tile pyramid generator
# CREATED: 09 OCT 2026
# ============================================================================
"""
Services Module

Business logic for the spatial asset graph. Services coordinate between
repositories and the ConsistencyEngine; they never write embedded
summaries themselves.

Usage:
    from services import ConsistencyEngine, ChokePointService

    engine = ConsistencyEngine(registry)
    choke_points = ChokePointService(registry, engine)
    await choke_points.set_map(cp_id, map_id, x=100, y=200)
"""

from .consistency import ConsistencyEngine
from .tile_pyramid import TilePyramidGenerator, compute_zoom_levels, plan_tiles
from .csv_ingest import parse_choke_point_csv
from .asset_service import AssetService
from .map_service import MapService
from .location_service import LocationService
from .choke_point_service import ChokePointService
from .seed import seed_database
from .drift_repair import DriftRepairLoop

__all__ = [
    "ConsistencyEngine",
    "TilePyramidGenerator",
    "compute_zoom_levels",
    "plan_tiles",
    "parse_choke_point_csv",
    "AssetService",
    "MapService",
    "LocationService",
    "ChokePointService",
    "seed_database",
    "DriftRepairLoop",
]
