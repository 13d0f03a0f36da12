# ============================================================================
# API MODULE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - FastAPI routes
# PURPOSE: HTTP API for the spatial asset graph
# CREATED: 12 OCT 2026
# ============================================================================
"""
API Module

FastAPI routers for assets, maps, locations and chokepoints, plus the
error handlers and health probes. Routers are mounted under /api by
main.py; services are injected with the set_*_services functions.
"""

from .asset_routes import router as asset_router, set_asset_services
from .map_routes import router as map_router, set_map_services
from .location_routes import router as location_router, set_location_services
from .choke_point_routes import router as choke_point_router, set_choke_point_services
from .health_routes import health_router, set_health_registry
from .errors import install_error_handlers

ROUTERS = (asset_router, map_router, location_router, choke_point_router)

__all__ = [
    "ROUTERS",
    "asset_router",
    "map_router",
    "location_router",
    "choke_point_router",
    "health_router",
    "set_asset_services",
    "set_map_services",
    "set_location_services",
    "set_choke_point_services",
    "set_health_registry",
    "install_error_handlers",
]
