# ============================================================================
# INDOOR MAP SERVICE - MAIN APPLICATION
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - FastAPI application entry point
# PURPOSE: Main application wiring store, services and routes
# CREATED: 13 OCT 2026
# ============================================================================
"""
Indoor Map Service Main Application

FastAPI application that:
1. Provides the HTTP API for assets, maps, locations and chokepoints
2. Serves generated tile pyramids as static files
3. Optionally seeds the store and runs a background drift repair loop

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from __version__ import __version__, BUILD_DATE, EPOCH
from core.config import get_defaults
from infrastructure.database_initializer import StoreInitializer
from infrastructure.storage import TileStorage
from repositories import RepositoryRegistry, open_store, close_store
from services import (
    ConsistencyEngine,
    TilePyramidGenerator,
    AssetService,
    MapService,
    LocationService,
    ChokePointService,
    DriftRepairLoop,
)
from api import (
    ROUTERS,
    health_router,
    install_error_handlers,
    set_asset_services,
    set_map_services,
    set_location_services,
    set_choke_point_services,
    set_health_registry,
)

# Configure logging using our structured logging system
from core.logging import configure_logging, get_logger

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__)

defaults = get_defaults()

# Global instances
_drift_loop: DriftRepairLoop = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Opens the store, wires services into the routers on startup,
    stops the drift loop and closes the store on shutdown.
    """
    global _drift_loop

    logger.info(f"Starting Indoor Map Service v{__version__} (Epoch {EPOCH}, Build {BUILD_DATE})")

    store = await open_store(defaults.store)
    registry = RepositoryRegistry(store)
    logger.info(f"Document store opened ({type(store).__name__})")

    result = await StoreInitializer(registry).initialize_all(
        seeds=defaults.store.seed_models,
        repair=defaults.store.repair_on_startup,
    )
    if not result.success:
        logger.warning(f"Store initialization had issues: {result.errors}")

    engine = ConsistencyEngine(registry)
    storage = TileStorage(defaults.tiles)
    generator = TilePyramidGenerator(storage)

    asset_service = AssetService(registry, engine)
    map_service = MapService(registry, engine, generator)
    location_service = LocationService(registry, engine)
    choke_point_service = ChokePointService(registry, engine)

    set_asset_services(asset_service)
    set_map_services(map_service, choke_point_service)
    set_location_services(location_service)
    set_choke_point_services(choke_point_service)
    set_health_registry(registry)
    logger.info("Services initialized")

    if defaults.store.drift_repair_interval_sec > 0:
        _drift_loop = DriftRepairLoop(engine, defaults.store.drift_repair_interval_sec)
        await _drift_loop.start()

    yield

    # Shutdown
    logger.info("Shutting down Indoor Map Service...")

    if _drift_loop:
        await _drift_loop.stop()
        _drift_loop = None
    set_health_registry(None)
    await close_store()

    logger.info("Indoor Map Service stopped")


# Create FastAPI app
app = FastAPI(
    title="Indoor Map Service",
    description=f"Epoch {EPOCH} spatial asset graph with tiled floor plans",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(defaults.api.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)

# Tile pyramids are served straight from disk
Path(defaults.tiles.upload_root).mkdir(parents=True, exist_ok=True)
app.mount(
    defaults.tiles.upload_url_prefix,
    StaticFiles(directory=defaults.tiles.upload_root),
    name="tiles",
)

# Include health check routes (no prefix - /livez, /readyz)
app.include_router(health_router)

for router in ROUTERS:
    app.include_router(router, prefix="/api")


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Indoor Map Service",
        "version": __version__,
        "epoch": EPOCH,
        "build_date": BUILD_DATE,
        "status": "running",
        "docs": "/docs",
    }


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
