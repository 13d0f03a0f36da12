# ============================================================================
# HEALTH CHECK ROUTES
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Infrastructure - Liveness / readiness probes
# PURPOSE: Process and document store probes for the container platform
# CREATED: 13 OCT 2026
# ============================================================================
"""
Health Check Routes

Endpoints:
    GET /livez   - Liveness probe. 200 while the process is serving.
    GET /readyz  - Readiness probe. 200 if the document store answers a
                   query, 503 otherwise (or before startup finished).
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from __version__ import __version__, BUILD_DATE
from core.contracts import EntityType

logger = logging.getLogger(__name__)

health_router = APIRouter(tags=["Health"])

_registry = None


def set_health_registry(registry):
    """Called by main.py once the store is open."""
    global _registry
    _registry = registry


@health_router.get("/livez")
async def livez():
    return {
        "status": "alive",
        "version": __version__,
        "build_date": BUILD_DATE,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@health_router.get("/readyz")
async def readyz():
    if _registry is None:
        return JSONResponse(status_code=503, content={"status": "starting"})
    try:
        await _registry.store.find(EntityType.ASSET.collection, {"_id": "__readyz__"})
    except Exception as e:
        logger.warning(f"Readiness check failed: {e}")
        return JSONResponse(status_code=503, content={"status": "unavailable", "error": str(e)})
    return {"status": "ready", "store": type(_registry.store).__name__}


__all__ = ["health_router", "set_health_registry"]
