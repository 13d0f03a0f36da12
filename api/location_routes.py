# ============================================================================
# LOCATION ROUTES
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - Location HTTP endpoints
# PURPOSE: HTTP API for the Location lifecycle
# CREATED: 12 OCT 2026
# ============================================================================
"""
Location Routes

Endpoints:
- GET    /api/location                         - {items, totalCount}
- GET    /api/location/all                     - Plain list
- POST   /api/location                         - Create
- GET    /api/location/{location_id}           - Get location
- PUT    /api/location/{location_id}           - Replace (incl. chokePointIds)
- DELETE /api/location/{location_id}           - Delete (no chokepoints)
- GET    /api/location/{location_id}/chokePoint - Chokepoints of the location
"""

import logging

from fastapi import APIRouter, HTTPException

from api.schemas import LocationRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/location", tags=["location"])


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

_location_service = None


def set_location_services(location_service):
    """Called by main.py at startup to inject the location service."""
    global _location_service
    _location_service = location_service


def _get_location_service():
    if _location_service is None:
        raise HTTPException(503, "Location service not initialized")
    return _location_service


def _position(request: LocationRequest):
    return request.position.model_dump() if request.position else None


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("")
async def list_locations():
    locations = await _get_location_service().list_locations()
    return {"items": locations, "totalCount": len(locations)}


@router.get("/all")
async def list_all_locations():
    return await _get_location_service().list_locations()


@router.post("")
async def create_location(request: LocationRequest):
    location = await _get_location_service().create_location(
        request.name,
        _position(request),
        choke_point_ids=request.choke_point_ids or [],
        asset_id=request.asset_id or None,
    )
    return location.to_document()


@router.get("/{location_id}")
async def get_location(location_id: str):
    location = await _get_location_service().get_location_or_raise(location_id)
    return location.to_document()


@router.put("/{location_id}")
async def update_location(location_id: str, request: LocationRequest):
    location = await _get_location_service().update_location(
        location_id,
        request.name,
        _position(request),
        choke_point_ids=request.choke_point_ids,
        asset_id=request.asset_id or None,
    )
    return location.to_document()


@router.delete("/{location_id}")
async def delete_location(location_id: str):
    return await _get_location_service().delete_location(location_id)


@router.get("/{location_id}/chokePoint")
async def list_location_choke_points(location_id: str):
    svc = _get_location_service()
    await svc.get_location_or_raise(location_id)
    return await svc.list_choke_points_by_location(location_id)
