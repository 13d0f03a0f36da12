# ============================================================================
# CHOKE POINT ROUTES
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - ChokePoint HTTP endpoints
# PURPOSE: HTTP API for chokepoints, map placement and CSV upsert
# CREATED: 12 OCT 2026
# ============================================================================
"""
ChokePoint Routes

Endpoints:
- GET    /api/chokePoint                     - {items, totalCount}
- GET    /api/chokePoint/all                 - Plain list
- POST   /api/chokePoint                     - Create
- POST   /api/chokePoint/csv                 - Upsert by macAddress (multipart: csv)
- GET    /api/chokePoint/{cp_id}             - Get chokepoint
- PUT    /api/chokePoint/{cp_id}             - Replace name/macAddress
- DELETE /api/chokePoint/{cp_id}             - Delete (detached from map/location)
- POST   /api/chokePoint/{cp_id}/map         - Place on a map {mapId, x, y}
- POST   /api/chokePoint/{cp_id}/unmap       - Remove from its map
- PUT    /api/chokePoint/{cp_id}/position    - Move on its current map {x, y}
"""

import logging
from typing import Optional

from fastapi import APIRouter, File, HTTPException, UploadFile

from api.schemas import ChokePointRequest, PositionRequest, SetMapRequest
from api.uploads import save_upload
from core.errors import MissingParameterError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chokePoint", tags=["chokePoint"])


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

_choke_point_service = None


def set_choke_point_services(choke_point_service):
    """Called by main.py at startup to inject the chokepoint service."""
    global _choke_point_service
    _choke_point_service = choke_point_service


def _get_choke_point_service():
    if _choke_point_service is None:
        raise HTTPException(503, "ChokePoint service not initialized")
    return _choke_point_service


# ============================================================================
# QUERIES
# ============================================================================

@router.get("")
async def list_choke_points():
    choke_points = await _get_choke_point_service().list_choke_points()
    return {"items": choke_points, "totalCount": len(choke_points)}


@router.get("/all")
async def list_all_choke_points():
    return await _get_choke_point_service().list_choke_points()


@router.get("/{choke_point_id}")
async def get_choke_point(choke_point_id: str):
    choke_point = await _get_choke_point_service().get_choke_point_or_raise(choke_point_id)
    return choke_point.to_document()


# ============================================================================
# MUTATIONS
# ============================================================================

@router.post("")
async def create_choke_point(request: ChokePointRequest):
    choke_point = await _get_choke_point_service().create_choke_point(
        request.name, request.mac_address
    )
    return choke_point.to_document()


@router.post("/csv")
async def upsert_choke_points_csv(csv: Optional[UploadFile] = File(None)):
    """Update chokepoints whose macAddress exists, create the rest."""
    svc = _get_choke_point_service()
    path = await save_upload(csv)
    if path is None:
        raise MissingParameterError(
            "A CSV file is required", code="error.missing_parameter.csv"
        )
    choke_points = await svc.upsert_from_csv(path)
    return [cp.to_document() for cp in choke_points]


@router.put("/{choke_point_id}")
async def update_choke_point(choke_point_id: str, request: ChokePointRequest):
    choke_point = await _get_choke_point_service().update_choke_point(
        choke_point_id, request.name, request.mac_address
    )
    return choke_point.to_document()


@router.delete("/{choke_point_id}")
async def delete_choke_point(choke_point_id: str):
    return await _get_choke_point_service().delete_choke_point(choke_point_id)


@router.post("/{choke_point_id}/map")
async def set_choke_point_map(choke_point_id: str, request: SetMapRequest):
    choke_point = await _get_choke_point_service().set_map(
        choke_point_id, request.map_id, request.x, request.y
    )
    return choke_point.to_document()


@router.post("/{choke_point_id}/unmap")
async def unset_choke_point_map(choke_point_id: str):
    choke_point = await _get_choke_point_service().unset_map(choke_point_id)
    return choke_point.to_document()


@router.put("/{choke_point_id}/position")
async def move_choke_point(choke_point_id: str, request: PositionRequest):
    choke_point = await _get_choke_point_service().move(
        choke_point_id, request.x, request.y
    )
    return choke_point.to_document()
