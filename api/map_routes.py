# ============================================================================
# MAP ROUTES
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - Map HTTP endpoints
# PURPOSE: HTTP API for maps, image uploads and chokepoint positions
# CREATED: 12 OCT 2026
# ============================================================================
"""
Map Routes

Endpoints:
- GET    /api/map                                   - {items, totalCount}
- GET    /api/map/all                               - Plain list
- POST   /api/map                                   - Create (multipart: name, assetId, image)
- GET    /api/map/{map_id}                          - Get map
- PUT    /api/map/{map_id}                          - Replace (multipart, image optional)
- PUT    /api/map/{map_id}/ratio                    - Set real-world ratio
- DELETE /api/map/{map_id}                          - Delete (no chokepoints)
- GET    /api/map/{map_id}/chokePoint               - Chokepoints on the map
- PUT    /api/map/{map_id}/chokePoint/{cp_id}/position - Move a chokepoint
"""

import logging
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from api.schemas import PositionRequest, RatioRequest
from api.uploads import save_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/map", tags=["map"])


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

_map_service = None
_choke_point_service = None


def set_map_services(map_service, choke_point_service):
    """Called by main.py at startup to inject the map and chokepoint services."""
    global _map_service, _choke_point_service
    _map_service = map_service
    _choke_point_service = choke_point_service


def _get_map_service():
    if _map_service is None:
        raise HTTPException(503, "Map service not initialized")
    return _map_service


def _get_choke_point_service():
    if _choke_point_service is None:
        raise HTTPException(503, "ChokePoint service not initialized")
    return _choke_point_service


# ============================================================================
# QUERIES
# ============================================================================

@router.get("")
async def list_maps():
    maps = await _get_map_service().list_maps()
    return {"items": maps, "totalCount": len(maps)}


@router.get("/all")
async def list_all_maps():
    return await _get_map_service().list_maps()


@router.get("/{map_id}")
async def get_map(map_id: str):
    map_ = await _get_map_service().get_map_or_raise(map_id)
    return map_.to_document()


@router.get("/{map_id}/chokePoint")
async def list_map_choke_points(map_id: str):
    svc = _get_map_service()
    await svc.get_map_or_raise(map_id)
    return await svc.list_choke_points_by_map(map_id)


# ============================================================================
# MUTATIONS
# ============================================================================

@router.post("")
async def create_map(
    name: Optional[str] = Form(None),
    assetId: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
):
    """Tile the uploaded image and create the map."""
    svc = _get_map_service()
    image_path = await save_image(image)
    map_ = await svc.create_map(name, image_path, asset_id=assetId or None)
    return map_.to_document()


@router.put("/{map_id}")
async def update_map(
    map_id: str,
    name: Optional[str] = Form(None),
    assetId: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
):
    """Replace name and asset; a new image rebuilds the tile pyramid."""
    svc = _get_map_service()
    image_path = await save_image(image)
    map_ = await svc.update_map(
        map_id, name, asset_id=assetId or None, image_path=image_path
    )
    return map_.to_document()


@router.put("/{map_id}/ratio")
async def set_map_ratio(map_id: str, request: RatioRequest):
    map_ = await _get_map_service().set_ratio(map_id, request.ratio)
    return map_.to_document()


@router.delete("/{map_id}")
async def delete_map(map_id: str):
    return await _get_map_service().delete_map(map_id)


@router.put("/{map_id}/chokePoint/{choke_point_id}/position")
async def set_choke_point_position(map_id: str, choke_point_id: str, request: PositionRequest):
    choke_point = await _get_choke_point_service().set_position(
        map_id, choke_point_id, request.x, request.y
    )
    return choke_point.to_document()
