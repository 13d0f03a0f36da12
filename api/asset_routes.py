# ============================================================================
# ASSET ROUTES
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - Asset HTTP endpoints
# PURPOSE: HTTP API for the Asset lifecycle
# CREATED: 12 OCT 2026
# ============================================================================
"""
Asset Routes

Endpoints:
- GET    /api/asset                   - List assets
- POST   /api/asset                   - Create asset
- GET    /api/asset/{asset_id}        - Get asset
- PUT    /api/asset/{asset_id}        - Rename asset
- DELETE /api/asset/{asset_id}        - Delete asset (no maps/locations)
- GET    /api/asset/{asset_id}/map    - Maps of the asset
- GET    /api/asset/{asset_id}/location - Locations of the asset
"""

import logging

from fastapi import APIRouter, HTTPException

from api.schemas import AssetRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/asset", tags=["asset"])


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

_asset_service = None


def set_asset_services(asset_service):
    """Called by main.py at startup to inject the asset service."""
    global _asset_service
    _asset_service = asset_service


def _get_asset_service():
    if _asset_service is None:
        raise HTTPException(503, "Asset service not initialized")
    return _asset_service


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("")
async def list_assets():
    return await _get_asset_service().list_assets()


@router.post("")
async def create_asset(request: AssetRequest):
    asset = await _get_asset_service().create_asset(request.name)
    return asset.to_document()


@router.get("/{asset_id}")
async def get_asset(asset_id: str):
    asset = await _get_asset_service().get_asset_or_raise(asset_id)
    return asset.to_document()


@router.put("/{asset_id}")
async def update_asset(asset_id: str, request: AssetRequest):
    asset = await _get_asset_service().update_asset(asset_id, request.name)
    return asset.to_document()


@router.delete("/{asset_id}")
async def delete_asset(asset_id: str):
    return await _get_asset_service().delete_asset(asset_id)


@router.get("/{asset_id}/map")
async def list_asset_maps(asset_id: str):
    svc = _get_asset_service()
    await svc.get_asset_or_raise(asset_id)
    return await svc.list_maps_by_asset(asset_id)


@router.get("/{asset_id}/location")
async def list_asset_locations(asset_id: str):
    svc = _get_asset_service()
    await svc.get_asset_or_raise(asset_id)
    return await svc.list_locations_by_asset(asset_id)
