# ============================================================================
# CHOKE POINT REPOSITORY
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Domain - ChokePoint CRUD operations
# PURPOSE: Document access for the choke_point collection
# CREATED: 03 OCT 2026
# ============================================================================
"""
ChokePoint Repository

CRUD for the ChokePoint collection, plus lookup by MAC address (the natural
key used by CSV upserts).
"""

from typing import Any, Dict, List, Optional

from core.contracts import EntityType
from core.models import ChokePoint
from infrastructure.base_repository import BaseDocumentRepository

_POSITIONED = ("name", "macAddress", "x", "y")


class ChokePointRepository(BaseDocumentRepository[ChokePoint]):
    """Repository for ChokePoint documents."""

    entity_type = EntityType.CHOKE_POINT
    list_projection = ("name", "macAddress", "map", "location", "x", "y")

    async def get_by_mac_address(self, mac_address: str) -> Optional[ChokePoint]:
        return await self.find_one_by(macAddress=mac_address)

    async def exists_by_mac_address(self, mac_address: str) -> bool:
        return await self.get_by_mac_address(mac_address) is not None

    async def list_by_map(self, map_id: str) -> List[Dict[str, Any]]:
        return await self.list_projected({"map._id": map_id}, _POSITIONED)

    async def list_by_location(self, location_id: str) -> List[Dict[str, Any]]:
        return await self.list_projected({"location._id": location_id}, _POSITIONED)


__all__ = ["ChokePointRepository"]
