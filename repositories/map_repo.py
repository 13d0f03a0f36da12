# ============================================================================
# MAP REPOSITORY
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Domain - Map CRUD operations
# PURPOSE: Document access for the map collection
# CREATED: 03 OCT 2026
# ============================================================================
"""
Map Repository

CRUD for the Map collection.
"""

from typing import Any, Dict, List

from core.contracts import EntityType
from core.models import Map
from infrastructure.base_repository import BaseDocumentRepository


class MapRepository(BaseDocumentRepository[Map]):
    """Repository for Map documents."""

    entity_type = EntityType.MAP
    list_projection = ("name", "path", "asset", "chokePoints")

    async def list_by_asset(self, asset_id: str) -> List[Dict[str, Any]]:
        """Maps of an asset, (_id, name) only."""
        return await self.list_projected({"asset._id": asset_id}, ("name",))


__all__ = ["MapRepository"]
