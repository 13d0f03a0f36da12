# ============================================================================
# LOCATION REPOSITORY
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Domain - Location CRUD operations
# PURPOSE: Document access for the location collection
# CREATED: 03 OCT 2026
# ============================================================================
"""
Location Repository

CRUD for the Location collection.
"""

from typing import Any, Dict, List

from core.contracts import EntityType
from core.models import Location
from infrastructure.base_repository import BaseDocumentRepository


class LocationRepository(BaseDocumentRepository[Location]):
    """Repository for Location documents."""

    entity_type = EntityType.LOCATION
    list_projection = ("name", "position", "asset", "chokePoints")

    async def list_by_asset(self, asset_id: str) -> List[Dict[str, Any]]:
        return await self.list_projected(
            {"asset._id": asset_id}, ("name", "position", "chokePoints")
        )


__all__ = ["LocationRepository"]
