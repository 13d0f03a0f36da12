# ============================================================================
# ASSET REPOSITORY
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Domain - Asset CRUD operations
# PURPOSE: Document access for the asset collection
# CREATED: 03 OCT 2026
# ============================================================================
"""
Asset Repository

CRUD for the Asset collection. Listings project to (_id, name).
"""

from core.contracts import EntityType
from core.models import Asset
from infrastructure.base_repository import BaseDocumentRepository


class AssetRepository(BaseDocumentRepository[Asset]):
    """Repository for Asset documents."""

    entity_type = EntityType.ASSET
    list_projection = ("name",)


__all__ = ["AssetRepository"]
