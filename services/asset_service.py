# ============================================================================
# ASSET SERVICE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Domain service - Business rules for assets
# PURPOSE: Create, rename and delete assets; list what hangs off them
# CREATED: 09 OCT 2026
# ============================================================================
"""
AssetService

Assets are the roots of the graph: they have no parent, and their summary
(`_id`, `name`) is embedded in every Map and Location attached to them.

Pattern: constructor injection of the RepositoryRegistry and the
ConsistencyEngine, async methods, every summary write goes through the
engine.
"""

from typing import Any, Dict, List, Optional

from core.contracts import EntityType
from core.errors import NotFoundError
from core.logging import get_logger, log_context
from core.models import Asset
from repositories.registry import RepositoryRegistry
from services.consistency import ConsistencyEngine

logger = get_logger(__name__)


class AssetService:
    """Business rules for the Asset lifecycle."""

    def __init__(self, registry: RepositoryRegistry, engine: ConsistencyEngine):
        self.registry = registry
        self.engine = engine
        self.asset_repo = registry.assets

    # ================================================================
    # QUERIES
    # ================================================================

    async def list_assets(self) -> List[Dict[str, Any]]:
        return await self.asset_repo.list_projected()

    async def get_asset(self, asset_id: str) -> Optional[Asset]:
        return await self.asset_repo.get(asset_id)

    async def get_asset_or_raise(self, asset_id: str) -> Asset:
        asset = await self.asset_repo.get(asset_id)
        if asset is None:
            raise NotFoundError.for_entity(EntityType.ASSET, asset_id)
        return asset

    async def list_maps_by_asset(self, asset_id: str) -> List[Dict[str, Any]]:
        return await self.registry.maps.list_by_asset(asset_id)

    async def list_locations_by_asset(self, asset_id: str) -> List[Dict[str, Any]]:
        return await self.registry.locations.list_by_asset(asset_id)

    # ================================================================
    # MUTATIONS
    # ================================================================

    async def create_asset(self, name: str) -> Asset:
        asset = Asset.build(name=name)
        with log_context(entity_type="asset", entity_id=asset.id, operation="create"):
            created = await self.asset_repo.insert(asset)
            logger.info(f"Asset '{created.name}' created")
            return created

    async def update_asset(self, asset_id: str, name: str) -> Asset:
        """Rename; the new name fans out to the asset's maps and locations."""
        with log_context(entity_type="asset", entity_id=asset_id, operation="update"):
            current = await self.get_asset_or_raise(asset_id)
            candidate = current.with_changes(name=name)

            updated = await self.asset_repo.update_fields(asset_id, {"name": candidate.name})
            if updated is None:
                raise NotFoundError.for_entity(EntityType.ASSET, asset_id)

            await self.engine.refresh_summary(EntityType.ASSET, updated)
            logger.info(f"Asset renamed '{current.name}' -> '{updated.name}'")
            return updated

    async def delete_asset(self, asset_id: str) -> Dict[str, int]:
        """Refused while the asset still holds maps or locations."""
        with log_context(entity_type="asset", entity_id=asset_id, operation="delete"):
            asset = await self.get_asset_or_raise(asset_id)
            self.engine.guard_deletable(EntityType.ASSET, asset)
            await self.engine.detach_from_all_parents(EntityType.ASSET, asset)
            deleted = await self.asset_repo.delete(asset_id)
            return {"deletedCount": deleted}


__all__ = ["AssetService"]
