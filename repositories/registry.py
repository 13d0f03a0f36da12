# ============================================================================
# REPOSITORY REGISTRY
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - Entity type -> repository mapping
# PURPOSE: One explicit place that knows which repository serves which type
# CREATED: 03 OCT 2026
# ============================================================================
"""
Repository Registry

Built once from a DocumentStore and passed to the engine, services and
seeding. Nothing discovers repositories at runtime.

Usage:
    registry = RepositoryRegistry(store)
    await registry.ensure_collections()
    map_repo = registry.for_type(EntityType.MAP)
"""

import logging
from typing import Dict, Iterator

from core.contracts import EntityType
from infrastructure.base_repository import BaseDocumentRepository
from .asset_repo import AssetRepository
from .choke_point_repo import ChokePointRepository
from infrastructure.document_store import DocumentStore
from .location_repo import LocationRepository
from .map_repo import MapRepository

logger = logging.getLogger(__name__)


class RepositoryRegistry:
    """Entity type -> repository instance."""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.assets = AssetRepository(store)
        self.maps = MapRepository(store)
        self.locations = LocationRepository(store)
        self.choke_points = ChokePointRepository(store)
        self._by_type: Dict[EntityType, BaseDocumentRepository] = {
            EntityType.ASSET: self.assets,
            EntityType.MAP: self.maps,
            EntityType.LOCATION: self.locations,
            EntityType.CHOKE_POINT: self.choke_points,
        }

    def for_type(self, entity_type: EntityType) -> BaseDocumentRepository:
        try:
            return self._by_type[entity_type]
        except KeyError:
            raise KeyError(f"No repository registered for '{entity_type}'") from None

    def __iter__(self) -> Iterator[BaseDocumentRepository]:
        return iter(self._by_type.values())

    async def ensure_collections(self) -> None:
        for repo in self:
            await repo.ensure_collection()
        logger.info(f"Ensured {len(self._by_type)} collections")


__all__ = ["RepositoryRegistry"]
