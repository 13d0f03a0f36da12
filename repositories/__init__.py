# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - Document access layer
# PURPOSE: Document store implementations and per-entity repositories
# CREATED: 03 OCT 2026
# ============================================================================
"""
Repositories Module

Provides document access for the spatial asset graph. psycopg3 async with
connection pooling in production, an in-memory store for tests.

Usage:
    from repositories import open_store, RepositoryRegistry

    store = await open_store()
    registry = RepositoryRegistry(store)
    asset = await registry.assets.get(asset_id)
"""

from infrastructure.document_store import DocumentStore
from infrastructure.memory_store import InMemoryDocumentStore
from infrastructure.postgres_store import PostgresDocumentStore
from .database import init_pool, open_store, close_store
from .asset_repo import AssetRepository
from .map_repo import MapRepository
from .location_repo import LocationRepository
from .choke_point_repo import ChokePointRepository
from .registry import RepositoryRegistry

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "PostgresDocumentStore",
    "init_pool",
    "open_store",
    "close_store",
    "AssetRepository",
    "MapRepository",
    "LocationRepository",
    "ChokePointRepository",
    "RepositoryRegistry",
]
