# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Infrastructure - Storage, bootstrap, repository base
# PURPOSE: Export infrastructure building blocks
# CREATED: 11 OCT 2026
# ============================================================================
"""
Infrastructure module for the indoor map service.

Provides:
- DocumentStore: async collection store interface (PostgreSQL JSONB, in-memory)
- BaseDocumentRepository: CRUD and array operators for entity repositories
- TileStorage: filesystem layout for tile pyramids
- StoreInitializer (import from infrastructure.database_initializer)

Usage:
    from infrastructure import TileStorage

    storage = TileStorage()
    storage.public_path(map_id)
"""

from infrastructure.document_store import DocumentStore
from infrastructure.memory_store import InMemoryDocumentStore
from infrastructure.postgres_store import PostgresDocumentStore
from infrastructure.base_repository import BaseDocumentRepository
from infrastructure.storage import TileStorage

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "PostgresDocumentStore",
    "BaseDocumentRepository",
    "TileStorage",
]
