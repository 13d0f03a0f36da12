# ============================================================================
# DATABASE CONNECTION POOL & STORE FACTORY
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - Async PostgreSQL connection management
# PURPOSE: Provide the connection pool and build the configured DocumentStore
# CREATED: 03 OCT 2026
# ============================================================================
"""
Database Connection Pool

Manages async PostgreSQL connections using psycopg3 and psycopg_pool.
Singleton pattern ensures one pool per application.

Usage:
    from repositories.database import open_store, close_store

    store = await open_store()
    ...
    await close_store()
"""

import logging
from typing import Optional

from psycopg_pool import AsyncConnectionPool

from core.config import StoreBackend, StoreDefaults, get_connection_string, get_defaults
from infrastructure.document_store import DocumentStore
from infrastructure.memory_store import InMemoryDocumentStore
from infrastructure.postgres_store import PostgresDocumentStore

logger = logging.getLogger(__name__)

# Global instances
_pool: Optional[AsyncConnectionPool] = None
_store: Optional[DocumentStore] = None


def _mask(conninfo: str) -> str:
    """Drop credentials from a connection string for logging."""
    if "@" in conninfo:
        return conninfo.split("@")[-1]
    if "password=" in conninfo:
        return conninfo.split("password=")[0] + "password=***"
    return conninfo


async def init_pool(
    min_size: int = 2,
    max_size: int = 10,
    connection_string: Optional[str] = None,
) -> AsyncConnectionPool:
    """
    Initialize the global connection pool.

    Args:
        min_size: Minimum connections to maintain
        max_size: Maximum connections allowed
        connection_string: Override connection string (defaults to env)
    """
    global _pool

    if _pool is not None:
        logger.warning("Pool already initialized, returning existing pool")
        return _pool

    conninfo = connection_string or get_connection_string()
    logger.info(f"Initializing connection pool: {_mask(conninfo)}")

    _pool = AsyncConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        open=False,  # opened explicitly below
    )
    await _pool.open()
    logger.info(f"Connection pool opened (min={min_size}, max={max_size})")

    return _pool


async def open_store(
    defaults: Optional[StoreDefaults] = None,
    connection_string: Optional[str] = None,
) -> DocumentStore:
    """Build (once) the DocumentStore selected by configuration."""
    global _store

    if _store is not None:
        return _store

    defaults = defaults or get_defaults().store

    if defaults.backend == StoreBackend.MEMORY.value:
        logger.warning("Using in-memory document store; data is lost on restart")
        _store = InMemoryDocumentStore()
    else:
        pool = await init_pool(
            min_size=defaults.pool_min_size,
            max_size=defaults.pool_max_size,
            connection_string=connection_string,
        )
        _store = PostgresDocumentStore(pool, schema=defaults.schema)

    return _store


async def close_store() -> None:
    """Close the global store (and pool, if any)."""
    global _store, _pool

    if _store is not None:
        await _store.close()
        _store = None
    _pool = None


__all__ = ["init_pool", "open_store", "close_store"]
