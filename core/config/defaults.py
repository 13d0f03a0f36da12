# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for the document store, tiling and the API
# CREATED: 02 OCT 2026
# ============================================================================
"""
Configuration Defaults

Design:
- Immutable dataclasses for defaults
- Environment variable overrides via from_env()
- Type-safe access
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class StoreBackend(str, Enum):
    """Document store implementations."""
    POSTGRES = "postgres"
    MEMORY = "memory"


def _split_csv(value: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class StoreDefaults:
    """
    Defaults for the document store.

    The postgres backend keeps one JSONB table per collection inside `schema`.
    The memory backend is process-local and loses everything on restart.
    """
    backend: str = StoreBackend.POSTGRES.value
    schema: str = "indoormap"
    pool_min_size: int = 2
    pool_max_size: int = 10
    seed_models: Tuple[str, ...] = ()
    repair_on_startup: bool = False
    drift_repair_interval_sec: float = 0.0  # 0 disables the background loop

    @classmethod
    def from_env(cls) -> "StoreDefaults":
        """Create from environment variables."""
        backend = os.getenv("STORE_BACKEND", StoreBackend.POSTGRES.value).lower()
        if backend not in {b.value for b in StoreBackend}:
            raise ValueError(f"Unknown STORE_BACKEND '{backend}'")
        return cls(
            backend=backend,
            schema=os.getenv("STORE_SCHEMA", "indoormap"),
            pool_min_size=int(os.getenv("DB_POOL_MIN", 2)),
            pool_max_size=int(os.getenv("DB_POOL_MAX", 10)),
            seed_models=_split_csv(os.getenv("SEED_MODELS", "")),
            repair_on_startup=os.getenv("REPAIR_ON_STARTUP", "false").lower() == "true",
            drift_repair_interval_sec=float(os.getenv("DRIFT_REPAIR_INTERVAL", 0)),
        )


@dataclass(frozen=True)
class TileDefaults:
    """
    Defaults for tile pyramid generation.

    Tiles land in {upload_root}/{map_id}/ and are served under
    {upload_url_prefix}/{map_id}/.
    """
    tile_size: int = 256
    upload_root: str = "./uploads/maps"
    upload_url_prefix: str = "/uploads/maps"
    tmp_dir: str = "./tmp/uploads"
    tile_format: str = "png"
    png_compress_level: int = 8
    tile_concurrency: int = 8

    @classmethod
    def from_env(cls) -> "TileDefaults":
        """Create from environment variables."""
        return cls(
            upload_root=os.getenv("UPLOAD_ROOT", "./uploads/maps"),
            upload_url_prefix=os.getenv("UPLOAD_URL_PREFIX", "/uploads/maps"),
            tmp_dir=os.getenv("UPLOAD_TMP_DIR", "./tmp/uploads"),
            tile_concurrency=int(os.getenv("TILE_CONCURRENCY", 8)),
        )


@dataclass(frozen=True)
class ApiDefaults:
    """Defaults for the HTTP layer."""
    cors_origins: Tuple[str, ...] = ("http://localhost:4200",)
    app_env: str = "prod"
    image_content_types: Tuple[str, ...] = ("image/jpeg", "image/png")

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @classmethod
    def from_env(cls) -> "ApiDefaults":
        """Create from environment variables."""
        return cls(
            cors_origins=_split_csv(os.getenv("CORS_ORIGINS", "http://localhost:4200")),
            app_env=os.getenv("APP_ENV", "prod").lower(),
        )


def get_connection_string() -> str:
    """
    Get database connection string from environment.

    Priority:
    1. DATABASE_URL environment variable
    2. Individual POSTGRES_* components
    """
    if url := os.environ.get("DATABASE_URL"):
        return url

    host = os.environ.get("POSTGRES_HOST", "localhost")
    port = os.environ.get("POSTGRES_PORT", "5432")
    name = os.environ.get("POSTGRES_DB", "postgres")
    user = os.environ.get("POSTGRES_USER", "postgres")
    password = os.environ.get("POSTGRES_PASSWORD", "")
    sslmode = os.environ.get("POSTGRES_SSLMODE", "prefer")

    return f"postgresql://{user}:{password}@{host}:{port}/{name}?sslmode={sslmode}"


@dataclass(frozen=True)
class Defaults:
    """Bundle of all defaults."""
    store: StoreDefaults
    tiles: TileDefaults
    api: ApiDefaults


_defaults: Optional[Defaults] = None


def get_defaults(reload: bool = False) -> Defaults:
    """Get defaults (environment read once, cached)."""
    global _defaults
    if _defaults is None or reload:
        _defaults = Defaults(
            store=StoreDefaults.from_env(),
            tiles=TileDefaults.from_env(),
            api=ApiDefaults.from_env(),
        )
    return _defaults


__all__ = [
    "StoreBackend",
    "StoreDefaults",
    "TileDefaults",
    "ApiDefaults",
    "Defaults",
    "get_connection_string",
    "get_defaults",
]
