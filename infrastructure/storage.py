# ============================================================================
# TILE STORAGE INFRASTRUCTURE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Infrastructure - Local filesystem tile storage
# PURPOSE: Lay out tile directories and remove temporary uploads
# CREATED: 06 OCT 2026
# ============================================================================
"""
Tile Storage Infrastructure

Provides TileStorage for the tile pyramid layout on the local filesystem:
- directory_for: {upload_root}/{storage_key}, created on demand
- tile_path / base_path: where a tile or the full-resolution copy goes
- public_path: URL prefix the static mount serves the directory under
- clear / remove_directory: drop a stale pyramid
- discard_upload: remove a temporary upload file, once

Methods are blocking; callers on the event loop wrap them with
asyncio.to_thread.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional

from core.config import TileDefaults, get_defaults

logger = logging.getLogger(__name__)


# ============================================================================
# TILE STORAGE
# ============================================================================

class TileStorage:
    """
    Filesystem layout for tile pyramids.

    Usage:
        storage = TileStorage()
        folder = storage.directory_for(map_id)
        storage.tile_path(map_id, "3-0-1.png")
        storage.public_path(map_id)   # "/uploads/maps/<map_id>"
    """

    BASE_IMAGE = "base"

    def __init__(self, defaults: Optional[TileDefaults] = None):
        self.defaults = defaults or get_defaults().tiles
        self.root = Path(self.defaults.upload_root)

    def directory_for(self, storage_key: str, create: bool = True) -> Path:
        folder = self.root / storage_key
        if create:
            folder.mkdir(parents=True, exist_ok=True)
        return folder

    def tile_path(self, storage_key: str, filename: str) -> Path:
        return self.root / storage_key / filename

    def base_path(self, storage_key: str) -> Path:
        return self.root / storage_key / f"{self.BASE_IMAGE}.{self.defaults.tile_format}"

    def public_path(self, storage_key: str) -> str:
        return f"{self.defaults.upload_url_prefix.rstrip('/')}/{storage_key}"

    def exists(self, storage_key: str) -> bool:
        return (self.root / storage_key).is_dir()

    def remove_directory(self, storage_key: str) -> bool:
        """Delete a pyramid directory. False if there was none."""
        folder = self.root / storage_key
        if not folder.is_dir():
            return False
        shutil.rmtree(folder)
        logger.info(f"Removed tile directory {folder}")
        return True

    def clear(self, storage_key: str) -> Path:
        """Empty (or create) the directory for a fresh pyramid."""
        self.remove_directory(storage_key)
        return self.directory_for(storage_key)

    @staticmethod
    def discard_upload(path: str) -> None:
        """Remove a temporary upload; missing files are ignored."""
        try:
            os.remove(path)
            logger.debug(f"Removed temporary upload {path}")
        except FileNotFoundError:
            logger.debug(f"Temporary upload {path} already gone")


__all__ = ["TileStorage"]
