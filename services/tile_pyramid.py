# ============================================================================
# TILE PYRAMID GENERATOR
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Service - Image -> zoom-level tile pyramid
# PURPOSE: Cut an uploaded floor plan into 256x256 tiles at every zoom level
# CREATED: 06 OCT 2026
# ============================================================================
"""
TilePyramidGenerator

Flat pixel-space (CRS.Simple style) pyramid for floor plans. Zoom maxZoom is
the full-resolution image; each lower zoom halves both dimensions, rounding
half up, until the image is 1x1 at zoom 0.

Pipeline (each stage a plain function of the previous one):

    compute_zoom_levels(w, h)      -> [ZoomLevel(maxZoom) ... ZoomLevel(0)]
    plan_tiles(level, tile_size)   -> [TileBox ...]  (edge tiles clipped)
    resize source to level size    (one worker thread call per level)
    crop + save each TileBox       (concurrent worker threads, bounded)

Output layout under TileStorage:

    {upload_root}/{storage_key}/base.png
    {upload_root}/{storage_key}/{zoom}-{col}-{row}.png

All Pillow work runs in worker threads (asyncio.to_thread); the event loop
only sequences levels. The uploaded source file is deleted when the build
ends, whether it succeeded or not. Tiles written before a failure are left
in place; the next build for the same key clears the directory first.

Usage:
    generator = TilePyramidGenerator(TileStorage())
    pyramid = await generator.build_pyramid("/tmp/uploads/1700000000.png", map_id)
    pyramid.max_zoom, pyramid.path
"""

import asyncio
import math
from typing import List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from core.config import TileDefaults, get_defaults
from core.errors import AppError, InternalError, UnprocessableImageError
from core.logging import get_logger
from core.models import TileBox, TilePyramid, ZoomLevel
from infrastructure.storage import TileStorage

logger = get_logger(__name__)

_SAVEABLE_MODES = ("RGB", "RGBA", "L", "LA")


# ============================================================================
# PURE STAGES
# ============================================================================

def compute_zoom_levels(width: int, height: int) -> List[ZoomLevel]:
    """
    Level sizes from full resolution down to 1x1.

    Returns levels ordered maxZoom first; `levels[0].zoom` is maxZoom and
    `levels[-1]` is zoom 0 (always 1x1).
    """
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    sizes: List[Tuple[int, int]] = [(width, height)]
    w, h = width, height
    while w > 1 or h > 1:
        w, h = (w + 1) // 2, (h + 1) // 2
        sizes.append((w, h))

    max_zoom = len(sizes) - 1
    return [ZoomLevel(zoom=max_zoom - i, width=w, height=h) for i, (w, h) in enumerate(sizes)]


def plan_tiles(level: ZoomLevel, tile_size: int = 256) -> List[TileBox]:
    """Grid of tiles covering one level; last column/row clipped."""
    cols = math.ceil(level.width / tile_size)
    rows = math.ceil(level.height / tile_size)
    boxes = []
    for col in range(cols):
        for row in range(rows):
            left = col * tile_size
            top = row * tile_size
            boxes.append(
                TileBox(
                    zoom=level.zoom,
                    col=col,
                    row=row,
                    left=left,
                    top=top,
                    width=min(tile_size, level.width - left),
                    height=min(tile_size, level.height - top),
                )
            )
    return boxes


# ============================================================================
# BLOCKING HELPERS (run in worker threads)
# ============================================================================

def _read_size(image_path: str) -> Tuple[int, int]:
    with Image.open(image_path) as img:
        return img.size


def _load(image_path: str) -> Image.Image:
    with Image.open(image_path) as img:
        img.load()
        if img.mode in _SAVEABLE_MODES:
            return img.copy()
        return img.convert("RGBA")


def _resize(source: Image.Image, level: ZoomLevel) -> Image.Image:
    if source.size == (level.width, level.height):
        return source
    return source.resize((level.width, level.height), Image.Resampling.LANCZOS)


class TilePyramidGenerator:
    """Builds tile pyramids into a TileStorage."""

    def __init__(self, storage: Optional[TileStorage] = None, defaults: Optional[TileDefaults] = None):
        self.defaults = defaults or (storage.defaults if storage else get_defaults().tiles)
        self.storage = storage or TileStorage(self.defaults)
        self.tile_size = self.defaults.tile_size
        self.ext = self.defaults.tile_format

    def _save(self, image: Image.Image, path) -> None:
        image.save(path, format=self.ext.upper(), compress_level=self.defaults.png_compress_level)

    def _save_tile(self, level_image: Image.Image, tile: TileBox, storage_key: str) -> None:
        self._save(
            level_image.crop(tile.box),
            self.storage.tile_path(storage_key, tile.filename(self.ext)),
        )

    async def read_dimensions(self, image_path: str) -> Tuple[int, int]:
        """(width, height) of an image file; UnprocessableImageError if unreadable."""
        try:
            width, height = await asyncio.to_thread(_read_size, image_path)
        except (
            OSError,
            UnidentifiedImageError,
            ValueError,
            Image.DecompressionBombError,
        ) as e:
            raise UnprocessableImageError(
                f"Could not read image dimensions: {e}",
            ) from e
        if not width or not height:
            raise UnprocessableImageError(f"Image has no usable size ({width}x{height})")
        return width, height

    async def build_pyramid(self, image_path: str, storage_key: str) -> TilePyramid:
        """
        Tile `image_path` into `{upload_root}/{storage_key}`.

        Raises:
            UnprocessableImageError: image metadata unreadable
            InternalError: any other failure while resizing or writing
        """
        try:
            width, height = await self.read_dimensions(image_path)
            levels = compute_zoom_levels(width, height)
            max_zoom = levels[0].zoom

            logger.info(
                f"Building pyramid for {storage_key}: {width}x{height}, maxZoom={max_zoom}"
            )

            await asyncio.to_thread(self.storage.clear, storage_key)
            source = await asyncio.to_thread(_load, image_path)
            await asyncio.to_thread(self._save, source, self.storage.base_path(storage_key))

            total = 0
            for level in levels:
                total += await self._build_level(source, level, storage_key)

            logger.info(f"Pyramid for {storage_key} done: {len(levels)} levels, {total} tiles")
            return TilePyramid(
                path=self.storage.public_path(storage_key),
                width=width,
                height=height,
                max_zoom=max_zoom,
            )
        except AppError:
            raise
        except Exception as e:
            logger.error(f"Pyramid build failed for {storage_key}: {e}")
            raise InternalError(f"Tile pyramid build failed for {storage_key}: {e}") from e
        finally:
            await asyncio.to_thread(self.storage.discard_upload, image_path)

    async def _build_level(self, source: Image.Image, level: ZoomLevel, storage_key: str) -> int:
        level_image = await asyncio.to_thread(_resize, source, level)
        tiles = plan_tiles(level, self.tile_size)
        semaphore = asyncio.Semaphore(self.defaults.tile_concurrency)

        async def write(tile: TileBox) -> None:
            async with semaphore:
                await asyncio.to_thread(self._save_tile, level_image, tile, storage_key)

        await asyncio.gather(*(write(tile) for tile in tiles))
        logger.debug(
            f"Zoom {level.zoom}: {level.width}x{level.height} -> {len(tiles)} tiles"
        )
        return len(tiles)


__all__ = ["TilePyramidGenerator", "compute_zoom_levels", "plan_tiles"]
