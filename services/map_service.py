# ============================================================================
# MAP SERVICE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Domain service - Business rules for maps
# PURPOSE: Map lifecycle: image tiling, asset attachment, summary fan-out
# CREATED: 09 OCT 2026
# ============================================================================
"""
MapService

A Map is created from an uploaded floor-plan image. The image is cut into a
tile pyramid stored under the map's id, and the pyramid metadata (path,
width, height, maxZoom) is written onto the map.

Rules:
- create: image required (MissingParameterError otherwise)
- update: full replacement of name and asset; the pyramid is rebuilt only
  when a new image is supplied, after clearing the old tiles
- the map summary fans out to its Asset and every attached ChokePoint
- delete: refused while chokePoints is non-empty; removes the tiles

Pattern: constructor injection of the RepositoryRegistry, the
ConsistencyEngine and the TilePyramidGenerator.
"""

import asyncio
from typing import Any, Dict, List, Optional

from core.contracts import EntityType
from core.errors import AppError, MissingParameterError, NotFoundError
from core.logging import get_logger, log_context
from core.models import Map, TilePyramid
from core.relations import ASSET_MAPS
from repositories.registry import RepositoryRegistry
from services.consistency import ConsistencyEngine
from services.tile_pyramid import TilePyramidGenerator

logger = get_logger(__name__)


class MapService:
    """Business rules for the Map lifecycle."""

    def __init__(
        self,
        registry: RepositoryRegistry,
        engine: ConsistencyEngine,
        generator: TilePyramidGenerator,
    ):
        self.registry = registry
        self.engine = engine
        self.generator = generator
        self.storage = generator.storage
        self.map_repo = registry.maps

    # ================================================================
    # QUERIES
    # ================================================================

    async def list_maps(self) -> List[Dict[str, Any]]:
        return await self.map_repo.list_projected()

    async def get_map(self, map_id: str) -> Optional[Map]:
        return await self.map_repo.get(map_id)

    async def get_map_or_raise(self, map_id: str) -> Map:
        map_ = await self.map_repo.get(map_id)
        if map_ is None:
            raise NotFoundError.for_entity(EntityType.MAP, map_id)
        return map_

    async def list_choke_points_by_map(self, map_id: str) -> List[Dict[str, Any]]:
        return await self.registry.choke_points.list_by_map(map_id)

    # ================================================================
    # MUTATIONS
    # ================================================================

    async def create_map(
        self,
        name: str,
        image_path: Optional[str],
        asset_id: Optional[str] = None,
    ) -> Map:
        """
        Tile the image, insert the map, attach it to its asset.

        Raises:
            MissingParameterError: no image
            NotFoundError: asset_id given but unknown
            UnprocessableImageError: image unreadable
        """
        if not image_path:
            raise MissingParameterError(
                "A map image (jpeg or png) is required",
                code="error.missing_parameter.map_image",
            )

        try:
            asset_summary = await self._asset_summary(asset_id)
            candidate = Map.build(name=name, asset=asset_summary)
        except AppError:
            await asyncio.to_thread(self.storage.discard_upload, image_path)
            raise

        with log_context(entity_type="map", entity_id=candidate.id, operation="create"):
            pyramid = await self.generator.build_pyramid(image_path, candidate.id)
            candidate = candidate.with_changes(**self._pyramid_fields(pyramid))

            try:
                created = await self.map_repo.insert(candidate)
            except AppError:
                await asyncio.to_thread(self.storage.remove_directory, candidate.id)
                raise

            await self.engine.reconcile_parent_change(
                ASSET_MAPS, None, created.ref_id("asset"), created.summary()
            )
            logger.info(f"Map '{created.name}' created (maxZoom={created.max_zoom})")
            return created

    async def update_map(
        self,
        map_id: str,
        name: str,
        asset_id: Optional[str] = None,
        image_path: Optional[str] = None,
    ) -> Map:
        """
        Replace name and asset; rebuild the pyramid if an image is given.

        A missing asset_id detaches the map from its asset.
        """
        with log_context(entity_type="map", entity_id=map_id, operation="update"):
            try:
                current = await self.get_map_or_raise(map_id)
                asset_summary = await self._asset_summary(asset_id)
                candidate = current.with_changes(name=name, asset=asset_summary)
            except AppError:
                if image_path:
                    await asyncio.to_thread(self.storage.discard_upload, image_path)
                raise

            set_fields: Dict[str, Any] = {"name": candidate.name}
            unset_fields = []
            if asset_summary is not None:
                set_fields["asset"] = asset_summary
            else:
                unset_fields.append("asset")

            if image_path:
                pyramid = await self.generator.build_pyramid(image_path, map_id)
                set_fields.update(self._pyramid_fields(pyramid))

            updated = await self.map_repo.update_fields(map_id, set_fields, unset_fields)
            if updated is None:
                raise NotFoundError.for_entity(EntityType.MAP, map_id)

            await self.engine.reconcile_parent_change(
                ASSET_MAPS, current.ref_id("asset"), updated.ref_id("asset"), updated.summary()
            )
            await self.engine.refresh_summary(EntityType.MAP, updated, parents=False)
            logger.info(f"Map '{updated.name}' updated (new image: {bool(image_path)})")
            return updated

    async def set_ratio(self, map_id: str, ratio: float) -> Map:
        """Set the real-world scale of the map."""
        with log_context(entity_type="map", entity_id=map_id, operation="set_ratio"):
            current = await self.get_map_or_raise(map_id)
            candidate = current.with_changes(ratio=ratio)
            updated = await self.map_repo.update_fields(map_id, {"ratio": candidate.ratio})
            if updated is None:
                raise NotFoundError.for_entity(EntityType.MAP, map_id)
            logger.info(f"Map ratio set to {updated.ratio}")
            return updated

    async def delete_map(self, map_id: str) -> Dict[str, int]:
        """Refused while chokePoints is non-empty; removes the tile directory."""
        with log_context(entity_type="map", entity_id=map_id, operation="delete"):
            map_ = await self.get_map_or_raise(map_id)
            self.engine.guard_deletable(EntityType.MAP, map_)
            await self.engine.detach_from_all_parents(EntityType.MAP, map_)
            deleted = await self.map_repo.delete(map_id)
            await asyncio.to_thread(self.storage.remove_directory, map_id)
            return {"deletedCount": deleted}

    # ================================================================
    # HELPERS
    # ================================================================

    async def _asset_summary(self, asset_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if not asset_id:
            return None
        asset = await self.registry.assets.get(asset_id)
        if asset is None:
            raise NotFoundError.for_entity(EntityType.ASSET, asset_id)
        return asset.summary()

    @staticmethod
    def _pyramid_fields(pyramid: TilePyramid) -> Dict[str, Any]:
        return pyramid.model_dump(by_alias=True)


__all__ = ["MapService"]
