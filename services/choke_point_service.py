# ============================================================================
# CHOKE POINT SERVICE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Domain service - Business rules for chokepoints
# PURPOSE: ChokePoint lifecycle, map placement and CSV bulk upsert
# CREATED: 10 OCT 2026
# ============================================================================
"""
ChokePointService

ChokePoints are the leaves of the graph. Their summary carries the map
position (x, y), so moving one on its map republishes it to the Map and
Location holding it.

Rules:
- set_map: chokepoint and map must exist, x and y must be non-zero, and the
  point must lie on the map image (0 <= x <= width, 0 <= y <= height)
- unset_map: map, x and y are cleared in one write, then the chokepoint is
  pulled from the old map
- upsert: rows keyed by macAddress; existing records are updated first, new
  ones created after, both in row order
- delete: the chokepoint is pulled from every map and location holding it
"""

import asyncio
from typing import Any, Dict, List, Optional, Sequence

from core.contracts import EntityType
from core.errors import MissingParameterError, NotFoundError, UnprocessableEntityError
from core.logging import get_logger, log_context
from core.models import ChokePoint, Map
from core.relations import LOCATION_CHOKE_POINTS, MAP_CHOKE_POINTS
from repositories.registry import RepositoryRegistry
from services.consistency import ConsistencyEngine
from services.csv_ingest import parse_choke_point_csv

logger = get_logger(__name__)


def ensure_fits(map_: Map, x: float, y: float) -> None:
    """Raise UnprocessableEntityError unless (x, y) lies on the map image."""
    if not map_.has_dimensions:
        raise UnprocessableEntityError(
            f"Map '{map_.id}' has no image dimensions",
            code="error.unprocessable_entity.map_no_dimensions",
        )
    if not map_.fits(x, y):
        raise UnprocessableEntityError(
            f"Position ({x}, {y}) is outside map bounds {map_.width}x{map_.height}",
            code="error.unprocessable_entity.map_position_not_fit",
        )


class ChokePointService:
    """Business rules for the ChokePoint lifecycle."""

    def __init__(self, registry: RepositoryRegistry, engine: ConsistencyEngine):
        self.registry = registry
        self.engine = engine
        self.choke_point_repo = registry.choke_points

    # ================================================================
    # QUERIES
    # ================================================================

    async def list_choke_points(self) -> List[Dict[str, Any]]:
        return await self.choke_point_repo.list_projected()

    async def get_choke_point(self, choke_point_id: str) -> Optional[ChokePoint]:
        return await self.choke_point_repo.get(choke_point_id)

    async def get_choke_point_or_raise(self, choke_point_id: str) -> ChokePoint:
        choke_point = await self.choke_point_repo.get(choke_point_id)
        if choke_point is None:
            raise NotFoundError.for_entity(EntityType.CHOKE_POINT, choke_point_id)
        return choke_point

    async def get_by_mac_address(self, mac_address: str) -> Optional[ChokePoint]:
        return await self.choke_point_repo.get_by_mac_address(mac_address)

    # ================================================================
    # CRUD
    # ================================================================

    async def create_choke_point(self, name: str, mac_address: str) -> ChokePoint:
        choke_point = ChokePoint.build(name=name, mac_address=mac_address)
        with log_context(entity_type="choke_point", entity_id=choke_point.id, operation="create"):
            created = await self.choke_point_repo.insert(choke_point)
            logger.info(f"ChokePoint '{created.name}' ({created.mac_address}) created")
            return created

    async def update_choke_point(
        self, choke_point_id: str, name: str, mac_address: str
    ) -> ChokePoint:
        """Replace name and macAddress; republish to the holding map and location."""
        with log_context(
            entity_type="choke_point", entity_id=choke_point_id, operation="update"
        ):
            current = await self.get_choke_point_or_raise(choke_point_id)
            candidate = current.with_changes(name=name, mac_address=mac_address)

            updated = await self.choke_point_repo.update_fields(
                choke_point_id,
                {"name": candidate.name, "macAddress": candidate.mac_address},
            )
            if updated is None:
                raise NotFoundError.for_entity(EntityType.CHOKE_POINT, choke_point_id)

            await self.engine.refresh_summary(EntityType.CHOKE_POINT, updated)
            logger.info(f"ChokePoint '{updated.name}' updated")
            return updated

    async def delete_choke_point(self, choke_point_id: str) -> Dict[str, int]:
        with log_context(
            entity_type="choke_point", entity_id=choke_point_id, operation="delete"
        ):
            choke_point = await self.get_choke_point_or_raise(choke_point_id)
            await self.engine.detach_from_all_parents(EntityType.CHOKE_POINT, choke_point)
            deleted = await self.choke_point_repo.delete(choke_point_id)
            return {"deletedCount": deleted}

    # ================================================================
    # MAP PLACEMENT
    # ================================================================

    async def set_map(
        self,
        choke_point_id: str,
        map_id: Optional[str],
        x: Optional[float],
        y: Optional[float],
    ) -> ChokePoint:
        """
        Attach to a map at (x, y), moving it off any previous map.

        Raises:
            NotFoundError: chokepoint or map unknown
            MissingParameterError: map, x or y missing (or x/y zero)
            UnprocessableEntityError: (x, y) outside the map image
        """
        with log_context(
            entity_type="choke_point", entity_id=choke_point_id, operation="set_map"
        ):
            current = await self.get_choke_point_or_raise(choke_point_id)
            map_ = await self.registry.maps.get(map_id) if map_id else None
            if map_id and map_ is None:
                raise NotFoundError.for_entity(EntityType.MAP, map_id)

            if not (map_ and x and y):
                raise MissingParameterError(
                    "mapId, x and y are required to place a chokepoint",
                    code="error.missing_parameter.chokePoint_set_map",
                )
            ensure_fits(map_, x, y)

            updated = await self.choke_point_repo.update_fields(
                choke_point_id, {"map": map_.summary(), "x": x, "y": y}
            )
            if updated is None:
                raise NotFoundError.for_entity(EntityType.CHOKE_POINT, choke_point_id)

            summary = updated.summary()
            await self.engine.reconcile_parent_change(
                MAP_CHOKE_POINTS, current.ref_id("map"), map_.id, summary
            )
            location_id = updated.ref_id("location")
            await self.engine.reconcile_parent_change(
                LOCATION_CHOKE_POINTS, location_id, location_id, summary
            )
            logger.info(f"ChokePoint placed on map {map_.id} at ({x}, {y})")
            return updated

    async def unset_map(self, choke_point_id: str) -> ChokePoint:
        """Clear map, x and y in one write, then pull from the old map."""
        with log_context(
            entity_type="choke_point", entity_id=choke_point_id, operation="unset_map"
        ):
            current = await self.get_choke_point_or_raise(choke_point_id)

            updated = await self.choke_point_repo.update_fields(
                choke_point_id, unset_fields=("map", "x", "y")
            )
            if updated is None:
                raise NotFoundError.for_entity(EntityType.CHOKE_POINT, choke_point_id)

            summary = updated.summary()
            await self.engine.reconcile_parent_change(
                MAP_CHOKE_POINTS, current.ref_id("map"), None, summary
            )
            location_id = updated.ref_id("location")
            await self.engine.reconcile_parent_change(
                LOCATION_CHOKE_POINTS, location_id, location_id, summary
            )
            logger.info(f"ChokePoint removed from map {current.ref_id('map')}")
            return updated

    async def set_position(
        self, map_id: str, choke_point_id: str, x: float, y: float
    ) -> ChokePoint:
        """Move a chokepoint on the map it is already attached to."""
        with log_context(
            entity_type="choke_point", entity_id=choke_point_id, operation="set_position"
        ):
            map_ = await self.registry.maps.get(map_id)
            if map_ is None:
                raise NotFoundError.for_entity(EntityType.MAP, map_id)
            current = await self.get_choke_point_or_raise(choke_point_id)
            if current.ref_id("map") != map_id:
                raise NotFoundError(
                    f"chokePoint '{choke_point_id}' is not on map '{map_id}'",
                    code="error.notFound.chokePoint",
                )
            ensure_fits(map_, x, y)

            updated = await self.choke_point_repo.update_fields(
                choke_point_id, {"x": x, "y": y}
            )
            if updated is None:
                raise NotFoundError.for_entity(EntityType.CHOKE_POINT, choke_point_id)

            await self.engine.refresh_summary(EntityType.CHOKE_POINT, updated)
            logger.info(f"ChokePoint moved to ({x}, {y})")
            return updated

    async def move(self, choke_point_id: str, x: float, y: float) -> ChokePoint:
        """set_position on whatever map the chokepoint is attached to."""
        current = await self.get_choke_point_or_raise(choke_point_id)
        map_id = current.ref_id("map")
        if map_id is None:
            raise MissingParameterError(
                f"chokePoint '{choke_point_id}' is not placed on a map",
                code="error.missing_parameter.chokePoint_map",
            )
        return await self.set_position(map_id, choke_point_id, x, y)

    # ================================================================
    # BULK UPSERT
    # ================================================================

    async def upsert_many(self, rows: Sequence[Dict[str, Any]]) -> List[ChokePoint]:
        """Upsert by macAddress: updates first, then creates."""

        async def update(existing: ChokePoint, row: Dict[str, Any]) -> ChokePoint:
            return await self.update_choke_point(existing.id, row.get("name"), row["macAddress"])

        async def create(row: Dict[str, Any]) -> ChokePoint:
            return await self.create_choke_point(row.get("name"), row["macAddress"])

        return await self.engine.upsert_by_natural_key(
            EntityType.CHOKE_POINT, "macAddress", rows, update=update, create=create
        )

    async def upsert_from_csv(self, path: str) -> List[ChokePoint]:
        """Parse an uploaded CSV (the file is removed) and upsert its rows."""
        rows = await asyncio.to_thread(parse_choke_point_csv, path)
        return await self.upsert_many(rows)


__all__ = ["ChokePointService", "ensure_fits"]
