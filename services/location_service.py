# ============================================================================
# LOCATION SERVICE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Domain service - Business rules for locations
# PURPOSE: Location lifecycle with parent-driven ChokePoint membership
# CREATED: 10 OCT 2026
# ============================================================================
"""
LocationService

Unlike Maps, a Location's chokePoints are set from the Location side: create
and update take the complete list of ChokePoint ids. The engine's
assign_children releases ChokePoints that left the list and points the
listed ones at this Location (pulling them from any previous Location).
"""

from typing import Any, Dict, List, Optional, Sequence

from core.contracts import EntityType
from core.errors import NotFoundError
from core.logging import get_logger, log_context
from core.models import Location
from core.relations import ASSET_LOCATIONS, LOCATION_CHOKE_POINTS
from repositories.registry import RepositoryRegistry
from services.consistency import ConsistencyEngine

logger = get_logger(__name__)


class LocationService:
    """Business rules for the Location lifecycle."""

    def __init__(self, registry: RepositoryRegistry, engine: ConsistencyEngine):
        self.registry = registry
        self.engine = engine
        self.location_repo = registry.locations

    # ================================================================
    # QUERIES
    # ================================================================

    async def list_locations(self) -> List[Dict[str, Any]]:
        return await self.location_repo.list_projected()

    async def get_location(self, location_id: str) -> Optional[Location]:
        return await self.location_repo.get(location_id)

    async def get_location_or_raise(self, location_id: str) -> Location:
        location = await self.location_repo.get(location_id)
        if location is None:
            raise NotFoundError.for_entity(EntityType.LOCATION, location_id)
        return location

    async def list_choke_points_by_location(self, location_id: str) -> List[Dict[str, Any]]:
        return await self.registry.choke_points.list_by_location(location_id)

    # ================================================================
    # MUTATIONS
    # ================================================================

    async def create_location(
        self,
        name: str,
        position: Dict[str, float],
        choke_point_ids: Sequence[str] = (),
        asset_id: Optional[str] = None,
    ) -> Location:
        asset_summary = await self._asset_summary(asset_id)
        location = Location.build(name=name, position=position, asset=asset_summary)

        with log_context(entity_type="location", entity_id=location.id, operation="create"):
            created = await self.location_repo.insert(location)
            await self.engine.reconcile_parent_change(
                ASSET_LOCATIONS, None, created.ref_id("asset"), created.summary()
            )
            if choke_point_ids:
                created = await self.engine.assign_children(
                    LOCATION_CHOKE_POINTS, created, choke_point_ids
                )
            logger.info(
                f"Location '{created.name}' created with {len(created.choke_points)} chokepoint(s)"
            )
            return created

    async def update_location(
        self,
        location_id: str,
        name: str,
        position: Dict[str, float],
        choke_point_ids: Optional[Sequence[str]] = None,
        asset_id: Optional[str] = None,
    ) -> Location:
        """
        Replace name, position, asset and chokepoint membership.

        choke_point_ids=None keeps the current membership; a missing
        asset_id detaches the location from its asset.
        """
        with log_context(entity_type="location", entity_id=location_id, operation="update"):
            current = await self.get_location_or_raise(location_id)
            asset_summary = await self._asset_summary(asset_id)
            candidate = current.with_changes(
                name=name, position=position, asset=asset_summary
            )

            set_fields: Dict[str, Any] = {
                "name": candidate.name,
                "position": candidate.position.model_dump(),
            }
            unset_fields = []
            if asset_summary is not None:
                set_fields["asset"] = asset_summary
            else:
                unset_fields.append("asset")

            updated = await self.location_repo.update_fields(location_id, set_fields, unset_fields)
            if updated is None:
                raise NotFoundError.for_entity(EntityType.LOCATION, location_id)

            await self.engine.reconcile_parent_change(
                ASSET_LOCATIONS,
                current.ref_id("asset"),
                updated.ref_id("asset"),
                updated.summary(),
            )

            if choke_point_ids is None:
                choke_point_ids = [c["_id"] for c in current.children("chokePoints")]
            updated = await self.engine.assign_children(
                LOCATION_CHOKE_POINTS, updated, choke_point_ids
            )
            logger.info(f"Location '{updated.name}' updated")
            return updated

    async def delete_location(self, location_id: str) -> Dict[str, int]:
        """Refused while chokePoints is non-empty."""
        with log_context(entity_type="location", entity_id=location_id, operation="delete"):
            location = await self.get_location_or_raise(location_id)
            self.engine.guard_deletable(EntityType.LOCATION, location)
            await self.engine.detach_from_all_parents(EntityType.LOCATION, location)
            deleted = await self.location_repo.delete(location_id)
            return {"deletedCount": deleted}

    async def _asset_summary(self, asset_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if not asset_id:
            return None
        asset = await self.registry.assets.get(asset_id)
        if asset is None:
            raise NotFoundError.for_entity(EntityType.ASSET, asset_id)
        return asset.summary()


__all__ = ["LocationService"]
