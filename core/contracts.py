# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Foundation - Entity types and summary contracts
# PURPOSE: Define entity type identifiers and which fields each summary carries
# CREATED: 02 OCT 2026
# EXPORTS: EntityType, SUMMARY_FIELDS, NATURAL_KEYS
# ============================================================================
"""
Base contracts for the spatial asset graph.

Every entity type maps to exactly one document collection. A summary is the
partial copy of an entity that other documents embed; SUMMARY_FIELDS is the
single place that decides which fields travel with it.
"""

from enum import Enum
from typing import Dict, Tuple


class EntityType(str, Enum):
    """
    Entity types in the graph. Value is the collection name.

    Containment:
        ASSET -> MAP -> CHOKE_POINT
        ASSET -> LOCATION -> CHOKE_POINT
    """
    ASSET = "asset"
    MAP = "map"
    LOCATION = "location"
    CHOKE_POINT = "choke_point"

    @property
    def collection(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """camelCase label used in error codes (error.notFound.chokePoint)."""
        head, *rest = self.value.split("_")
        return head + "".join(part.title() for part in rest)


# Fields copied into an embedded summary, besides _id
SUMMARY_FIELDS: Dict[EntityType, Tuple[str, ...]] = {
    EntityType.ASSET: ("name",),
    EntityType.MAP: ("name",),
    EntityType.LOCATION: ("name",),
    EntityType.CHOKE_POINT: ("name", "macAddress", "x", "y"),
}

# Unique fields enforced by the store, per collection
NATURAL_KEYS: Dict[EntityType, Tuple[str, ...]] = {
    EntityType.ASSET: ("name",),
    EntityType.MAP: ("name",),
    EntityType.LOCATION: ("name",),
    EntityType.CHOKE_POINT: ("name", "macAddress"),
}


__all__ = ["EntityType", "SUMMARY_FIELDS", "NATURAL_KEYS"]
