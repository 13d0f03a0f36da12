# ============================================================================
# RELATION REGISTRY
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Foundation - Adjacency list of denormalized relations
# PURPOSE: Declare who embeds whose summary, once, for the consistency engine
# CREATED: 03 OCT 2026
# ============================================================================
"""
Relation Registry

Each Relation is one parent/child pair kept mirrored in both directions:

    parent.<children_field>  : [child summary, ...]
    child.<parent_field>     : parent summary | absent

The consistency engine walks this list; it has no per-pair code. Adding an
entity type means adding its relations here and its summary fields in
core.contracts.

Holders of an entity's summary (fan-out targets):
    - as a child: the one parent named by child.<parent_field>
    - as a parent: every child listed in parent.<children_field>
"""

from dataclasses import dataclass
from typing import List, Tuple

from core.contracts import EntityType


@dataclass(frozen=True)
class Relation:
    """Mirrored parent/child pair."""
    parent: EntityType
    child: EntityType
    children_field: str
    parent_field: str

    @property
    def name(self) -> str:
        return f"{self.parent.value}.{self.children_field}"


ASSET_MAPS = Relation(EntityType.ASSET, EntityType.MAP, "maps", "asset")
ASSET_LOCATIONS = Relation(EntityType.ASSET, EntityType.LOCATION, "locations", "asset")
MAP_CHOKE_POINTS = Relation(EntityType.MAP, EntityType.CHOKE_POINT, "chokePoints", "map")
LOCATION_CHOKE_POINTS = Relation(
    EntityType.LOCATION, EntityType.CHOKE_POINT, "chokePoints", "location"
)

RELATIONS: Tuple[Relation, ...] = (
    ASSET_MAPS,
    ASSET_LOCATIONS,
    MAP_CHOKE_POINTS,
    LOCATION_CHOKE_POINTS,
)


def relations_as_child(entity_type: EntityType) -> List[Relation]:
    """Relations where entity_type embeds a parent summary."""
    return [r for r in RELATIONS if r.child == entity_type]


def relations_as_parent(entity_type: EntityType) -> List[Relation]:
    """Relations where entity_type embeds child summaries."""
    return [r for r in RELATIONS if r.parent == entity_type]


def get_relation(parent: EntityType, child: EntityType) -> Relation:
    for relation in RELATIONS:
        if relation.parent == parent and relation.child == child:
            return relation
    raise KeyError(f"No relation {parent.value} -> {child.value}")


__all__ = [
    "Relation",
    "RELATIONS",
    "ASSET_MAPS",
    "ASSET_LOCATIONS",
    "MAP_CHOKE_POINTS",
    "LOCATION_CHOKE_POINTS",
    "relations_as_child",
    "relations_as_parent",
    "get_relation",
]
