# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core module initialization
# PURPOSE: Export contracts, errors, relations and models
# CREATED: 02 OCT 2026
# ============================================================================

from core.contracts import EntityType, SUMMARY_FIELDS, NATURAL_KEYS
from core.relations import Relation, RELATIONS
from core.models import Asset, Map, Location, ChokePoint, TilePyramid, ENTITY_MODELS

__all__ = [
    "EntityType",
    "SUMMARY_FIELDS",
    "NATURAL_KEYS",
    "Relation",
    "RELATIONS",
    "Asset",
    "Map",
    "Location",
    "ChokePoint",
    "TilePyramid",
    "ENTITY_MODELS",
]
