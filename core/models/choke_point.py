# ============================================================================
# CHOKE POINT MODEL
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Domain model - Positioned sensor/beacon
# PURPOSE: Hardware beacon identified by MAC address, placed on a Map
# CREATED: 02 OCT 2026
# ============================================================================
"""
ChokePoint Model

x/y are pixel coordinates on the attached Map and are meaningless without
it: map, x and y are set together and cleared together.

Maps to collection: choke_point
"""

from typing import ClassVar, Optional

from pydantic import Field

from core.contracts import EntityType
from core.models.base import Entity
from core.models.summaries import LocationSummary, MapSummary


class ChokePoint(Entity):
    """Beacon / sensor."""

    __entity_type__: ClassVar[EntityType] = EntityType.CHOKE_POINT

    name: str = Field(..., min_length=1, max_length=100)
    mac_address: str = Field(..., min_length=1, max_length=64, alias="macAddress")
    map: Optional[MapSummary] = None
    location: Optional[LocationSummary] = None
    x: Optional[float] = None
    y: Optional[float] = None


__all__ = ["ChokePoint"]
