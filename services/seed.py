# ============================================================================
# DEVELOPMENT SEED DATA
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Service - Fixture data for development and tests
# PURPOSE: Seed assets, maps and chokepoints with consistent summaries
# CREATED: 11 OCT 2026
# ============================================================================
"""
Seed data.

Seeds are named by entity type and each pulls in what it depends on:

    asset        -> Asset1..3
    map          -> asset, then Map1..3 (one per asset)
    choke_point  -> map, then ChokePoint1..3 (one per map)

Every link is written through the ConsistencyEngine, so seeded data
satisfies the same invariants as data created through the API. Seeding is
idempotent: records whose name already exists are reused.

Usage:
    await seed_database(registry, ["choke_point"])
"""

from typing import Awaitable, Callable, Dict, List, Sequence

from core.logging import get_logger
from core.models import Asset, ChokePoint, Map
from core.relations import ASSET_MAPS, MAP_CHOKE_POINTS
from repositories.registry import RepositoryRegistry
from services.consistency import ConsistencyEngine

logger = get_logger(__name__)

ASSET_SEEDS = ("Asset1", "Asset2", "Asset3")

MAP_SEEDS = (
    # name, asset, path, width, height, maxZoom
    ("Map1", "Asset1", "/path1", 1921, 1081, 11),
    ("Map2", "Asset2", "/path2", 1922, 1082, 12),
    ("Map3", "Asset3", "/path3", 1923, 1083, 13),
)

CHOKE_POINT_SEEDS = (
    # name, macAddress, map
    ("ChokePoint1", "112233", "Map1"),
    ("ChokePoint2", "445566", "Map2"),
    ("ChokePoint3", "778899", "Map3"),
)


async def seed_assets(registry: RepositoryRegistry, engine: ConsistencyEngine) -> List[Asset]:
    seeded = []
    for name in ASSET_SEEDS:
        asset = await registry.assets.find_one_by(name=name)
        if asset is None:
            asset = await registry.assets.insert(Asset.build(name=name))
        seeded.append(asset)
    return seeded


async def seed_maps(registry: RepositoryRegistry, engine: ConsistencyEngine) -> List[Map]:
    await seed_assets(registry, engine)
    seeded = []
    for name, asset_name, path, width, height, max_zoom in MAP_SEEDS:
        map_ = await registry.maps.find_one_by(name=name)
        if map_ is None:
            asset = await registry.assets.find_one_by(name=asset_name)
            map_ = await registry.maps.insert(
                Map.build(
                    name=name,
                    asset=asset.summary() if asset else None,
                    path=path,
                    width=width,
                    height=height,
                    max_zoom=max_zoom,
                )
            )
            await engine.reconcile_parent_change(
                ASSET_MAPS, None, map_.ref_id("asset"), map_.summary()
            )
        seeded.append(map_)
    return seeded


async def seed_choke_points(
    registry: RepositoryRegistry, engine: ConsistencyEngine
) -> List[ChokePoint]:
    await seed_maps(registry, engine)
    seeded = []
    for name, mac_address, map_name in CHOKE_POINT_SEEDS:
        choke_point = await registry.choke_points.get_by_mac_address(mac_address)
        if choke_point is None:
            map_ = await registry.maps.find_one_by(name=map_name)
            choke_point = await registry.choke_points.insert(
                ChokePoint.build(
                    name=name,
                    mac_address=mac_address,
                    map=map_.summary() if map_ else None,
                )
            )
            await engine.reconcile_parent_change(
                MAP_CHOKE_POINTS, None, choke_point.ref_id("map"), choke_point.summary()
            )
        seeded.append(choke_point)
    return seeded


SEEDS: Dict[str, Callable[[RepositoryRegistry, ConsistencyEngine], Awaitable[list]]] = {
    "asset": seed_assets,
    "map": seed_maps,
    "choke_point": seed_choke_points,
}


async def seed_database(registry: RepositoryRegistry, models: Sequence[str]) -> Dict[str, int]:
    """
    Run the named seeds in dependency order.

    Raises:
        ValueError: unknown seed name
    """
    unknown = [m for m in models if m not in SEEDS]
    if unknown:
        raise ValueError(f"Cannot find seed(s) {unknown}; available: {list(SEEDS)}")

    engine = ConsistencyEngine(registry)
    counts = {}
    for name, seed in SEEDS.items():
        if name in models:
            counts[name] = len(await seed(registry, engine))
            logger.info(f"Seeded {counts[name]} {name} record(s)")
    return counts


__all__ = ["seed_database", "SEEDS"]
