# ============================================================================
# STORE BOOTSTRAP TESTS
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Tests - Initializer, seeds and drift repair loop
# PURPOSE: Verify startup bootstrap steps and the background repair loop
# CREATED: 16 OCT 2026
# ============================================================================
"""
Store Bootstrap Tests

Run with:
    pytest tests/test_store_bootstrap.py -v
"""

import asyncio
import pytest
from unittest.mock import AsyncMock

from core.config import StoreDefaults
from infrastructure.database_initializer import StoreInitializer
from infrastructure.memory_store import InMemoryDocumentStore
from repositories import RepositoryRegistry, close_store, open_store
from services import ConsistencyEngine, DriftRepairLoop, seed_database


# ============================================================================
# SEEDS
# ============================================================================


class TestSeedDatabase:
    def test_choke_point_seed_pulls_dependencies(self):
        registry = RepositoryRegistry(InMemoryDocumentStore())

        async def run():
            await registry.ensure_collections()
            counts = await seed_database(registry, ["choke_point"])
            return counts, await registry.maps.find_one_by(name="Map1")

        counts, map1 = asyncio.run(run())
        assert counts == {"choke_point": 3}
        assert map1.asset.name == "Asset1"
        assert [cp.name for cp in map1.choke_points] == ["ChokePoint1"]

    def test_seeding_is_idempotent(self):
        registry = RepositoryRegistry(InMemoryDocumentStore())

        async def run():
            await registry.ensure_collections()
            await seed_database(registry, ["asset", "map"])
            await seed_database(registry, ["asset", "map"])
            return await registry.assets.list_models(), await registry.maps.list_models()

        assets, maps = asyncio.run(run())
        assert len(assets) == 3
        assert len(maps) == 3
        assert all(len(asset.maps) == 1 for asset in assets)

    def test_unknown_seed(self):
        registry = RepositoryRegistry(InMemoryDocumentStore())
        with pytest.raises(ValueError):
            asyncio.run(seed_database(registry, ["spaceship"]))


# ============================================================================
# INITIALIZER
# ============================================================================


class TestStoreInitializer:
    def test_default_run(self):
        registry = RepositoryRegistry(InMemoryDocumentStore())
        result = asyncio.run(StoreInitializer(registry).initialize_all())
        assert result.success
        assert [step.status for step in result.steps] == ["success", "skipped", "skipped"]

    def test_seed_and_repair(self):
        registry = RepositoryRegistry(InMemoryDocumentStore())
        result = asyncio.run(
            StoreInitializer(registry).initialize_all(seeds=["map"], repair=True)
        )
        assert result.success
        assert result.to_dict()["summary"]["successful"] == 3

    def test_bad_seed_is_reported(self):
        registry = RepositoryRegistry(InMemoryDocumentStore())
        result = asyncio.run(StoreInitializer(registry).initialize_all(seeds=["spaceship"]))
        assert not result.success
        assert result.errors


class TestOpenStore:
    def test_memory_backend(self):
        async def run():
            store = await open_store(StoreDefaults(backend="memory"))
            again = await open_store(StoreDefaults(backend="memory"))
            await close_store()
            return store, again

        store, again = asyncio.run(run())
        assert isinstance(store, InMemoryDocumentStore)
        assert store is again


# ============================================================================
# DRIFT REPAIR LOOP
# ============================================================================


class TestDriftRepairLoop:
    def test_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            DriftRepairLoop(AsyncMock(), 0)

    def test_run_once_tracks_totals(self):
        engine = AsyncMock(spec=ConsistencyEngine)
        engine.repair_drift.return_value = 2
        loop = DriftRepairLoop(engine, 60)

        asyncio.run(loop.run_once())
        asyncio.run(loop.run_once())

        assert loop.runs == 2
        assert loop.documents_corrected == 4
        assert loop.last_run_at is not None

    def test_loop_runs_until_stopped(self):
        engine = AsyncMock(spec=ConsistencyEngine)
        engine.repair_drift.return_value = 0
        loop = DriftRepairLoop(engine, 0.01)

        async def run():
            await loop.start()
            assert loop.is_running
            await asyncio.sleep(0.1)
            await loop.stop()

        asyncio.run(run())
        assert not loop.is_running
        assert engine.repair_drift.await_count >= 1

    def test_errors_do_not_stop_the_loop(self):
        engine = AsyncMock(spec=ConsistencyEngine)
        engine.repair_drift.side_effect = RuntimeError("store down")
        loop = DriftRepairLoop(engine, 0.01)

        async def run():
            await loop.start()
            await asyncio.sleep(0.1)
            still_running = loop.is_running
            await loop.stop()
            return still_running

        assert asyncio.run(run()) is True
        assert engine.repair_drift.await_count >= 2
