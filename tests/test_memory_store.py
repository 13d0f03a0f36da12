# ============================================================================
# IN-MEMORY DOCUMENT STORE TESTS
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Tests - DocumentStore contract
# PURPOSE: Verify filters, unique indexes and array operators
# CREATED: 14 OCT 2026
# ============================================================================
"""
InMemoryDocumentStore Tests

The in-memory store backs every service test, so its semantics must match
the DocumentStore contract the Postgres store implements.

Run with:
    pytest tests/test_memory_store.py -v
"""

import asyncio
import pytest

from core.errors import DuplicateKeyError, InternalError
from core.models import Asset
from infrastructure.document_store import get_path, matches, project
from infrastructure.memory_store import InMemoryDocumentStore
from repositories import AssetRepository, RepositoryRegistry


# ============================================================================
# HELPERS
# ============================================================================


def _store_with_docs():
    store = InMemoryDocumentStore()

    async def setup():
        await store.ensure_collection("map", ("name",))
        await store.insert_one("map", {"_id": "m1", "name": "A", "asset": {"_id": "a1"}})
        await store.insert_one("map", {"_id": "m2", "name": "B", "asset": {"_id": "a2"}})
        await store.insert_one("map", {"_id": "m3", "name": "C"})

    asyncio.run(setup())
    return store


# ============================================================================
# FILTER HELPERS
# ============================================================================


class TestFilterHelpers:
    def test_get_path(self):
        doc = {"map": {"_id": "m1"}}
        assert get_path(doc, "map._id") == "m1"
        assert get_path(doc, "location._id") is None
        assert get_path({"map": "flat"}, "map._id") is None

    def test_matches_in(self):
        assert matches({"_id": "a"}, {"_id": {"$in": ["a", "b"]}})
        assert not matches({"_id": "c"}, {"_id": {"$in": ["a", "b"]}})

    def test_matches_empty_filter(self):
        assert matches({"_id": "a"}, None)
        assert matches({"_id": "a"}, {})

    def test_project_keeps_id(self):
        doc = {"_id": "a", "name": "x", "maps": [1]}
        assert project(doc, ("name",)) == {"_id": "a", "name": "x"}


# ============================================================================
# STORE CONTRACT
# ============================================================================


class TestInMemoryStore:
    def test_find_by_embedded_field(self):
        store = _store_with_docs()
        docs = asyncio.run(store.find("map", {"asset._id": "a1"}))
        assert [d["_id"] for d in docs] == ["m1"]

    def test_find_preserves_insertion_order(self):
        store = _store_with_docs()
        docs = asyncio.run(store.find("map", projection=("name",)))
        assert [d["name"] for d in docs] == ["A", "B", "C"]
        assert "asset" not in docs[0]

    def test_unique_index_on_insert(self):
        store = _store_with_docs()
        with pytest.raises(DuplicateKeyError) as exc_info:
            asyncio.run(store.insert_one("map", {"_id": "m4", "name": "A"}))
        assert exc_info.value.field == "name"

    def test_unique_index_on_update(self):
        store = _store_with_docs()
        with pytest.raises(DuplicateKeyError):
            asyncio.run(store.update_one("map", {"_id": "m2"}, {"name": "A"}))

    def test_update_one_set_and_unset(self):
        store = _store_with_docs()
        doc = asyncio.run(store.update_one("map", {"_id": "m1"}, {"width": 5}, ("asset",)))
        assert doc["width"] == 5
        assert "asset" not in doc

    def test_update_one_missing_returns_none(self):
        store = _store_with_docs()
        assert asyncio.run(store.update_one("map", {"_id": "nope"}, {"width": 5})) is None

    def test_update_many_counts(self):
        store = _store_with_docs()
        count = asyncio.run(
            store.update_many("map", {"_id": {"$in": ["m1", "m2"]}}, unset_fields=("asset",))
        )
        assert count == 2
        docs = asyncio.run(store.find("map", {"asset._id": "a1"}))
        assert docs == []

    def test_returned_documents_are_copies(self):
        store = _store_with_docs()
        doc = asyncio.run(store.find_one("map", {"_id": "m1"}))
        doc["name"] = "mutated"
        again = asyncio.run(store.find_one("map", {"_id": "m1"}))
        assert again["name"] == "A"

    def test_delete_one(self):
        store = _store_with_docs()
        assert asyncio.run(store.delete_one("map", {"_id": "m1"})) == 1
        assert asyncio.run(store.delete_one("map", {"_id": "m1"})) == 0


class TestArrayOperators:
    def test_push_and_pull(self):
        store = _store_with_docs()

        async def run():
            await store.push("map", "m1", "chokePoints", {"_id": "c1", "name": "Door"})
            await store.push("map", "m1", "chokePoints", {"_id": "c2", "name": "Gate"})
            pulled = await store.pull("map", "m1", "chokePoints", "c1")
            return pulled, await store.find_one("map", {"_id": "m1"})

        pulled, doc = asyncio.run(run())
        assert pulled == 1
        assert doc["chokePoints"] == [{"_id": "c2", "name": "Gate"}]

    def test_pull_absent_element(self):
        store = _store_with_docs()
        assert asyncio.run(store.pull("map", "m1", "chokePoints", "c9")) == 0

    def test_set_array_element_replaces_in_place(self):
        store = _store_with_docs()

        async def run():
            await store.push("map", "m1", "chokePoints", {"_id": "c1", "name": "Door"})
            await store.push("map", "m1", "chokePoints", {"_id": "c2", "name": "Gate"})
            return await store.set_array_element(
                "map", "m1", "chokePoints", {"_id": "c1", "name": "Front door", "x": 3}
            )

        doc = asyncio.run(run())
        assert doc["chokePoints"][0] == {"_id": "c1", "name": "Front door", "x": 3}
        assert doc["chokePoints"][1]["_id"] == "c2"

    def test_set_array_element_no_match_is_noop(self):
        store = _store_with_docs()
        result = asyncio.run(
            store.set_array_element("map", "m1", "chokePoints", {"_id": "c1", "name": "Door"})
        )
        assert result is None
        doc = asyncio.run(store.find_one("map", {"_id": "m1"}))
        assert "chokePoints" not in doc


# ============================================================================
# REPOSITORY LAYER
# ============================================================================


class TestRepository:
    def test_insert_and_get_model(self):
        registry = RepositoryRegistry(InMemoryDocumentStore())

        async def run():
            await registry.ensure_collections()
            asset = await registry.assets.insert(Asset.build(name="HQ"))
            return asset, await registry.assets.get(asset.id)

        asset, fetched = asyncio.run(run())
        assert fetched == asset

    def test_duplicate_name_passes_through(self):
        registry = RepositoryRegistry(InMemoryDocumentStore())

        async def run():
            await registry.ensure_collections()
            await registry.assets.insert(Asset.build(name="HQ"))
            await registry.assets.insert(Asset.build(name="HQ"))

        with pytest.raises(DuplicateKeyError):
            asyncio.run(run())

    def test_unexpected_store_error_becomes_internal(self):
        class BrokenStore(InMemoryDocumentStore):
            async def find_one(self, collection, filter):
                raise RuntimeError("connection reset")

        repo = AssetRepository(BrokenStore())
        with pytest.raises(InternalError):
            asyncio.run(repo.get("a1"))
