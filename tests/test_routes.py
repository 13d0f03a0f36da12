# ============================================================================
# HTTP ROUTE TESTS
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Tests - End-to-end API tests over the in-memory store
# PURPOSE: Verify endpoints, multipart uploads and error response bodies
# CREATED: 17 OCT 2026
# ============================================================================
"""
HTTP Route Tests

Builds a FastAPI app from the routers with real services over an
InMemoryDocumentStore and tiles written under tmp_path, then drives it with
TestClient.

Run with:
    pytest tests/test_routes.py -v
"""

import asyncio
import io
import pytest
from unittest.mock import AsyncMock

from fastapi import FastAPI
from fastapi.testclient import TestClient
from PIL import Image

from api import (
    ROUTERS,
    health_router,
    install_error_handlers,
    set_asset_services,
    set_choke_point_services,
    set_health_registry,
    set_location_services,
    set_map_services,
)
from api.errors import GENERIC_MESSAGE
from core.config import TileDefaults, get_defaults
from core.errors import InternalError
from infrastructure.memory_store import InMemoryDocumentStore
from infrastructure.storage import TileStorage
from repositories import RepositoryRegistry
from services import (
    AssetService,
    ChokePointService,
    ConsistencyEngine,
    LocationService,
    MapService,
    TilePyramidGenerator,
)


# ============================================================================
# FIXTURES
# ============================================================================


def _make_test_app(tmp_path):
    """App with every router wired to services over a fresh in-memory store."""
    registry = RepositoryRegistry(InMemoryDocumentStore())
    asyncio.run(registry.ensure_collections())
    engine = ConsistencyEngine(registry)
    storage = TileStorage(TileDefaults(upload_root=str(tmp_path / "maps")))

    choke_point_service = ChokePointService(registry, engine)
    set_asset_services(AssetService(registry, engine))
    set_map_services(
        MapService(registry, engine, TilePyramidGenerator(storage)), choke_point_service
    )
    set_location_services(LocationService(registry, engine))
    set_choke_point_services(choke_point_service)
    set_health_registry(registry)

    app = FastAPI()
    install_error_handlers(app)
    app.include_router(health_router)
    for router in ROUTERS:
        app.include_router(router, prefix="/api")
    return app


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("UPLOAD_TMP_DIR", str(tmp_path / "tmp"))
    monkeypatch.delenv("APP_ENV", raising=False)
    get_defaults(reload=True)
    with TestClient(_make_test_app(tmp_path)) as test_client:
        yield test_client
    monkeypatch.delenv("UPLOAD_TMP_DIR")
    get_defaults(reload=True)


def _png(width, height):
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 200, 200)).save(buffer, format="PNG")
    return buffer.getvalue()


def _create_map(client, name="Floor1", width=1921, height=1081, asset_id=None):
    data = {"name": name}
    if asset_id:
        data["assetId"] = asset_id
    response = client.post(
        "/api/map",
        data=data,
        files={"image": ("plan.png", _png(width, height), "image/png")},
    )
    assert response.status_code == 200, response.text
    return response.json()


def _create_choke_point(client, name="Door", mac="AA:01"):
    response = client.post("/api/chokePoint", json={"name": name, "macAddress": mac})
    assert response.status_code == 200, response.text
    return response.json()


# ============================================================================
# HEALTH
# ============================================================================


class TestHealth:
    def test_livez(self, client):
        response = client.get("/livez")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    def test_readyz(self, client):
        response = client.get("/readyz")
        assert response.status_code == 200
        assert response.json()["store"] == "InMemoryDocumentStore"

    def test_readyz_before_startup(self, client):
        set_health_registry(None)
        assert client.get("/readyz").status_code == 503


# ============================================================================
# ASSETS
# ============================================================================


class TestAssetRoutes:
    def test_create_get_list(self, client):
        created = client.post("/api/asset", json={"name": "HQ"}).json()
        assert created["name"] == "HQ"
        assert created["maps"] == []

        assert client.get(f"/api/asset/{created['_id']}").json()["name"] == "HQ"
        assert client.get("/api/asset").json() == [{"_id": created["_id"], "name": "HQ"}]

    def test_duplicate_name(self, client):
        client.post("/api/asset", json={"name": "HQ"})
        response = client.post("/api/asset", json={"name": "HQ"})
        assert response.status_code == 409
        assert response.json()["code"] == "error.duplicate.name"

    def test_blank_name(self, client):
        response = client.post("/api/asset", json={"name": "  "})
        body = response.json()
        assert response.status_code == 400
        assert body["status"] == "fail"
        assert body["code"] == "error.validation"
        assert "time" in body

    def test_malformed_body(self, client):
        response = client.post("/api/asset", json={"name": ["HQ"]})
        assert response.status_code == 400
        assert response.json()["code"] == "error.validation"

    def test_not_found(self, client):
        response = client.get("/api/asset/nope")
        assert response.status_code == 404
        assert response.json()["code"] == "error.notFound.asset"

    def test_rename_and_children(self, client):
        asset = client.post("/api/asset", json={"name": "HQ"}).json()
        map_ = _create_map(client, asset_id=asset["_id"])

        client.put(f"/api/asset/{asset['_id']}", json={"name": "Head Office"})

        assert client.get(f"/api/map/{map_['_id']}").json()["asset"]["name"] == "Head Office"
        maps = client.get(f"/api/asset/{asset['_id']}/map").json()
        assert maps == [{"_id": map_["_id"], "name": "Floor1"}]
        assert client.get(f"/api/asset/{asset['_id']}/location").json() == []

    def test_delete_guarded(self, client):
        asset = client.post("/api/asset", json={"name": "HQ"}).json()
        _create_map(client, asset_id=asset["_id"])
        response = client.delete(f"/api/asset/{asset['_id']}")
        assert response.status_code == 400
        assert response.json()["code"] == "error.delete.asset_map_exists"

    def test_delete(self, client):
        asset = client.post("/api/asset", json={"name": "HQ"}).json()
        assert client.delete(f"/api/asset/{asset['_id']}").json() == {"deletedCount": 1}
        assert client.get(f"/api/asset/{asset['_id']}").status_code == 404


# ============================================================================
# MAPS
# ============================================================================


class TestMapRoutes:
    def test_create_tiles_image(self, client, tmp_path):
        map_ = _create_map(client, width=300, height=200)
        assert map_["width"] == 300
        assert map_["height"] == 200
        assert map_["maxZoom"] == 9
        assert map_["path"] == f"/uploads/maps/{map_['_id']}"
        assert (tmp_path / "maps" / map_["_id"] / "base.png").exists()
        assert list((tmp_path / "tmp").iterdir()) == []

    def test_create_requires_image(self, client):
        response = client.post("/api/map", data={"name": "Floor1"})
        assert response.status_code == 400
        assert response.json()["code"] == "error.missing_parameter.map_image"

    def test_non_image_upload_treated_as_missing(self, client):
        response = client.post(
            "/api/map",
            data={"name": "Floor1"},
            files={"image": ("plan.txt", b"hello", "text/plain")},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "error.missing_parameter.map_image"

    def test_unreadable_image(self, client):
        response = client.post(
            "/api/map",
            data={"name": "Floor1"},
            files={"image": ("plan.png", b"not a png", "image/png")},
        )
        assert response.status_code == 422
        assert response.json()["code"] == "error.unprocessable_entity.map_image_tile"

    def test_unknown_asset(self, client):
        response = client.post(
            "/api/map",
            data={"name": "Floor1", "assetId": "nope"},
            files={"image": ("plan.png", _png(2, 2), "image/png")},
        )
        assert response.status_code == 404

    def test_list_shapes(self, client):
        map_ = _create_map(client)
        paged = client.get("/api/map").json()
        assert paged["totalCount"] == 1
        assert paged["items"][0]["_id"] == map_["_id"]
        assert "width" not in paged["items"][0]
        assert client.get("/api/map/all").json() == paged["items"]

    def test_update_detaches_asset(self, client):
        asset = client.post("/api/asset", json={"name": "HQ"}).json()
        map_ = _create_map(client, asset_id=asset["_id"])

        response = client.put(f"/api/map/{map_['_id']}", data={"name": "Floor1b"})

        assert response.status_code == 200
        assert "asset" not in response.json()
        assert response.json()["maxZoom"] == map_["maxZoom"]
        assert client.get(f"/api/asset/{asset['_id']}").json()["maps"] == []

    def test_update_with_new_image(self, client):
        map_ = _create_map(client, width=300, height=200)
        response = client.put(
            f"/api/map/{map_['_id']}",
            data={"name": "Floor1"},
            files={"image": ("plan.png", _png(2, 2), "image/png")},
        )
        assert response.json()["maxZoom"] == 1
        assert response.json()["width"] == 2

    def test_ratio(self, client):
        map_ = _create_map(client)
        response = client.put(f"/api/map/{map_['_id']}/ratio", json={"ratio": 0.5})
        assert response.json()["ratio"] == 0.5
        bad = client.put(f"/api/map/{map_['_id']}/ratio", json={"ratio": -1})
        assert bad.status_code == 400

    def test_delete_removes_tiles(self, client, tmp_path):
        map_ = _create_map(client, width=4, height=4)
        assert client.delete(f"/api/map/{map_['_id']}").json() == {"deletedCount": 1}
        assert not (tmp_path / "maps" / map_["_id"]).exists()

    def test_delete_guarded(self, client):
        map_ = _create_map(client)
        cp = _create_choke_point(client)
        client.post(f"/api/chokePoint/{cp['_id']}/map", json={"mapId": map_["_id"], "x": 1, "y": 1})
        response = client.delete(f"/api/map/{map_['_id']}")
        assert response.status_code == 400
        assert response.json()["code"] == "error.delete.map_chokePoint_exists"

    def test_choke_point_position(self, client):
        map_ = _create_map(client)
        cp = _create_choke_point(client)
        client.post(f"/api/chokePoint/{cp['_id']}/map", json={"mapId": map_["_id"], "x": 1, "y": 1})

        response = client.put(
            f"/api/map/{map_['_id']}/chokePoint/{cp['_id']}/position", json={"x": 7, "y": 8}
        )
        assert response.status_code == 200
        listed = client.get(f"/api/map/{map_['_id']}/chokePoint").json()
        assert listed == [{"_id": cp["_id"], "name": "Door", "macAddress": "AA:01", "x": 7, "y": 8}]


# ============================================================================
# LOCATIONS
# ============================================================================


class TestLocationRoutes:
    def test_create_with_choke_points(self, client):
        asset = client.post("/api/asset", json={"name": "HQ"}).json()
        cp = _create_choke_point(client)
        response = client.post(
            "/api/location",
            json={
                "name": "Gate",
                "position": {"lat": 41.0, "lng": 29.0},
                "chokePointIds": [cp["_id"]],
                "assetId": asset["_id"],
            },
        )
        location = response.json()
        assert response.status_code == 200
        assert [c["_id"] for c in location["chokePoints"]] == [cp["_id"]]
        assert client.get(f"/api/chokePoint/{cp['_id']}").json()["location"]["name"] == "Gate"
        assert client.get(f"/api/asset/{asset['_id']}/location").json()[0]["name"] == "Gate"
        assert client.get(f"/api/location/{location['_id']}/chokePoint").json()[0]["_id"] == cp["_id"]

    def test_position_out_of_range(self, client):
        response = client.post(
            "/api/location", json={"name": "Gate", "position": {"lat": 100, "lng": 0}}
        )
        assert response.status_code == 400

    def test_update_replaces_membership(self, client):
        a = _create_choke_point(client, "A", "AA")
        b = _create_choke_point(client, "B", "BB")
        location = client.post(
            "/api/location",
            json={"name": "Gate", "position": {"lat": 1, "lng": 1}, "chokePointIds": [a["_id"]]},
        ).json()

        updated = client.put(
            f"/api/location/{location['_id']}",
            json={"name": "Gate", "position": {"lat": 1, "lng": 1}, "chokePointIds": [b["_id"]]},
        ).json()

        assert [c["_id"] for c in updated["chokePoints"]] == [b["_id"]]
        assert "location" not in client.get(f"/api/chokePoint/{a['_id']}").json()

    def test_list_and_delete(self, client):
        location = client.post(
            "/api/location", json={"name": "Gate", "position": {"lat": 1, "lng": 1}}
        ).json()
        assert client.get("/api/location").json()["totalCount"] == 1
        assert client.delete(f"/api/location/{location['_id']}").json() == {"deletedCount": 1}
        assert client.get("/api/location/all").json() == []


# ============================================================================
# CHOKE POINTS
# ============================================================================


class TestChokePointRoutes:
    def test_set_map_out_of_bounds(self, client):
        map_ = _create_map(client, width=1921, height=1081)
        cp = _create_choke_point(client)

        response = client.post(
            f"/api/chokePoint/{cp['_id']}/map", json={"mapId": map_["_id"], "x": 1922, "y": 500}
        )
        assert response.status_code == 422
        assert response.json()["code"] == "error.unprocessable_entity.map_position_not_fit"

        response = client.post(
            f"/api/chokePoint/{cp['_id']}/map", json={"mapId": map_["_id"], "x": 1920, "y": 1080}
        )
        assert response.status_code == 200
        assert response.json()["map"]["_id"] == map_["_id"]

    def test_set_map_missing_parameter(self, client):
        cp = _create_choke_point(client)
        response = client.post(f"/api/chokePoint/{cp['_id']}/map", json={"x": 1, "y": 1})
        assert response.status_code == 400
        assert response.json()["code"] == "error.missing_parameter.chokePoint_set_map"

    def test_unmap_and_move(self, client):
        map_ = _create_map(client)
        cp = _create_choke_point(client)
        client.post(f"/api/chokePoint/{cp['_id']}/map", json={"mapId": map_["_id"], "x": 1, "y": 1})

        moved = client.put(f"/api/chokePoint/{cp['_id']}/position", json={"x": 3, "y": 4}).json()
        assert (moved["x"], moved["y"]) == (3, 4)

        unmapped = client.post(f"/api/chokePoint/{cp['_id']}/unmap").json()
        assert "map" not in unmapped and "x" not in unmapped
        assert client.get(f"/api/map/{map_['_id']}").json()["chokePoints"] == []

    def test_duplicate_mac_address(self, client):
        _create_choke_point(client, "A", "AA")
        response = client.post("/api/chokePoint", json={"name": "B", "macAddress": "AA"})
        assert response.status_code == 409
        assert response.json()["code"] == "error.duplicate.macAddress"

    def test_csv_upsert(self, client):
        existing = _create_choke_point(client, "A", "mac-a")
        response = client.post(
            "/api/chokePoint/csv",
            files={"csv": ("cps.csv", b"name,macAddress\nB,mac-b\nA2,mac-a\n", "text/csv")},
        )
        body = response.json()
        assert response.status_code == 200
        assert [(cp["name"], cp["macAddress"]) for cp in body] == [("A2", "mac-a"), ("B", "mac-b")]
        assert body[0]["_id"] == existing["_id"]
        assert client.get("/api/chokePoint").json()["totalCount"] == 2

    def test_csv_missing_file(self, client):
        response = client.post("/api/chokePoint/csv")
        assert response.status_code == 400
        assert response.json()["code"] == "error.missing_parameter.csv"

    def test_delete(self, client):
        cp = _create_choke_point(client)
        assert client.delete(f"/api/chokePoint/{cp['_id']}").json() == {"deletedCount": 1}
        assert client.get("/api/chokePoint/all").json() == []


# ============================================================================
# ERROR HANDLING
# ============================================================================


class TestErrorHandling:
    def test_service_not_initialized(self, client):
        set_asset_services(None)
        assert client.get("/api/asset").status_code == 503

    def test_uploads_not_kept_when_service_missing(self, client, tmp_path):
        set_map_services(None, None)
        set_choke_point_services(None)

        map_response = client.post(
            "/api/map",
            data={"name": "Floor1"},
            files={"image": ("plan.png", _png(4, 4), "image/png")},
        )
        csv_response = client.post(
            "/api/chokePoint/csv",
            files={"csv": ("rows.csv", b"name,macAddress\nDoor,AA\n", "text/csv")},
        )

        assert map_response.status_code == 503
        assert csv_response.status_code == 503
        upload_dir = tmp_path / "tmp"
        assert not upload_dir.exists() or list(upload_dir.iterdir()) == []

    def test_internal_error_is_generic(self, client):
        service = AsyncMock()
        service.list_assets.side_effect = InternalError("password=hunter2 rejected")
        set_asset_services(service)

        response = client.get("/api/asset")
        body = response.json()
        assert response.status_code == 500
        assert body["status"] == "error"
        assert body["message"] == GENERIC_MESSAGE
        assert "hunter2" not in response.text

    def test_unexpected_exception_is_generic(self, tmp_path):
        app = _make_test_app(tmp_path)
        service = AsyncMock()
        service.list_assets.side_effect = RuntimeError("boom")
        set_asset_services(service)

        response = TestClient(app, raise_server_exceptions=False).get("/api/asset")
        assert response.status_code == 500
        assert response.json()["message"] == GENERIC_MESSAGE
