# ============================================================================
# DOMAIN MODEL TESTS
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Tests - Entity model unit tests
# PURPOSE: Verify entity validation, summaries, relations and error codes
# CREATED: 14 OCT 2026
# ============================================================================
"""
Domain Model Tests

Unit tests for the domain layer:
- EntityType labels and collections
- Entity build/with_changes validation
- Summary extraction (SUMMARY_FIELDS)
- Map bounds check
- Relation registry lookups
- Error codes and status mapping

Run with:
    pytest tests/test_domain_models.py -v
"""

import pytest

from core.contracts import EntityType, SUMMARY_FIELDS
from core.errors import (
    DuplicateKeyError,
    HasDependentsError,
    InternalError,
    MissingParameterError,
    NotFoundError,
    UnprocessableImageError,
    ValidationFailureError,
)
from core.models import Asset, ChokePoint, Location, Map, TilePyramid
from core.relations import (
    ASSET_LOCATIONS,
    ASSET_MAPS,
    LOCATION_CHOKE_POINTS,
    MAP_CHOKE_POINTS,
    get_relation,
    relations_as_child,
    relations_as_parent,
)


# ============================================================================
# CONTRACTS
# ============================================================================


class TestEntityType:
    def test_collections(self):
        assert EntityType.ASSET.collection == "asset"
        assert EntityType.CHOKE_POINT.collection == "choke_point"

    def test_labels_are_camel_case(self):
        assert EntityType.MAP.label == "map"
        assert EntityType.CHOKE_POINT.label == "chokePoint"

    def test_choke_point_summary_carries_position(self):
        assert SUMMARY_FIELDS[EntityType.CHOKE_POINT] == ("name", "macAddress", "x", "y")


# ============================================================================
# ENTITY VALIDATION
# ============================================================================


class TestEntityBuild:
    def test_build_generates_id(self):
        a = Asset.build(name="HQ")
        b = Asset.build(name="HQ")
        assert a.id and b.id and a.id != b.id

    def test_name_is_trimmed(self):
        assert Asset.build(name="  HQ  ").name == "HQ"

    def test_missing_name_fails(self):
        with pytest.raises(ValidationFailureError):
            Asset.build()

    def test_blank_name_fails(self):
        with pytest.raises(ValidationFailureError):
            Asset.build(name="   ")

    def test_name_too_long_fails(self):
        with pytest.raises(ValidationFailureError):
            Asset.build(name="x" * 101)

    def test_location_position_range(self):
        with pytest.raises(ValidationFailureError):
            Location.build(name="Gate", position={"lat": 91, "lng": 0})
        with pytest.raises(ValidationFailureError):
            Location.build(name="Gate", position={"lat": 0, "lng": -181})

    def test_location_requires_position(self):
        with pytest.raises(ValidationFailureError):
            Location.build(name="Gate")

    def test_choke_point_requires_mac_address(self):
        with pytest.raises(ValidationFailureError):
            ChokePoint.build(name="Door")

    def test_ratio_must_be_positive(self):
        with pytest.raises(ValidationFailureError):
            Map.build(name="Floor", ratio=0)


class TestDocumentForm:
    def test_to_document_uses_stored_names(self):
        cp = ChokePoint.build(name="Door", mac_address="AA:BB")
        doc = cp.to_document()
        assert doc["_id"] == cp.id
        assert doc["macAddress"] == "AA:BB"
        assert "x" not in doc
        assert "map" not in doc

    def test_from_document_round_trip(self):
        doc = {"_id": "m1", "name": "Floor", "maxZoom": 3, "width": 10, "height": 20}
        map_ = Map.from_document(doc)
        assert map_.max_zoom == 3
        assert map_.to_document()["maxZoom"] == 3

    def test_with_changes_none_removes_field(self):
        map_ = Map.build(name="Floor", asset={"_id": "a1", "name": "HQ"})
        detached = map_.with_changes(asset=None)
        assert detached.asset is None
        assert "asset" not in detached.to_document()
        assert detached.id == map_.id

    def test_with_changes_revalidates(self):
        asset = Asset.build(name="HQ")
        with pytest.raises(ValidationFailureError):
            asset.with_changes(name="")

    def test_ref_id_and_children(self):
        location = Location.build(
            name="Gate",
            position={"lat": 1, "lng": 2},
            asset={"_id": "a1", "name": "HQ"},
            choke_points=[{"_id": "c1", "name": "Door", "macAddress": "AA"}],
        )
        assert location.ref_id("asset") == "a1"
        assert location.ref_id("missing") is None
        assert [c["_id"] for c in location.children("chokePoints")] == ["c1"]


class TestSummary:
    def test_asset_summary_is_id_and_name(self):
        asset = Asset.build(name="HQ", maps=[{"_id": "m1", "name": "Floor"}])
        assert asset.summary() == {"_id": asset.id, "name": "HQ"}

    def test_choke_point_summary_includes_position_when_set(self):
        cp = ChokePoint.build(name="Door", mac_address="AA", x=10, y=20)
        assert cp.summary() == {"_id": cp.id, "name": "Door", "macAddress": "AA", "x": 10, "y": 20}

    def test_choke_point_summary_omits_unset_position(self):
        cp = ChokePoint.build(name="Door", mac_address="AA")
        assert cp.summary() == {"_id": cp.id, "name": "Door", "macAddress": "AA"}


# ============================================================================
# MAP BOUNDS
# ============================================================================


class TestMapBounds:
    def test_edges_are_inclusive(self):
        map_ = Map.build(name="Floor", width=1921, height=1081)
        assert map_.fits(0, 0)
        assert map_.fits(1921, 1081)
        assert map_.fits(1920, 1080)

    def test_outside_is_rejected(self):
        map_ = Map.build(name="Floor", width=1921, height=1081)
        assert not map_.fits(1922, 500)
        assert not map_.fits(500, 1082)
        assert not map_.fits(-1, 10)

    def test_no_dimensions_never_fits(self):
        map_ = Map.build(name="Floor")
        assert not map_.has_dimensions
        assert not map_.fits(1, 1)


class TestTilePyramidModel:
    def test_alias(self):
        pyramid = TilePyramid(path="/uploads/maps/m1", width=10, height=5, max_zoom=4)
        assert pyramid.model_dump(by_alias=True) == {
            "path": "/uploads/maps/m1",
            "width": 10,
            "height": 5,
            "maxZoom": 4,
        }


# ============================================================================
# RELATIONS
# ============================================================================


class TestRelations:
    def test_choke_point_has_two_parents(self):
        assert relations_as_child(EntityType.CHOKE_POINT) == [
            MAP_CHOKE_POINTS,
            LOCATION_CHOKE_POINTS,
        ]

    def test_asset_has_two_child_relations(self):
        assert relations_as_parent(EntityType.ASSET) == [ASSET_MAPS, ASSET_LOCATIONS]

    def test_get_relation(self):
        assert get_relation(EntityType.MAP, EntityType.CHOKE_POINT) is MAP_CHOKE_POINTS
        with pytest.raises(KeyError):
            get_relation(EntityType.CHOKE_POINT, EntityType.MAP)

    def test_relation_name(self):
        assert MAP_CHOKE_POINTS.name == "map.chokePoints"


# ============================================================================
# ERRORS
# ============================================================================


class TestErrors:
    def test_not_found_for_entity(self):
        error = NotFoundError.for_entity(EntityType.CHOKE_POINT, "c1")
        assert error.status_code == 404
        assert error.code == "error.notFound.chokePoint"
        assert error.status == "fail"

    def test_status_codes(self):
        assert MissingParameterError("x").status_code == 400
        assert HasDependentsError("x").status_code == 400
        assert ValidationFailureError("x").status_code == 400
        assert UnprocessableImageError("x").status_code == 422
        assert DuplicateKeyError("x", field="name").status_code == 409

    def test_duplicate_key_code_names_field(self):
        assert DuplicateKeyError("x", field="macAddress").code == "error.duplicate.macAddress"

    def test_internal_error_is_not_operational(self):
        error = InternalError("db down")
        assert not error.is_operational
        assert error.status == "error"

    def test_to_dict(self):
        error = MissingParameterError("need it", code="error.missing_parameter.csv")
        assert error.to_dict() == {
            "status": "fail",
            "code": "error.missing_parameter.csv",
            "message": "need it",
        }
