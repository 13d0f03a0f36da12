# ============================================================================
# CSV INGEST TESTS
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Tests - ChokePoint CSV parsing and upsert
# PURPOSE: Verify column handling, cleanup and the macAddress upsert flow
# CREATED: 16 OCT 2026
# ============================================================================
"""
CSV Ingest Tests

Run with:
    pytest tests/test_csv_ingest.py -v
"""

import asyncio
import pytest

from core.errors import ValidationFailureError
from infrastructure.memory_store import InMemoryDocumentStore
from repositories import RepositoryRegistry
from services import ChokePointService, ConsistencyEngine, parse_choke_point_csv


def _write(tmp_path, text, name="upload.csv"):
    path = tmp_path / name
    path.write_text(text)
    return str(path)


# ============================================================================
# PARSING
# ============================================================================


class TestParseChokePointCsv:
    def test_rows_in_file_order(self, tmp_path):
        path = _write(tmp_path, "name,macAddress\nDoor,AA:01\nGate,AA:02\n")
        assert parse_choke_point_csv(path) == [
            {"name": "Door", "macAddress": "AA:01"},
            {"name": "Gate", "macAddress": "AA:02"},
        ]

    def test_values_trimmed_and_extra_columns_ignored(self, tmp_path):
        path = _write(tmp_path, "floor, name ,macAddress\n1, Door ,AA:01 \n")
        assert parse_choke_point_csv(path) == [{"name": "Door", "macAddress": "AA:01"}]

    def test_mac_address_kept_as_text(self, tmp_path):
        path = _write(tmp_path, "name,macAddress\nDoor,001122\n")
        assert parse_choke_point_csv(path)[0]["macAddress"] == "001122"

    def test_file_removed(self, tmp_path):
        path = _write(tmp_path, "name,macAddress\nDoor,AA\n")
        parse_choke_point_csv(path)
        assert not (tmp_path / "upload.csv").exists()

    def test_missing_column(self, tmp_path):
        path = _write(tmp_path, "name,mac\nDoor,AA\n")
        with pytest.raises(ValidationFailureError) as exc_info:
            parse_choke_point_csv(path)
        assert "macAddress" in exc_info.value.message
        assert not (tmp_path / "upload.csv").exists()

    def test_empty_file(self, tmp_path):
        path = _write(tmp_path, "")
        with pytest.raises(ValidationFailureError):
            parse_choke_point_csv(path)

    def test_header_only(self, tmp_path):
        path = _write(tmp_path, "name,macAddress\n")
        assert parse_choke_point_csv(path) == []


# ============================================================================
# UPSERT FROM CSV
# ============================================================================


class TestUpsertFromCsv:
    def test_existing_updated_new_created(self, tmp_path):
        registry = RepositoryRegistry(InMemoryDocumentStore())
        service = ChokePointService(registry, ConsistencyEngine(registry))
        path = _write(tmp_path, "name,macAddress\nB,mac-b\nA2,mac-a\nC,mac-c\n")

        async def run():
            await registry.ensure_collections()
            await service.create_choke_point("A", "mac-a")
            result = await service.upsert_from_csv(path)
            return result, await registry.choke_points.list_models()

        result, stored = asyncio.run(run())
        assert [(cp.name, cp.mac_address) for cp in result] == [
            ("A2", "mac-a"),
            ("B", "mac-b"),
            ("C", "mac-c"),
        ]
        assert len(stored) == 3
