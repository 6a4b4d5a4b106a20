"""
tests/test_loaders/test_site_importer.py — Tests for the CSV site importer.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx
import polars as pl
import pytest
from postgrest.exceptions import APIError

from cleanerp_pipeline.loaders.site_importer import (
    ROW_COLUMN,
    ImportResult,
    SiteImporter,
    clean_frame,
    normalise_header,
)


def _valid_row(client_id: str, name: str = "Tower A") -> dict:
    return {
        "client_id": client_id,
        "site_name": name,
        "site_type": "Office",
        "address_street": "10 Pitt St",
        "address_city": "Sydney",
        "address_state": "NSW",
        "address_postcode": "2000",
    }


class TestNormaliseHeader:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Site Name", "site_name"),
            ("siteName", "site_name"),
            ("address_postcode", "address_postcode"),
            ("  Price Per Week ", "price_per_week"),
            ("Address (Street)", "address_street"),
        ],
    )
    def test_headers(self, raw, expected):
        assert normalise_header(raw) == expected


class TestCleanFrame:
    def test_trims_and_blanks_to_null(self):
        df = pl.DataFrame({"Site Name": ["  HQ ", "   "], "Region": ["North", None]})
        result = clean_frame(df)
        assert result.columns == [ROW_COLUMN, "site_name", "region"]
        assert result["site_name"].to_list() == ["HQ"]

    def test_drops_all_null_rows_keeps_line_numbers(self):
        df = pl.DataFrame({"a": ["x", None, "y"], "b": [None, None, "z"]})
        result = clean_frame(df)
        assert result[ROW_COLUMN].to_list() == [2, 4]


class TestValidate:
    def test_reads_sample_csv(self, sites_csv, client_id):
        importer = SiteImporter(client=MagicMock())
        df = importer.read_csv(sites_csv)
        rows, rejects = importer.validate(df, client_id=client_id)

        assert df.height == 3
        assert [r["site_name"] for r in rows] == ["Tower A", "Depot"]
        assert rows[0]["client_id"] == client_id
        assert rows[0]["price_per_week"] == 500.0
        assert "price_per_week" not in rows[1]

        assert len(rejects) == 1
        assert rejects[0].line == 5
        assert any("address_postcode" in e for e in rejects[0].errors)

    def test_missing_client_id_rejected(self, sites_csv):
        importer = SiteImporter(client=MagicMock())
        rows, rejects = importer.validate(importer.read_csv(sites_csv))
        assert rows == []
        assert all(any("client_id" in e for e in r.errors) for r in rejects)

    def test_row_client_id_wins(self, client_id):
        other = "0b0b0b0b-1c1c-4d2d-8e3e-4f4f4f4f4f4f"
        df = clean_frame(pl.DataFrame([_valid_row(other)]))
        rows, _ = SiteImporter(client=MagicMock()).validate(df, client_id=client_id)
        assert rows[0]["client_id"] == other


class TestInsert:
    def test_batches(self, mock_supabase_client, client_id):
        importer = SiteImporter(client=mock_supabase_client, batch_size=2)
        rows = [_valid_row(client_id, f"Site {i}") for i in range(5)]
        result = importer.insert(rows)

        assert result.batches_total == 3
        assert result.records_loaded == 5
        assert result.status == "success"
        assert mock_supabase_client.table.return_value.insert.call_count == 3

    def test_transient_error_retried(self, mock_supabase_client, client_id):
        execute = mock_supabase_client.table.return_value.insert.return_value.execute
        execute.side_effect = [httpx.ConnectError("connection reset"), MagicMock(data=[])]
        importer = SiteImporter(client=mock_supabase_client, retry_delay=0)

        result = importer.insert([_valid_row(client_id)])

        assert execute.call_count == 2
        assert result.records_loaded == 1
        assert result.records_failed == 0

    def test_retries_exhausted_marks_batch_failed(self, mock_supabase_client, client_id):
        execute = mock_supabase_client.table.return_value.insert.return_value.execute
        execute.side_effect = httpx.ConnectError("connection refused")
        importer = SiteImporter(client=mock_supabase_client, max_attempts=3, retry_delay=0)

        result = importer.insert([_valid_row(client_id)])

        assert execute.call_count == 3
        assert result.batches_failed == 1
        assert result.status == "failure"
        assert "connection refused" in result.errors[0]

    def test_constraint_error_not_retried(self, mock_supabase_client, client_id):
        execute = mock_supabase_client.table.return_value.insert.return_value.execute
        execute.side_effect = [
            APIError({"message": "duplicate key value", "code": "23505"}),
            MagicMock(data=[]),
        ]
        importer = SiteImporter(client=mock_supabase_client, batch_size=1, retry_delay=0)

        result = importer.insert([_valid_row(client_id, "A"), _valid_row(client_id, "B")])

        assert execute.call_count == 2
        assert result.records_loaded == 1
        assert result.records_failed == 1
        assert result.status == "partial_failure"


class TestRun:
    def test_dry_run_never_writes(self, mock_supabase_client, sites_csv, client_id):
        importer = SiteImporter(client=mock_supabase_client)
        result = importer.run(sites_csv, client_id=client_id, dry_run=True)

        assert result.status == "dry_run"
        assert result.rows_valid == 2
        mock_supabase_client.table.assert_not_called()

    def test_run_inserts_valid_rows(self, mock_supabase_client, sites_csv, client_id):
        importer = SiteImporter(client=mock_supabase_client)
        result = importer.run(sites_csv, client_id=client_id)

        assert result.records_loaded == 2
        assert len(result.rejects) == 1
        assert result.status == "partial_failure"
        mock_supabase_client.table.assert_called_with("sites")


def test_import_result_status_defaults():
    assert ImportResult().status == "success"
    assert ImportResult(records_failed=2).status == "failure"
