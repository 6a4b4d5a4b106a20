"""
tests/conftest.py — Shared pytest fixtures for the pipeline test suite.

Provides:
  fixture_path()          — resolves paths to tests/fixtures/
  mock_supabase_client()  — MagicMock of the Supabase client (prevents real DB calls)
  sites_csv()             — path to the sample sites CSV
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import structlog

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def fixture_path() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def sites_csv() -> Path:
    return FIXTURES_DIR / "sites_sample.csv"


@pytest.fixture
def client_id() -> str:
    return "6f1c2d3e-4b5a-4c6d-8e7f-901234567890"


# ---------------------------------------------------------------------------
# Supabase client mock
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_supabase_client() -> MagicMock:
    """
    A MagicMock that simulates the supabase.Client interface.

    .table().insert().execute() returns empty data by default. Override in
    individual tests via mock_supabase_client.table.return_value.insert...
    """
    client = MagicMock()

    default_result = MagicMock()
    default_result.data = []
    default_result.count = 0

    (
        client.table.return_value
        .insert.return_value
        .execute.return_value
    ) = default_result

    return client


@pytest.fixture(autouse=True)
def _reset_structlog():
    """CliRunner swaps stderr; drop any logger configured against it."""
    yield
    structlog.reset_defaults()
