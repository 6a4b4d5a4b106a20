"""Shared test fixtures for cleanerp-api."""

from __future__ import annotations

from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

CHAIN_METHODS = (
    "select", "insert", "update", "upsert", "delete",
    "eq", "neq", "gt", "gte", "lt", "lte", "ilike", "in_", "is_", "not_", "or_",
    "order", "limit", "range", "single", "maybe_single",
)

SERVICE_MODULES = (
    "client_service",
    "site_service",
    "contract_service",
    "work_order_service",
    "employee_service",
    "lead_service",
    "quote_service",
    "dashboard_service",
)


def make_chain(data=None, count=None):
    """Create a chainable query mock that returns given data on execute()."""
    chain = MagicMock()
    chain.execute.return_value = MagicMock(data=data if data is not None else [], count=count)
    for method in CHAIN_METHODS:
        getattr(chain, method).return_value = chain
    return chain


def make_supabase(table_data=None):
    """Create a mock Supabase client.

    table_data: optional dict mapping table name -> (data, count).
    All unmapped tables return empty results. Each table keeps one chain,
    exposed as client.chains[name], so tests can inspect the calls made.
    """
    client = MagicMock()
    td = table_data or {}
    client.chains = {}

    def _table(name):
        if name not in client.chains:
            data, count = td.get(name, ([], 0))
            client.chains[name] = make_chain(data, count)
        return client.chains[name]

    client.table.side_effect = _table
    return client


@pytest.fixture(autouse=True)
def _clear_caches():
    """Clear all in-memory caches between tests."""
    from cleanerp_api.utils.cache import dashboard_cache, metadata_cache

    yield
    metadata_cache.clear()
    dashboard_cache.clear()


@pytest.fixture()
def use_supabase(monkeypatch):
    """Return a function that installs a mock client in every service module."""

    def _use(table_data=None):
        mock = make_supabase(table_data)
        for name in SERVICE_MODULES:
            monkeypatch.setattr(
                f"cleanerp_api.services.{name}.get_supabase_client",
                lambda *args, **kwargs: mock,
            )
        return mock

    return _use


@pytest.fixture(autouse=True)
def supabase(use_supabase):
    """Default mock: every table is empty. Tests needing data call use_supabase()."""
    return use_supabase()


@pytest.fixture()
def anon_app():
    """App without auth overrides; requests must carry a real bearer token."""
    from cleanerp_api.app import create_app

    return create_app()


@pytest.fixture()
def app(anon_app):
    """App whose current user is a staff member unless a test calls set_role()."""
    from cleanerp_api.middleware.auth import AuthUser, get_current_user

    user = AuthUser(user_id=str(uuid4()), role="staff", email="staff@example.com")
    anon_app.dependency_overrides[get_current_user] = lambda: user
    anon_app.state.test_user = user
    return anon_app


@pytest.fixture()
def set_role(app):
    """Change the role of the overridden current user."""

    def _set(role: str):
        app.state.test_user.role = role
        return app.state.test_user

    return _set


@pytest.fixture()
def client(app):
    """HTTP test client."""
    return TestClient(app)


@pytest.fixture()
def sample_client_row():
    return {
        "id": str(uuid4()),
        "company_name": "Acme Offices",
        "billing_address_street": "1 George St",
        "billing_address_city": "Sydney",
        "billing_address_state": "NSW",
        "billing_address_postcode": "2000",
        "payment_terms": "Net 30",
        "status": "Active",
        "industry": "Finance",
        "region": "Sydney CBD",
    }


@pytest.fixture()
def sample_site_row(sample_client_row):
    return {
        "id": str(uuid4()),
        "client_id": sample_client_row["id"],
        "site_name": "Tower A",
        "site_type": "Office",
        "address_street": "10 Pitt St",
        "address_city": "Sydney",
        "address_state": "NSW",
        "address_postcode": "2000",
        "status": "Active",
        "price_per_week": 500,
        "price_frequency": "weekly",
        "coordinates": "-33.8688,151.2093",
        "client": {"id": sample_client_row["id"], "company_name": "Acme Offices"},
    }
