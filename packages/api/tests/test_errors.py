"""Tests for Supabase error classification."""

from __future__ import annotations

import httpx
import pytest
from postgrest.exceptions import APIError

from cleanerp_api.errors import (
    NOT_FOUND,
    PERMISSION_DENIED,
    POLICY_RECURSION,
    TIMEOUT,
    UNKNOWN,
    VALIDATION,
    DatabaseError,
    classify_database_error,
    wrap_database_error,
)


def _api_error(message: str, code: str | None = None) -> APIError:
    return APIError({"message": message, "code": code, "hint": None, "details": None})


def test_policy_recursion_by_code_names_table():
    info = classify_database_error(
        _api_error('infinite recursion detected in policy for relation "sites"', "42P17"),
        "sites",
    )
    assert info.kind == POLICY_RECURSION
    assert info.status_code == 500
    assert info.table == "sites"
    assert "42P17" in info.message


def test_policy_recursion_by_message_only():
    info = classify_database_error(RuntimeError("infinite recursion detected"))
    assert info.kind == POLICY_RECURSION
    assert info.table == "unknown table"


@pytest.mark.parametrize(
    ("exc", "kind", "status"),
    [
        (_api_error("JSON object requested, multiple (or no) rows returned", "PGRST116"),
         NOT_FOUND, 404),
        (_api_error("canceling statement due to statement timeout", "57014"), TIMEOUT, 504),
        (httpx.ReadTimeout("timed out"), TIMEOUT, 504),
        (_api_error("permission denied for table employees", "42501"), PERMISSION_DENIED, 403),
        (_api_error("duplicate key value violates unique constraint", "23505"), VALIDATION, 422),
        (_api_error("something odd", "XX000"), UNKNOWN, 500),
    ],
)
def test_classification(exc, kind, status):
    info = classify_database_error(exc, "employees")
    assert info.kind == kind
    assert info.status_code == status


def test_unknown_error_message_names_entity():
    info = classify_database_error(_api_error("boom"), "clients")
    assert info.message == "Error loading clients: boom"


def test_wrap_database_error_returns_database_error():
    error = wrap_database_error(_api_error("permission denied", "42501"), entity="leads",
                                operation="select")
    assert isinstance(error, DatabaseError)
    assert error.status_code == 403
    assert error.entity == "leads"


def test_permission_denied_maps_to_403(client, use_supabase):
    mock = use_supabase()
    mock.table("employees").execute.side_effect = _api_error(
        "permission denied for table employees", "42501"
    )
    response = client.get("/v1/employees")
    assert response.status_code == 403
    assert response.json()["error"]["code"] == PERMISSION_DENIED


def test_transport_timeout_maps_to_504(client, use_supabase):
    mock = use_supabase()
    mock.table("sites").execute.side_effect = httpx.ConnectTimeout("connect timed out")
    response = client.get("/v1/sites")
    assert response.status_code == 504
