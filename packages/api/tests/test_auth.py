"""Tests for JWT authentication and role checks."""

from __future__ import annotations

import time
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from cleanerp_shared.config import settings

from cleanerp_api.middleware.auth import ROLE_ORDER, AuthUser, user_from_claims


def _token(role: str | None = "staff", *, audience: str | None = None, expires_in: int = 3600,
           secret: str | None = None) -> str:
    claims = {
        "sub": str(uuid4()),
        "email": "user@example.com",
        "aud": audience or settings.jwt_audience,
        "exp": int(time.time()) + expires_in,
        "app_metadata": {"role": role} if role else {},
    }
    return jwt.encode(claims, secret or settings.jwt_secret, algorithm="HS256")


@pytest.fixture()
def anon_client(anon_app):
    return TestClient(anon_app)


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_role_ordering():
    assert ROLE_ORDER["viewer"] < ROLE_ORDER["staff"]
    assert ROLE_ORDER["staff"] < ROLE_ORDER["manager"]
    assert ROLE_ORDER["manager"] < ROLE_ORDER["admin"]


def test_has_role():
    assert AuthUser(user_id="u", role="manager").has_role("staff")
    assert not AuthUser(user_id="u", role="viewer").has_role("staff")


def test_claims_without_role_default_to_viewer():
    user = user_from_claims({"sub": "u1", "app_metadata": {}})
    assert user.role == "viewer"
    assert user_from_claims({"sub": "u1", "app_metadata": {"role": "superuser"}}).role == "viewer"


def test_no_token_returns_401(anon_client):
    response = anon_client.get("/v1/clients")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "unauthorized"


def test_non_bearer_scheme_returns_401(anon_client):
    response = anon_client.get("/v1/clients", headers={"Authorization": "Basic abc"})
    assert response.status_code == 401


def test_invalid_token_returns_401(anon_client):
    response = anon_client.get("/v1/clients", headers=_auth("not-a-jwt"))
    assert response.status_code == 401


def test_wrong_secret_returns_401(anon_client):
    response = anon_client.get("/v1/clients", headers=_auth(_token(secret="other-secret")))
    assert response.status_code == 401


def test_wrong_audience_returns_401(anon_client):
    response = anon_client.get("/v1/clients", headers=_auth(_token(audience="anon")))
    assert response.status_code == 401


def test_expired_token_returns_401(anon_client):
    response = anon_client.get("/v1/clients", headers=_auth(_token(expires_in=-60)))
    assert response.status_code == 401


def test_valid_token_can_read(anon_client):
    response = anon_client.get("/v1/clients", headers=_auth(_token("viewer")))
    assert response.status_code == 200


def test_viewer_cannot_write(anon_client):
    response = anon_client.post("/v1/leads", json={}, headers=_auth(_token("viewer")))
    assert response.status_code == 403


def test_staff_cannot_delete(anon_client):
    response = anon_client.delete(f"/v1/leads/{uuid4()}", headers=_auth(_token("staff")))
    assert response.status_code == 403


def test_admin_can_delete(anon_client, use_supabase):
    lead_id = str(uuid4())
    use_supabase({"leads": ([{"id": lead_id}], 1)})
    response = anon_client.delete(f"/v1/leads/{lead_id}", headers=_auth(_token("admin")))
    assert response.status_code == 204
