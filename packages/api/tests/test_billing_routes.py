"""Tests for the billing calculator, meta and health endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient


def test_convert_needs_no_auth(anon_app):
    client = TestClient(anon_app)
    response = client.get("/v1/billing/convert?amount=500&from=weekly&to=monthly")
    assert response.status_code == 200
    assert response.json()["data"] == {
        "amount": 500.0,
        "from": "weekly",
        "to": "monthly",
        "converted": 2165.0,
    }


def test_convert_rejects_unknown_frequency(client):
    response = client.get("/v1/billing/convert?amount=500&from=weekly&to=hourly")
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"


def test_breakdown_with_formatting(client):
    response = client.get("/v1/billing/breakdown?amount=2165&frequency=monthly")
    data = response.json()["data"]
    assert data["weekly"] == 500.0
    assert data["annually"] == 26000.0
    assert data["formatted"]["monthly"] == "$2,165.00"


def test_breakdown_zero_amount(client):
    data = client.get("/v1/billing/breakdown?amount=0").json()["data"]
    assert (data["weekly"], data["monthly"], data["annually"]) == (0, 0, 0)


def test_meta_enums(client):
    response = client.get("/v1/meta/enums")
    assert response.headers["cache-control"] == "max-age=3600"
    data = response.json()["data"]
    assert data["work_order_priority"] == ["Low", "Medium", "High"]
    assert data["billing_frequency"] == ["weekly", "fortnightly", "monthly", "quarterly", "annually"]


def test_meta_single_enum(client):
    assert client.get("/v1/meta/enums/lead_stage").json()["data"][0] == "Discovery"
    assert client.get("/v1/meta/enums/nope").status_code == 404


def test_billing_factors(client):
    assert client.get("/v1/meta/billing-factors").json()["data"]["monthly"] == 4.33


def test_health(anon_app):
    response = TestClient(anon_app).get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_request_id_header(client):
    response = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["x-request-id"] == "abc123"
