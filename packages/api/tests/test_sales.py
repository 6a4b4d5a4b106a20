"""Tests for lead and quote endpoints."""

from __future__ import annotations

from uuid import uuid4

import pytest

from cleanerp_api.services import quote_service


@pytest.fixture()
def quote_row():
    return {
        "id": str(uuid4()),
        "quote_number": "Q-2024-010",
        "issue_date": "2024-05-01",
        "valid_until": "2024-05-31",
        "status": "Draft",
        "service_description": "Carpet steam clean",
        "total_amount": 0,
        "created_by": "u1",
    }


def _quote_payload(**overrides):
    payload = {
        "quoteNumber": "Q-2024-011",
        "issueDate": "2024-05-01",
        "validUntil": "2024-05-31",
        "serviceDescription": "Window cleaning",
        "createdBy": "u1",
    }
    payload.update(overrides)
    return payload


class TestLeads:
    def test_list_leads_uses_limit(self, client, use_supabase):
        mock = use_supabase({"leads": ([{"id": "l1", "lead_name": "Fit-out"}], 1)})
        response = client.get("/v1/leads?stage=Proposal")
        assert response.json()["meta"]["page_size"] == 100
        chain = mock.chains["leads"]
        chain.limit.assert_called_once_with(100)
        chain.eq.assert_called_once_with("stage", "Proposal")

    def test_create_lead_defaults(self, client, supabase):
        response = client.post(
            "/v1/leads",
            json={"leadName": "Office fit-out", "companyName": "Beta", "createdBy": "u1"},
        )
        assert response.status_code == 201
        inserted = supabase.chains["leads"].insert.call_args[0][0][0]
        assert inserted["stage"] == "Discovery"
        assert inserted["status"] == "Open"

    def test_create_lead_bad_email(self, client, supabase):
        response = client.post(
            "/v1/leads",
            json={"leadName": "x", "companyName": "y", "createdBy": "u1", "contactEmail": "nope"},
        )
        assert response.status_code == 422

    def test_lead_enums(self, client):
        data = client.get("/v1/leads/enums").json()["data"]
        assert data["stages"][0] == "Discovery"
        assert "Cold Call" in data["sources"]


class TestQuotes:
    def test_create_quote_totals_line_items(self, client, use_supabase, quote_row):
        mock = use_supabase({"quotes": ([quote_row], 1)})
        response = client.post(
            "/v1/quotes",
            json=_quote_payload(
                lineItems=[
                    {"description": "Carpet", "quantity": 3, "unitPrice": 12.5},
                    {"description": "Windows", "quantity": 1, "unitPrice": 80, "amount": 75},
                ]
            ),
        )
        assert response.status_code == 201
        quote = mock.chains["quotes"].insert.call_args[0][0][0]
        assert quote["total_amount"] == 112.5
        items = mock.chains["quote_line_items"].insert.call_args[0][0]
        assert [i["amount"] for i in items] == [37.5, 75]
        assert all(i["quote_id"] == quote_row["id"] for i in items)

    def test_create_quote_invalid_dates(self, client, supabase):
        response = client.post(
            "/v1/quotes", json=_quote_payload(issueDate="2024-06-01", validUntil="2024-05-01")
        )
        assert response.status_code == 422

    def test_get_quote_includes_line_items(self, client, use_supabase, quote_row):
        item = {"id": "i1", "quote_id": quote_row["id"], "amount": 10}
        use_supabase({"quotes": ([quote_row], 1), "quote_line_items": ([item], 1)})
        data = client.get(f"/v1/quotes/{quote_row['id']}").json()["data"]
        assert data["line_items"] == [item]

    def test_add_line_item_recalculates_total(self, client, use_supabase, quote_row):
        existing = [{"id": "i1", "amount": 40}, {"id": "i2", "amount": 2.5}]
        mock = use_supabase({"quotes": ([quote_row], 1), "quote_line_items": (existing, 2)})
        response = client.post(
            f"/v1/quotes/{quote_row['id']}/line-items",
            json={"description": "Grout", "quantity": 2, "unitPrice": 1.25},
        )
        assert response.status_code == 201
        update = mock.chains["quotes"].update.call_args[0][0]
        assert update["total_amount"] == 42.5

    def test_update_line_item_recomputes_amount(self, use_supabase, quote_row):
        current = {"id": "i1", "quantity": 2, "unit_price": 10, "amount": 20}
        mock = use_supabase({"quotes": ([quote_row], 1), "quote_line_items": ([current], 1)})
        quote_service.update_line_item(quote_row["id"], "i1", {"quantity": 3})
        payload = mock.chains["quote_line_items"].update.call_args[0][0]
        assert payload["quantity"] == 3
        assert payload["amount"] == 30.0

    def test_delete_quote_removes_items(self, client, set_role, use_supabase, quote_row):
        set_role("manager")
        mock = use_supabase({"quotes": ([quote_row], 1)})
        response = client.delete(f"/v1/quotes/{quote_row['id']}")
        assert response.status_code == 204
        mock.chains["quote_line_items"].delete.assert_called_once()
