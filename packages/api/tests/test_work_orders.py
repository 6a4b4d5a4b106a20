"""Tests for work order endpoints and numbering."""

from __future__ import annotations

import re
from datetime import date
from uuid import uuid4

import pytest

from cleanerp_shared.models import RecordValidationError

from cleanerp_api.services import work_order_service


def _work_order_payload(**overrides):
    payload = {
        "siteId": str(uuid4()),
        "title": "Carpet steam clean",
        "category": "Ad-hoc Request",
        "scheduledStart": "2024-03-01T09:00:00+11:00",
        "dueDate": "2024-03-01T17:00:00+11:00",
    }
    payload.update(overrides)
    return payload


def test_generate_work_order_number_format():
    number = work_order_service.generate_work_order_number(date(2024, 3, 5))
    assert re.fullmatch(r"WO-2024-03-\d{5}", number)


def test_create_generates_id_number_and_defaults(client, supabase):
    response = client.post("/v1/work-orders", json=_work_order_payload())
    assert response.status_code == 201
    inserted = supabase.chains["work_orders"].insert.call_args[0][0][0]
    assert re.fullmatch(r"WO-\d{4}-\d{2}-\d{5}", inserted["work_order_number"])
    assert len(inserted["id"]) == 36
    assert inserted["status"] == "Scheduled"
    assert inserted["priority"] == "Medium"
    assert inserted["scheduled_start"] == "2024-02-29T22:00:00.000Z"


def test_create_with_children(client, supabase):
    employee_id = str(uuid4())
    response = client.post(
        "/v1/work-orders",
        json=_work_order_payload(
            category="Audit",
            assignments=[{"employeeId": employee_id, "assignmentType": "Lead Cleaner"}],
            checklistItems=[{"question": "Bins emptied?"}],
        ),
    )
    assert response.status_code == 201
    work_order_id = supabase.chains["work_orders"].insert.call_args[0][0][0]["id"]

    assignment = supabase.chains["work_order_assignments"].insert.call_args[0][0][0]
    assert assignment == {
        "employee_id": employee_id,
        "assignment_type": "Lead Cleaner",
        "work_order_id": work_order_id,
    }
    item = supabase.chains["audit_checklist_items"].insert.call_args[0][0][0]
    assert item["question"] == "Bins emptied?"
    assert item["work_order_id"] == work_order_id


def test_create_rejects_unknown_priority(client, supabase):
    response = client.post("/v1/work-orders", json=_work_order_payload(priority="Urgent"))
    assert response.status_code == 422
    supabase.table.assert_not_called()


def test_create_requires_title(client, supabase):
    payload = _work_order_payload()
    del payload["title"]
    response = client.post("/v1/work-orders", json=payload)
    assert response.status_code == 422


def test_client_without_sites_returns_empty(client, supabase):
    response = client.get(f"/v1/work-orders?client_id={uuid4()}")
    body = response.json()
    assert body["data"] == []
    assert body["meta"]["total_count"] == 0
    assert "work_orders" not in supabase.chains


def test_client_filter_resolves_sites(client, use_supabase):
    site_ids = [str(uuid4()), str(uuid4())]
    mock = use_supabase({"sites": ([{"id": s} for s in site_ids], 2)})
    client.get(f"/v1/work-orders?client_id={uuid4()}")
    mock.chains["work_orders"].in_.assert_called_once_with("site_id", site_ids)


def test_default_order_newest_first(client, use_supabase):
    mock = use_supabase()
    client.get("/v1/work-orders")
    mock.chains["work_orders"].order.assert_called_once_with("scheduled_start", desc=True)


def test_enum_filters(client, use_supabase):
    mock = use_supabase()
    client.get("/v1/work-orders?status=Overdue&priority=High&category=all-categories")
    eq_calls = [c.args for c in mock.chains["work_orders"].eq.call_args_list]
    assert ("status", "Overdue") in eq_calls
    assert ("priority", "High") in eq_calls
    assert all(column != "category" for column, _ in eq_calls)


def test_update_replaces_assignments(client, use_supabase):
    work_order_id = str(uuid4())
    mock = use_supabase({"work_orders": ([{"id": work_order_id, "status": "Completed"}], 1)})
    response = client.patch(
        f"/v1/work-orders/{work_order_id}",
        json={"status": "Completed", "assignments": []},
    )
    assert response.status_code == 200
    payload = mock.chains["work_orders"].update.call_args[0][0]
    assert payload["status"] == "Completed"
    assert "assignments" not in payload
    mock.chains["work_order_assignments"].delete.assert_called_once()
    mock.chains["work_order_assignments"].insert.assert_not_called()


def test_get_work_order_not_found(client):
    response = client.get(f"/v1/work-orders/{uuid4()}")
    assert response.status_code == 404


def test_clear_checklist_items(client, use_supabase):
    work_order_id = str(uuid4())
    mock = use_supabase({"audit_checklist_items": ([{"id": "a"}, {"id": "b"}], 2)})
    response = client.delete(f"/v1/work-orders/{work_order_id}/checklist")
    assert response.status_code == 204
    mock.chains["audit_checklist_items"].eq.assert_called_with("work_order_id", work_order_id)


def test_clear_assignments_requires_staff(client, set_role):
    set_role("viewer")
    response = client.delete(f"/v1/work-orders/{uuid4()}/assignments")
    assert response.status_code == 403


def test_update_with_invalid_assignment_writes_nothing(use_supabase):
    work_order_id = str(uuid4())
    mock = use_supabase({"work_orders": ([{"id": work_order_id}], 1)})
    with pytest.raises(RecordValidationError):
        work_order_service.update_work_order(
            work_order_id,
            {"status": "Completed"},
            assignments=[{"employee_id": "not-a-uuid", "assignment_type": "Cleaner"}],
        )
    assert "work_orders" not in mock.chains
    assert "work_order_assignments" not in mock.chains


def test_create_with_invalid_checklist_item_writes_nothing(use_supabase):
    mock = use_supabase()
    with pytest.raises(RecordValidationError):
        work_order_service.create_work_order(_work_order_payload(), checklist_items=[{}])
    assert "work_orders" not in mock.chains
    assert "audit_checklist_items" not in mock.chains
