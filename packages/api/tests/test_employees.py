"""Tests for the employee (HR) endpoints."""

from __future__ import annotations

from uuid import uuid4

from cleanerp_api.services import employee_service


def _employee_payload(**overrides):
    payload = {
        "firstName": "Jane",
        "lastName": "Citizen",
        "dateOfBirth": "1990-05-04",
        "contactPhone": "0400 123 456",
        "contactEmail": "jane@example.com",
        "addressStreet": "5 Smith St",
        "addressCity": "Parramatta",
        "addressState": "NSW",
        "addressPostcode": "2150",
        "employeeId": "E-001",
        "jobTitle": "Cleaner",
        "department": "Operations",
        "startDate": "2024-02-01",
        "employmentType": "Part-time",
        "payRate": 31.5,
    }
    payload.update(overrides)
    return payload


def test_default_ordering_status_then_last_name(client, use_supabase):
    mock = use_supabase()
    client.get("/v1/employees")
    orders = [(c.args, c.kwargs) for c in mock.chains["employees"].order.call_args_list]
    assert orders == [(("status",), {"desc": True}), (("last_name",), {})]


def test_explicit_sort(client, use_supabase):
    mock = use_supabase()
    client.get("/v1/employees?sort_by=start_date&sort_order=desc")
    mock.chains["employees"].order.assert_called_once_with("start_date", desc=True)


def test_filters(client, use_supabase):
    mock = use_supabase()
    client.get("/v1/employees?department=Operations&status=Active&employment_type=Casual")
    eq_calls = [c.args for c in mock.chains["employees"].eq.call_args_list]
    assert ("department", "Operations") in eq_calls
    assert ("status", "Active") in eq_calls
    assert all(column != "employment_type" for column, _ in eq_calls)


def test_create_employee_defaults(client, supabase):
    response = client.post("/v1/employees", json=_employee_payload())
    assert response.status_code == 201
    inserted = supabase.chains["employees"].insert.call_args[0][0][0]
    assert inserted["status"] == "Onboarding"
    assert inserted["pay_cycle"] == "Fortnightly"
    assert inserted["date_of_birth"] == "1990-05-04"


def test_create_employee_rejects_bad_bsb(client, supabase):
    response = client.post("/v1/employees", json=_employee_payload(bankBsb="12-34"))
    assert response.status_code == 422


def test_update_employee_termination(client, use_supabase):
    employee_id = str(uuid4())
    mock = use_supabase({"employees": ([{"id": employee_id}], 1)})
    response = client.patch(
        f"/v1/employees/{employee_id}",
        json={
            "status": "Terminated",
            "endOfEmploymentDate": "2024-06-30",
            "endOfEmploymentReason": "Resignation",
        },
    )
    assert response.status_code == 200
    payload = mock.chains["employees"].update.call_args[0][0]
    assert payload["end_of_employment_reason"] == "Resignation"
    assert payload["end_of_employment_date"] == "2024-06-30"


def test_departments_cached(client, use_supabase):
    mock = use_supabase(
        {"employees": ([{"department": "Operations"}, {"department": "Admin"}], 2)}
    )
    first = client.get("/v1/employees/departments").json()["data"]
    second = client.get("/v1/employees/departments").json()["data"]
    assert first == second == ["Admin", "Operations"]
    assert mock.table.call_count == 1


def test_enum_listings():
    assert employee_service.list_employment_types() == ["Full-time", "Part-time", "Contractor"]
    assert "Retirement" in employee_service.list_termination_reasons()
