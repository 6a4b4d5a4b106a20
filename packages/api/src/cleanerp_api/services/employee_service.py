"""Employee (HR) data service."""

from __future__ import annotations

from typing import Any

import structlog

from cleanerp_shared.constants import (
    EMPLOYEE_STATUSES,
    EMPLOYMENT_TYPES,
    TABLE_EMPLOYEES,
    TERMINATION_REASONS,
)
from cleanerp_shared.dates import utc_now_iso
from cleanerp_shared.db import get_supabase_client
from cleanerp_shared.models import EmployeeCreate, EmployeeUpdate, validate_for_db

from cleanerp_api.services import crud
from cleanerp_api.utils.cache import metadata_cache
from cleanerp_api.utils.filtering import (
    apply_enum_filter,
    apply_eq_filter,
    apply_page,
    apply_text_search,
)

logger = structlog.get_logger(__name__)

SEARCH_COLUMNS = ("first_name", "last_name", "contact_email", "job_title")
SORTABLE_COLUMNS = frozenset(
    {"last_name", "first_name", "department", "job_title", "start_date", "status"}
)


def search_employees(
    *,
    q: str | None = None,
    department: str | None = None,
    status: str | None = None,
    employment_type: str | None = None,
    sort_by: str | None = None,
    descending: bool = False,
    page_size: int = 20,
    offset: int = 0,
) -> tuple[list[dict[str, Any]], int | None]:
    """Default order is status descending (Terminated, Onboarding, Active), then last name."""
    supabase = get_supabase_client()
    query = supabase.table(TABLE_EMPLOYEES).select("*", count="exact")

    query = apply_text_search(query, SEARCH_COLUMNS, q)
    query = apply_eq_filter(query, "department", department)
    query = apply_enum_filter(query, "status", status, EMPLOYEE_STATUSES)
    query = apply_enum_filter(query, "employment_type", employment_type, EMPLOYMENT_TYPES)
    if sort_by in SORTABLE_COLUMNS:
        query = query.order(sort_by, desc=descending)
    else:
        query = query.order("status", desc=True).order("last_name")
    query = apply_page(query, offset, page_size)

    with crud.database_errors(TABLE_EMPLOYEES, "search"):
        result = query.execute()
    return result.data or [], result.count


def get_employee(employee_id: str) -> dict[str, Any] | None:
    return crud.select_row(get_supabase_client(), TABLE_EMPLOYEES, employee_id)


def create_employee(data: dict[str, Any] | EmployeeCreate) -> dict[str, Any]:
    payload = validate_for_db(data, EmployeeCreate)
    row = crud.insert_row(get_supabase_client(), TABLE_EMPLOYEES, payload)
    metadata_cache.invalidate_prefix("employees:")
    logger.info("employee_created", id=row.get("id"), employee_id=payload["employee_id"])
    return row


def update_employee(employee_id: str, data: dict[str, Any] | EmployeeUpdate) -> dict[str, Any]:
    payload = validate_for_db(data, EmployeeUpdate)
    payload["updated_at"] = utc_now_iso()
    row = crud.update_row(
        get_supabase_client(), TABLE_EMPLOYEES, employee_id, payload, entity="Employee"
    )
    metadata_cache.invalidate_prefix("employees:")
    return row


def delete_employee(employee_id: str) -> None:
    crud.delete_row(get_supabase_client(), TABLE_EMPLOYEES, employee_id, entity="Employee")
    metadata_cache.invalidate_prefix("employees:")
    logger.info("employee_deleted", id=employee_id)


def list_departments() -> list[str]:
    cached = metadata_cache.get("employees:departments")
    if cached is not None:
        return cached
    departments = crud.distinct_values(get_supabase_client(), TABLE_EMPLOYEES, "department")
    metadata_cache.set("employees:departments", departments)
    return departments


def list_employment_types() -> list[str]:
    return list(EMPLOYMENT_TYPES)


def list_statuses() -> list[str]:
    return list(EMPLOYEE_STATUSES)


def list_termination_reasons() -> list[str]:
    return list(TERMINATION_REASONS)
