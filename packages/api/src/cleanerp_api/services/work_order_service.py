"""Work order data service: work orders, assignments and audit checklists."""

from __future__ import annotations

import random
import uuid
from datetime import date, datetime, timezone
from typing import Any

import structlog

from cleanerp_shared.constants import (
    TABLE_AUDIT_CHECKLIST_ITEMS,
    TABLE_SITES,
    TABLE_WORK_ORDER_ASSIGNMENTS,
    TABLE_WORK_ORDERS,
    WORK_ORDER_CATEGORIES,
    WORK_ORDER_PRIORITIES,
    WORK_ORDER_STATUSES,
)
from cleanerp_shared.dates import utc_now_iso
from cleanerp_shared.db import get_supabase_client
from cleanerp_shared.models import (
    AuditChecklistItemCreate,
    DbModel,
    WorkOrderAssignmentCreate,
    WorkOrderCreate,
    WorkOrderUpdate,
    validate_for_db,
)

from cleanerp_api.services import crud
from cleanerp_api.utils.filtering import (
    apply_date_filters,
    apply_enum_filter,
    apply_eq_filter,
    apply_page,
    apply_sort,
    apply_text_search,
    is_filter_value,
)

logger = structlog.get_logger(__name__)

LIST_COLUMNS = (
    "*, site:site_id(site_name, client_id, client:client_id(company_name)), "
    "assignments:work_order_assignments(id, assignment_type, "
    "employee:employee_id(id, first_name, last_name))"
)
DETAIL_COLUMNS = (
    "*, site:site_id(id, site_name, client_id, client:client_id(company_name)), "
    "contract:contract_id(id, contract_number), "
    "assignments:work_order_assignments(id, employee_id, assignment_type, "
    "employee:employee_id(id, first_name, last_name)), "
    "checklist_items:audit_checklist_items(*)"
)
SEARCH_COLUMNS = ("title", "description")
SORTABLE_COLUMNS = frozenset(
    {"scheduled_start", "due_date", "priority", "status", "title", "created_at"}
)


def generate_work_order_number(today: date | None = None) -> str:
    """WO-YYYY-MM-NNNNN with a random five-digit suffix."""
    today = today or datetime.now(timezone.utc).date()
    return f"WO-{today:%Y-%m}-{random.randint(10000, 99999)}"


def _site_ids_for_client(supabase: Any, client_id: str) -> list[str]:
    rows, _ = crud.query_rows(
        supabase, TABLE_SITES, columns="id", filters={"client_id": str(client_id)}
    )
    return [str(r["id"]) for r in rows]


def search_work_orders(
    *,
    q: str | None = None,
    client_id: str | None = None,
    site_id: str | None = None,
    contract_id: str | None = None,
    status: str | None = None,
    category: str | None = None,
    priority: str | None = None,
    from_date: date | datetime | None = None,
    to_date: date | datetime | None = None,
    sort_by: str | None = None,
    descending: bool = True,
    page_size: int = 20,
    offset: int = 0,
) -> tuple[list[dict[str, Any]], int | None]:
    """
    Filter work orders. A client filter resolves to that client's sites;
    a client with no sites yields an empty page without querying work_orders.
    """
    supabase = get_supabase_client()

    site_ids: list[str] | None = None
    if is_filter_value(client_id):
        site_ids = _site_ids_for_client(supabase, client_id)  # type: ignore[arg-type]
        if not site_ids:
            return [], 0

    query = supabase.table(TABLE_WORK_ORDERS).select(LIST_COLUMNS, count="exact")
    query = apply_text_search(query, SEARCH_COLUMNS, q)
    query = apply_eq_filter(query, "site_id", site_id)
    query = apply_eq_filter(query, "contract_id", contract_id)
    query = apply_enum_filter(query, "status", status, WORK_ORDER_STATUSES)
    query = apply_enum_filter(query, "category", category, WORK_ORDER_CATEGORIES)
    query = apply_enum_filter(query, "priority", priority, WORK_ORDER_PRIORITIES)
    query = apply_date_filters(query, "scheduled_start", from_date, to_date, end_column="due_date")
    if site_ids is not None:
        query = query.in_("site_id", site_ids)
    query = apply_sort(
        query, sort_by, allowed=SORTABLE_COLUMNS, default="scheduled_start", descending=descending
    )
    query = apply_page(query, offset, page_size)

    with crud.database_errors(TABLE_WORK_ORDERS, "search"):
        result = query.execute()
    return result.data or [], result.count


def get_work_order(work_order_id: str) -> dict[str, Any] | None:
    return crud.select_row(
        get_supabase_client(), TABLE_WORK_ORDERS, work_order_id, columns=DETAIL_COLUMNS
    )


def list_work_orders_for_site(site_id: str) -> list[dict[str, Any]]:
    rows, _ = crud.query_rows(
        get_supabase_client(),
        TABLE_WORK_ORDERS,
        filters={"site_id": str(site_id)},
        order="scheduled_start",
        desc=True,
    )
    return rows


def list_work_orders_for_client(client_id: str) -> list[dict[str, Any]]:
    rows, _ = search_work_orders(client_id=client_id, page_size=1000)
    return rows


def create_work_order(
    data: dict[str, Any] | WorkOrderCreate,
    *,
    assignments: list[dict[str, Any]] | None = None,
    checklist_items: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Insert a work order with a generated id and number, then its children."""
    payload = validate_for_db(data, WorkOrderCreate)
    assignment_rows = _prepare_children(assignments, WorkOrderAssignmentCreate)
    checklist_rows = _prepare_children(checklist_items, AuditChecklistItemCreate)
    payload["id"] = str(uuid.uuid4())
    payload.setdefault("work_order_number", generate_work_order_number())

    row = crud.insert_row(get_supabase_client(), TABLE_WORK_ORDERS, payload)
    work_order_id = row.get("id", payload["id"])
    logger.info(
        "work_order_created",
        id=work_order_id,
        work_order_number=payload["work_order_number"],
        site_id=payload["site_id"],
    )

    if assignment_rows:
        row["assignments"] = _insert_children(
            TABLE_WORK_ORDER_ASSIGNMENTS, work_order_id, assignment_rows
        )
    if checklist_rows:
        row["checklist_items"] = _insert_children(
            TABLE_AUDIT_CHECKLIST_ITEMS, work_order_id, checklist_rows
        )
    return row


def update_work_order(
    work_order_id: str,
    data: dict[str, Any] | WorkOrderUpdate,
    *,
    assignments: list[dict[str, Any]] | None = None,
    checklist_items: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """
    Partial update. Given assignments or checklist items replace the
    existing ones for this work order. Children are validated before
    anything is written.
    """
    payload = validate_for_db(data, WorkOrderUpdate)
    assignment_rows = _prepare_children(assignments, WorkOrderAssignmentCreate)
    checklist_rows = _prepare_children(checklist_items, AuditChecklistItemCreate)
    payload["updated_at"] = utc_now_iso()
    row = crud.update_row(
        get_supabase_client(), TABLE_WORK_ORDERS, work_order_id, payload, entity="Work order"
    )
    if assignment_rows is not None:
        delete_assignments(work_order_id)
        row["assignments"] = _insert_children(
            TABLE_WORK_ORDER_ASSIGNMENTS, work_order_id, assignment_rows
        )
    if checklist_rows is not None:
        delete_checklist_items(work_order_id)
        row["checklist_items"] = _insert_children(
            TABLE_AUDIT_CHECKLIST_ITEMS, work_order_id, checklist_rows
        )
    return row


def _prepare_children(
    items: list[dict[str, Any]] | None, model: type[DbModel]
) -> list[dict[str, Any]] | None:
    if items is None:
        return None
    return [validate_for_db(item, model) for item in items]


def _insert_children(
    table: str, work_order_id: str, payloads: list[dict[str, Any]]
) -> list[dict[str, Any]]:
    rows = [{**p, "work_order_id": str(work_order_id)} for p in payloads]
    return crud.insert_rows(get_supabase_client(), table, rows)


def delete_work_order(work_order_id: str) -> None:
    delete_assignments(work_order_id)
    delete_checklist_items(work_order_id)
    crud.delete_row(get_supabase_client(), TABLE_WORK_ORDERS, work_order_id, entity="Work order")
    logger.info("work_order_deleted", id=work_order_id)


# ---------------------------------------------------------------------------
# Assignments
# ---------------------------------------------------------------------------

def list_assignments(work_order_id: str) -> list[dict[str, Any]]:
    rows, _ = crud.query_rows(
        get_supabase_client(),
        TABLE_WORK_ORDER_ASSIGNMENTS,
        columns="*, employee:employee_id(id, first_name, last_name)",
        filters={"work_order_id": str(work_order_id)},
    )
    return rows


def create_assignments(
    work_order_id: str, assignments: list[dict[str, Any]]
) -> list[dict[str, Any]]:
    payloads = _prepare_children(assignments, WorkOrderAssignmentCreate) or []
    return _insert_children(TABLE_WORK_ORDER_ASSIGNMENTS, work_order_id, payloads)


def delete_assignments(work_order_id: str) -> int:
    return crud.delete_rows(
        get_supabase_client(), TABLE_WORK_ORDER_ASSIGNMENTS, "work_order_id", work_order_id
    )


# ---------------------------------------------------------------------------
# Audit checklist
# ---------------------------------------------------------------------------

def list_checklist_items(work_order_id: str) -> list[dict[str, Any]]:
    rows, _ = crud.query_rows(
        get_supabase_client(),
        TABLE_AUDIT_CHECKLIST_ITEMS,
        filters={"work_order_id": str(work_order_id)},
        order="created_at",
    )
    return rows


def create_checklist_items(
    work_order_id: str, items: list[dict[str, Any]]
) -> list[dict[str, Any]]:
    payloads = _prepare_children(items, AuditChecklistItemCreate) or []
    return _insert_children(TABLE_AUDIT_CHECKLIST_ITEMS, work_order_id, payloads)


def delete_checklist_items(work_order_id: str) -> int:
    return crud.delete_rows(
        get_supabase_client(), TABLE_AUDIT_CHECKLIST_ITEMS, "work_order_id", work_order_id
    )
