"""Sales lead data service."""

from __future__ import annotations

from typing import Any

import structlog

from cleanerp_shared.config import settings
from cleanerp_shared.constants import LEAD_SOURCES, LEAD_STAGES, LEAD_STATUSES, TABLE_LEADS
from cleanerp_shared.dates import utc_now_iso
from cleanerp_shared.db import get_supabase_client
from cleanerp_shared.models import LeadCreate, LeadUpdate, validate_for_db

from cleanerp_api.services import crud
from cleanerp_api.utils.filtering import apply_enum_filter, apply_text_search

logger = structlog.get_logger(__name__)

SEARCH_COLUMNS = ("lead_name", "company_name", "contact_name")


def search_leads(
    *,
    q: str | None = None,
    stage: str | None = None,
    status: str | None = None,
    source: str | None = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    supabase = get_supabase_client()
    query = supabase.table(TABLE_LEADS).select("*")

    query = apply_text_search(query, SEARCH_COLUMNS, q)
    query = apply_enum_filter(query, "stage", stage, LEAD_STAGES)
    query = apply_enum_filter(query, "status", status, LEAD_STATUSES)
    query = apply_enum_filter(query, "source", source, LEAD_SOURCES)
    query = query.order("created_at", desc=True).limit(limit or settings.search_result_limit)

    with crud.database_errors(TABLE_LEADS, "search"):
        result = query.execute()
    return result.data or []


def get_lead(lead_id: str) -> dict[str, Any] | None:
    return crud.select_row(get_supabase_client(), TABLE_LEADS, lead_id)


def create_lead(data: dict[str, Any] | LeadCreate) -> dict[str, Any]:
    payload = validate_for_db(data, LeadCreate)
    row = crud.insert_row(get_supabase_client(), TABLE_LEADS, payload)
    logger.info("lead_created", id=row.get("id"), stage=payload["stage"])
    return row


def update_lead(lead_id: str, data: dict[str, Any] | LeadUpdate) -> dict[str, Any]:
    payload = validate_for_db(data, LeadUpdate)
    payload["updated_at"] = utc_now_iso()
    return crud.update_row(get_supabase_client(), TABLE_LEADS, lead_id, payload, entity="Lead")


def delete_lead(lead_id: str) -> None:
    crud.delete_row(get_supabase_client(), TABLE_LEADS, lead_id, entity="Lead")
    logger.info("lead_deleted", id=lead_id)


def list_enums() -> dict[str, list[str]]:
    return {
        "stages": list(LEAD_STAGES),
        "statuses": list(LEAD_STATUSES),
        "sources": list(LEAD_SOURCES),
    }
