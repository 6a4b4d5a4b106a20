"""Client data service."""

from __future__ import annotations

from typing import Any

import structlog

from cleanerp_shared.constants import CLIENT_STATUSES, TABLE_CLIENTS, TABLE_CONTACTS
from cleanerp_shared.db import get_supabase_client
from cleanerp_shared.models import ClientCreate, ClientUpdate, ContactCreate, validate_for_db

from cleanerp_api.services import crud
from cleanerp_api.utils.cache import metadata_cache
from cleanerp_api.utils.filtering import (
    apply_enum_filter,
    apply_eq_filter,
    apply_page,
    apply_sort,
    apply_text_search,
)

logger = structlog.get_logger(__name__)

SEARCH_COLUMNS = (
    "company_name",
    "contact_name",
    "contact_email",
    "billing_address_city",
)
SORTABLE_COLUMNS = frozenset(
    {"company_name", "status", "industry", "region", "created_at", "updated_at"}
)


def search_clients(
    *,
    q: str | None = None,
    status: str | None = None,
    industry: str | None = None,
    region: str | None = None,
    sort_by: str | None = None,
    descending: bool = False,
    page_size: int = 20,
    offset: int = 0,
) -> tuple[list[dict[str, Any]], int | None]:
    supabase = get_supabase_client()
    query = supabase.table(TABLE_CLIENTS).select("*", count="exact")

    query = apply_text_search(query, SEARCH_COLUMNS, q)
    query = apply_enum_filter(query, "status", status, CLIENT_STATUSES)
    query = apply_eq_filter(query, "industry", industry)
    query = apply_eq_filter(query, "region", region)
    query = apply_sort(
        query, sort_by, allowed=SORTABLE_COLUMNS, default="company_name", descending=descending
    )
    query = apply_page(query, offset, page_size)

    with crud.database_errors(TABLE_CLIENTS, "search"):
        result = query.execute()
    return result.data or [], result.count


def get_client(client_id: str) -> dict[str, Any] | None:
    return crud.select_row(get_supabase_client(), TABLE_CLIENTS, client_id)


def create_client(data: dict[str, Any] | ClientCreate) -> dict[str, Any]:
    payload = validate_for_db(data, ClientCreate)
    row = crud.insert_row(get_supabase_client(), TABLE_CLIENTS, payload)
    metadata_cache.invalidate_prefix("clients:")
    logger.info("client_created", id=row.get("id"), company_name=payload["company_name"])
    return row


def update_client(client_id: str, data: dict[str, Any] | ClientUpdate) -> dict[str, Any]:
    payload = validate_for_db(data, ClientUpdate)
    row = crud.update_row(
        get_supabase_client(), TABLE_CLIENTS, client_id, payload, entity="Client"
    )
    metadata_cache.invalidate_prefix("clients:")
    return row


def delete_client(client_id: str) -> None:
    crud.delete_row(get_supabase_client(), TABLE_CLIENTS, client_id, entity="Client")
    metadata_cache.invalidate_prefix("clients:")
    logger.info("client_deleted", id=client_id)


def list_statuses() -> list[str]:
    return list(CLIENT_STATUSES)


def _cached_distinct(column: str) -> list[str]:
    cache_key = f"clients:{column}"
    cached = metadata_cache.get(cache_key)
    if cached is not None:
        return cached
    values = crud.distinct_values(get_supabase_client(), TABLE_CLIENTS, column)
    metadata_cache.set(cache_key, values)
    return values


def list_industries() -> list[str]:
    return _cached_distinct("industry")


def list_regions() -> list[str]:
    return _cached_distinct("region")


def list_client_contacts(client_id: str) -> list[dict[str, Any]]:
    rows, _ = crud.query_rows(
        get_supabase_client(),
        TABLE_CONTACTS,
        filters={"client_id": str(client_id)},
        order="last_name",
    )
    return rows


def add_client_contact(client_id: str, data: dict[str, Any]) -> dict[str, Any]:
    payload = validate_for_db({**data, "client_id": client_id}, ContactCreate)
    return crud.insert_row(get_supabase_client(), TABLE_CONTACTS, payload)
