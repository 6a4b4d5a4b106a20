"""Quote data service: quotes and their line items."""

from __future__ import annotations

from datetime import date
from typing import Any

import structlog

from cleanerp_shared.billing import round_currency
from cleanerp_shared.config import settings
from cleanerp_shared.constants import QUOTE_STATUSES, TABLE_QUOTE_LINE_ITEMS, TABLE_QUOTES
from cleanerp_shared.dates import utc_now_iso
from cleanerp_shared.db import get_supabase_client
from cleanerp_shared.models import (
    QuoteCreate,
    QuoteLineItemCreate,
    QuoteLineItemUpdate,
    QuoteUpdate,
    validate_for_db,
)

from cleanerp_api.errors import RecordNotFoundError
from cleanerp_api.services import crud
from cleanerp_api.utils.filtering import (
    apply_date_filters,
    apply_enum_filter,
    apply_eq_filter,
    apply_text_search,
)

logger = structlog.get_logger(__name__)

LIST_COLUMNS = "*, client:client_id(company_name), lead:lead_id(lead_name, company_name)"
DETAIL_COLUMNS = "*, client:client_id(id, company_name), lead:lead_id(id, lead_name, company_name)"
SEARCH_COLUMNS = ("quote_number", "service_description")


def search_quotes(
    *,
    q: str | None = None,
    client_id: str | None = None,
    lead_id: str | None = None,
    status: str | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    supabase = get_supabase_client()
    query = supabase.table(TABLE_QUOTES).select(LIST_COLUMNS)

    query = apply_text_search(query, SEARCH_COLUMNS, q)
    query = apply_eq_filter(query, "client_id", client_id)
    query = apply_eq_filter(query, "lead_id", lead_id)
    query = apply_enum_filter(query, "status", status, QUOTE_STATUSES)
    query = apply_date_filters(query, "issue_date", from_date, to_date)
    query = query.order("issue_date", desc=True).limit(limit or settings.search_result_limit)

    with crud.database_errors(TABLE_QUOTES, "search"):
        result = query.execute()
    return result.data or []


def get_quote(quote_id: str) -> dict[str, Any] | None:
    """Quote with client, lead and line items."""
    quote = crud.select_row(get_supabase_client(), TABLE_QUOTES, quote_id, columns=DETAIL_COLUMNS)
    if quote is None:
        return None
    quote["line_items"] = list_line_items(quote_id)
    return quote


def create_quote(
    data: dict[str, Any] | QuoteCreate,
    *,
    line_items: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Insert a quote and its line items; total_amount is the sum of the items."""
    items = [validate_for_db(i, QuoteLineItemCreate) for i in line_items or []]
    payload = validate_for_db(data, QuoteCreate)
    if items:
        payload["total_amount"] = _sum_amounts(items)

    supabase = get_supabase_client()
    row = crud.insert_row(supabase, TABLE_QUOTES, payload)
    quote_id = row.get("id")
    logger.info("quote_created", id=quote_id, quote_number=payload["quote_number"])

    if quote_id and items:
        row["line_items"] = crud.insert_rows(
            supabase, TABLE_QUOTE_LINE_ITEMS, [{**i, "quote_id": quote_id} for i in items]
        )
    return row


def update_quote(quote_id: str, data: dict[str, Any] | QuoteUpdate) -> dict[str, Any]:
    payload = validate_for_db(data, QuoteUpdate)
    payload["updated_at"] = utc_now_iso()
    return crud.update_row(get_supabase_client(), TABLE_QUOTES, quote_id, payload, entity="Quote")


def delete_quote(quote_id: str) -> None:
    supabase = get_supabase_client()
    crud.delete_rows(supabase, TABLE_QUOTE_LINE_ITEMS, "quote_id", quote_id)
    crud.delete_row(supabase, TABLE_QUOTES, quote_id, entity="Quote")
    logger.info("quote_deleted", id=quote_id)


def list_statuses() -> list[str]:
    return list(QUOTE_STATUSES)


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------

def _sum_amounts(items: list[dict[str, Any]]) -> float:
    return round_currency(sum(float(i.get("amount") or 0) for i in items))


def list_line_items(quote_id: str) -> list[dict[str, Any]]:
    rows, _ = crud.query_rows(
        get_supabase_client(),
        TABLE_QUOTE_LINE_ITEMS,
        filters={"quote_id": str(quote_id)},
        order="created_at",
    )
    return rows


def recalculate_quote_total(quote_id: str) -> float:
    """Store the sum of the quote's line item amounts as its total_amount."""
    total = _sum_amounts(list_line_items(quote_id))
    crud.update_row(
        get_supabase_client(),
        TABLE_QUOTES,
        quote_id,
        {"total_amount": total, "updated_at": utc_now_iso()},
        entity="Quote",
    )
    logger.info("quote_total_recalculated", id=quote_id, total_amount=total)
    return total


def add_line_item(quote_id: str, data: dict[str, Any]) -> dict[str, Any]:
    payload = validate_for_db(data, QuoteLineItemCreate)
    payload["quote_id"] = str(quote_id)
    row = crud.insert_row(get_supabase_client(), TABLE_QUOTE_LINE_ITEMS, payload)
    recalculate_quote_total(quote_id)
    return row


def update_line_item(quote_id: str, item_id: str, data: dict[str, Any]) -> dict[str, Any]:
    payload = validate_for_db(data, QuoteLineItemUpdate)
    supabase = get_supabase_client()
    if "amount" not in payload and {"quantity", "unit_price"} & payload.keys():
        current = crud.select_row(supabase, TABLE_QUOTE_LINE_ITEMS, item_id)
        if current is None:
            raise RecordNotFoundError("Quote line item", item_id)
        quantity = float(payload.get("quantity", current.get("quantity") or 0))
        unit_price = float(payload.get("unit_price", current.get("unit_price") or 0))
        payload["amount"] = round_currency(quantity * unit_price)
    payload["updated_at"] = utc_now_iso()
    row = crud.update_row(
        supabase, TABLE_QUOTE_LINE_ITEMS, item_id, payload, entity="Quote line item"
    )
    recalculate_quote_total(quote_id)
    return row


def delete_line_item(quote_id: str, item_id: str) -> None:
    crud.delete_row(
        get_supabase_client(), TABLE_QUOTE_LINE_ITEMS, item_id, entity="Quote line item"
    )
    recalculate_quote_total(quote_id)
