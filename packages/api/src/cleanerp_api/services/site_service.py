"""Site data service."""

from __future__ import annotations

from collections import Counter
from typing import Any, Literal

import structlog

from cleanerp_shared.billing import calculate_all_billing_frequencies
from cleanerp_shared.constants import SITE_STATUSES, TABLE_SITES
from cleanerp_shared.dates import utc_now_iso
from cleanerp_shared.db import get_supabase_client
from cleanerp_shared.models import SiteCreate, SiteUpdate, validate_for_db

from cleanerp_api.services import crud
from cleanerp_api.utils.filtering import (
    apply_enum_filter,
    apply_eq_filter,
    apply_page,
    apply_sort,
    apply_text_search,
)

logger = structlog.get_logger(__name__)

SITE_COLUMNS = "*, client:client_id(id, company_name)"
SEARCH_COLUMNS = ("site_name", "address_street", "address_city")
SORTABLE_COLUMNS = frozenset(
    {"site_name", "address_city", "region", "status", "created_at", "updated_at"}
)


def search_sites(
    *,
    q: str | None = None,
    status: str | None = None,
    client_id: str | None = None,
    region: str | None = None,
    sort_by: str | None = None,
    descending: bool = False,
    page_size: int = 20,
    offset: int = 0,
) -> tuple[list[dict[str, Any]], int | None]:
    supabase = get_supabase_client()
    query = supabase.table(TABLE_SITES).select(SITE_COLUMNS, count="exact")

    query = apply_text_search(query, SEARCH_COLUMNS, q)
    query = apply_enum_filter(query, "status", status, SITE_STATUSES)
    query = apply_eq_filter(query, "client_id", client_id)
    query = apply_eq_filter(query, "region", region)
    query = apply_sort(
        query, sort_by, allowed=SORTABLE_COLUMNS, default="site_name", descending=descending
    )
    query = apply_page(query, offset, page_size)

    with crud.database_errors(TABLE_SITES, "search"):
        result = query.execute()
    return result.data or [], result.count


def get_site(site_id: str) -> dict[str, Any] | None:
    """Return the site with its client, or None when it does not exist."""
    return crud.select_row(get_supabase_client(), TABLE_SITES, site_id, columns=SITE_COLUMNS)


def list_sites_for_client(client_id: str) -> list[dict[str, Any]]:
    rows, _ = crud.query_rows(
        get_supabase_client(),
        TABLE_SITES,
        filters={"client_id": str(client_id)},
        order="site_name",
    )
    return rows


def create_site(data: dict[str, Any] | SiteCreate) -> dict[str, Any]:
    payload = validate_for_db(data, SiteCreate)
    row = crud.insert_row(get_supabase_client(), TABLE_SITES, payload)
    logger.info("site_created", id=row.get("id"), client_id=payload["client_id"])
    return row


def update_site(site_id: str, data: dict[str, Any] | SiteUpdate) -> dict[str, Any]:
    payload = validate_for_db(data, SiteUpdate)
    payload["updated_at"] = utc_now_iso()
    return crud.update_row(get_supabase_client(), TABLE_SITES, site_id, payload, entity="Site")


def delete_site(site_id: str) -> None:
    crud.delete_row(get_supabase_client(), TABLE_SITES, site_id, entity="Site")
    logger.info("site_deleted", id=site_id)


def bulk_import_sites(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Validate every row first, then insert them in one request."""
    payloads = [validate_for_db(row, SiteCreate) for row in rows]
    inserted = crud.insert_rows(get_supabase_client(), TABLE_SITES, payloads)
    logger.info("sites_bulk_imported", rows=len(inserted))
    return inserted


def get_site_counts(group_by: Literal["region", "status"] = "status") -> dict[str, int]:
    """Count sites per region or status. Sites with no value count as "Unassigned"."""
    rows, _ = crud.query_rows(get_supabase_client(), TABLE_SITES, columns=group_by)
    counts = Counter(row.get(group_by) or "Unassigned" for row in rows)
    return dict(sorted(counts.items()))


def get_site_pricing(site_id: str) -> dict[str, Any] | None:
    """Weekly/monthly/annual breakdown of the site's price, or None if missing."""
    site = crud.select_row(
        get_supabase_client(),
        TABLE_SITES,
        site_id,
        columns="id, site_name, price_per_week, price_frequency",
    )
    if site is None:
        return None
    amount = float(site.get("price_per_week") or 0)
    frequency = site.get("price_frequency") or "weekly"
    breakdown = calculate_all_billing_frequencies(amount, frequency)
    return {
        "site_id": site["id"],
        "site_name": site.get("site_name"),
        "amount": amount,
        "frequency": frequency,
        **breakdown.to_dict(),
    }
