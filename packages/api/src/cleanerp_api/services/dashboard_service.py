"""Dashboard aggregates computed from live tables."""

from __future__ import annotations

import math
from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Any

import structlog

from cleanerp_shared.billing import convert_billing_amount, round_currency
from cleanerp_shared.constants import (
    BILLING_FREQUENCIES,
    PENDING_WORK_ORDER_STATUSES,
    TABLE_CLIENTS,
    TABLE_CONTRACTS,
    TABLE_SITES,
    TABLE_WORK_ORDERS,
)
from cleanerp_shared.db import get_supabase_client
from cleanerp_shared.models.sites import parse_coordinates

from cleanerp_api.services import crud
from cleanerp_api.utils.cache import dashboard_cache

logger = structlog.get_logger(__name__)

EXPIRY_WINDOW_DAYS = 30
MAP_SITE_LIMIT = 100

# Legacy spellings found in older contract rows
FREQUENCY_ALIASES = {"biweekly": "fortnightly", "yearly": "annually"}


def _count(supabase: Any, table: str, **filters: Any) -> int:
    _, count = crud.query_rows(
        supabase, table, columns="id", filters=filters, limit=1, count=True
    )
    return count or 0


def monthly_equivalent(base_fee: Any, billing_frequency: str | None) -> float:
    """Monthly value of a fee; unknown or missing frequencies count as monthly."""
    amount = float(base_fee or 0)
    frequency = (billing_frequency or "").lower()
    frequency = FREQUENCY_ALIASES.get(frequency, frequency)
    if frequency not in BILLING_FREQUENCIES:
        return amount
    converted = convert_billing_amount(amount, frequency, "monthly")  # type: ignore[arg-type]
    return converted if math.isfinite(converted) else 0.0


def get_dashboard_stats() -> dict[str, Any]:
    cached = dashboard_cache.get("stats")
    if cached is not None:
        return cached

    supabase = get_supabase_client()
    contracts, _ = crud.query_rows(
        supabase,
        TABLE_CONTRACTS,
        columns="base_fee, billing_frequency",
        filters={"status": "Active"},
    )
    monthly_revenue = round_currency(
        sum(monthly_equivalent(c.get("base_fee"), c.get("billing_frequency")) for c in contracts)
    )

    stats = {
        "active_contracts": _count(supabase, TABLE_CONTRACTS, status="Active"),
        "total_clients": _count(supabase, TABLE_CLIENTS),
        "active_clients": _count(supabase, TABLE_CLIENTS, status="Active"),
        "cleaning_locations": _count(supabase, TABLE_SITES),
        "scheduled_work_orders": _count(supabase, TABLE_WORK_ORDERS, status="Scheduled"),
        "monthly_revenue": monthly_revenue,
    }
    dashboard_cache.set("stats", stats)
    logger.info("dashboard_stats_computed", **stats)
    return stats


def get_expiring_contracts(
    *, days: int = EXPIRY_WINDOW_DAYS, limit: int = 5, today: date | None = None
) -> list[dict[str, Any]]:
    """Active contracts whose end_date falls between today and today + days."""
    today = today or datetime.now(timezone.utc).date()
    horizon = today + timedelta(days=days)
    supabase = get_supabase_client()
    query = (
        supabase.table(TABLE_CONTRACTS)
        .select(
            "id, contract_number, client_id, start_date, end_date, status, base_fee, "
            "billing_frequency, client:client_id(company_name)"
        )
        .eq("status", "Active")
        .gte("end_date", today.isoformat())
        .lte("end_date", horizon.isoformat())
        .order("end_date")
        .limit(limit)
    )
    with crud.database_errors(TABLE_CONTRACTS, "expiring"):
        result = query.execute()
    return result.data or []


def get_pending_work_orders(*, limit: int = 5) -> list[dict[str, Any]]:
    rows, _ = crud.query_rows(
        get_supabase_client(),
        TABLE_WORK_ORDERS,
        columns=(
            "id, title, status, priority, due_date, scheduled_start, "
            "site:site_id(site_name, client:client_id(company_name))"
        ),
        in_filters={"status": PENDING_WORK_ORDER_STATUSES},
        order="due_date",
        limit=limit,
    )
    return rows


def get_map_locations(*, limit: int = MAP_SITE_LIMIT) -> list[dict[str, Any]]:
    """Active sites with parseable coordinates; the rest are skipped."""
    rows, _ = crud.query_rows(
        get_supabase_client(),
        TABLE_SITES,
        columns=(
            "id, site_name, address_street, address_city, coordinates, status, "
            "client:client_id(company_name)"
        ),
        filters={"status": "Active"},
        limit=limit,
    )
    locations = []
    skipped = 0
    for site in rows:
        coords = parse_coordinates(site.get("coordinates"))
        if coords is None:
            skipped += 1
            continue
        client = site.get("client") or {}
        locations.append(
            {
                "id": site["id"],
                "name": site.get("site_name"),
                "lat": coords[0],
                "lng": coords[1],
                "address": site.get("address_street"),
                "city": site.get("address_city"),
                "client_name": client.get("company_name"),
            }
        )
    if skipped:
        logger.debug("map_sites_without_coordinates", skipped=skipped)
    return locations


def get_work_order_status_summary() -> dict[str, Any]:
    """Work order counts per status and the share completed."""
    rows, _ = crud.query_rows(get_supabase_client(), TABLE_WORK_ORDERS, columns="status")
    counts = Counter(r.get("status") or "Unknown" for r in rows)
    considered = sum(n for s, n in counts.items() if s != "Cancelled")
    completion_rate = round(100 * counts.get("Completed", 0) / considered, 1) if considered else 0.0
    return {"by_status": dict(sorted(counts.items())), "completion_rate": completion_rate}
