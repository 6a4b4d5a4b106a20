"""Contract data service: contracts, their site links and change log."""

from __future__ import annotations

import json
from datetime import date
from typing import Any

import structlog

from cleanerp_shared.billing import calculate_all_billing_frequencies
from cleanerp_shared.constants import (
    CONTRACT_STATUSES,
    TABLE_CONTRACT_CHANGE_LOGS,
    TABLE_CONTRACT_SITES,
    TABLE_CONTRACTS,
)
from cleanerp_shared.dates import utc_now_iso
from cleanerp_shared.db import get_supabase_client
from cleanerp_shared.models import (
    ContractCreate,
    ContractUpdate,
    validate_model,
)

from cleanerp_api.errors import DatabaseError, RecordNotFoundError
from cleanerp_api.services import crud
from cleanerp_api.utils.cache import metadata_cache
from cleanerp_api.utils.filtering import (
    apply_date_filters,
    apply_enum_filter,
    apply_eq_filter,
    apply_page,
    apply_sort,
    apply_text_search,
)

logger = structlog.get_logger(__name__)

LIST_COLUMNS = "*, client:client_id(company_name)"
DETAIL_COLUMNS = "*, client:client_id(id, company_name)"
SITE_LINK_COLUMNS = (
    "id, contract_id, site_id, "
    "site:site_id(id, site_name, address_street, address_city, address_state, address_postcode)"
)
SEARCH_COLUMNS = ("contract_number", "scope_of_work", "contract_type")
SORTABLE_COLUMNS = frozenset(
    {"contract_number", "start_date", "end_date", "base_fee", "status", "created_at"}
)


def search_contracts(
    *,
    q: str | None = None,
    client_id: str | None = None,
    status: str | None = None,
    contract_type: str | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
    sort_by: str | None = None,
    descending: bool = False,
    page_size: int = 20,
    offset: int = 0,
) -> tuple[list[dict[str, Any]], int | None]:
    supabase = get_supabase_client()
    query = supabase.table(TABLE_CONTRACTS).select(LIST_COLUMNS, count="exact")

    query = apply_text_search(query, SEARCH_COLUMNS, q)
    query = apply_eq_filter(query, "client_id", client_id)
    query = apply_enum_filter(query, "status", status, CONTRACT_STATUSES)
    query = apply_eq_filter(query, "contract_type", contract_type)
    query = apply_date_filters(query, "start_date", from_date, to_date, end_column="end_date")
    query = apply_sort(
        query, sort_by, allowed=SORTABLE_COLUMNS, default="start_date", descending=descending
    )
    query = apply_page(query, offset, page_size)

    with crud.database_errors(TABLE_CONTRACTS, "search"):
        result = query.execute()
    return result.data or [], result.count


def get_contract(contract_id: str) -> dict[str, Any] | None:
    """Contract with its client and linked sites."""
    supabase = get_supabase_client()
    contract = crud.select_row(supabase, TABLE_CONTRACTS, contract_id, columns=DETAIL_COLUMNS)
    if contract is None:
        return None
    contract["sites"] = list_contract_sites(contract_id)
    return contract


def create_contract(
    data: dict[str, Any] | ContractCreate,
    *,
    site_ids: list[str] | None = None,
    changed_by: str | None = None,
) -> dict[str, Any]:
    """
    Insert a contract, deriving weekly/monthly/annual values from base_fee
    when any of them is missing, then link site_ids and log the creation.
    """
    contract = validate_model(data, ContractCreate).with_billing_values()
    payload = contract.to_insert_dict()

    row = crud.insert_row(get_supabase_client(), TABLE_CONTRACTS, payload)
    contract_id = row.get("id")
    logger.info(
        "contract_created",
        id=contract_id,
        contract_number=payload["contract_number"],
        monthly_value=payload.get("monthly_value"),
    )

    if contract_id and site_ids:
        replace_contract_sites(contract_id, site_ids)
    if contract_id:
        log_contract_change(
            contract_id, "Created", new_value=payload, changed_by=changed_by
        )
    metadata_cache.invalidate_prefix("contracts:")
    return row


def update_contract(
    contract_id: str,
    data: dict[str, Any] | ContractUpdate,
    *,
    site_ids: list[str] | None = None,
    changed_by: str | None = None,
) -> dict[str, Any]:
    """
    Apply a partial update. When base_fee or billing_frequency change, the
    derived billing values are recalculated from the merged contract.
    site_ids, when given, replaces the existing site links.
    """
    changes = validate_model(data, ContractUpdate)
    payload = changes.to_insert_dict()
    supabase = get_supabase_client()

    original = crud.select_row(supabase, TABLE_CONTRACTS, contract_id)
    if original is None:
        raise RecordNotFoundError("Contract", contract_id)

    if changes.changes_billing:
        base_fee = payload.get("base_fee", original.get("base_fee"))
        frequency = payload.get("billing_frequency", original.get("billing_frequency"))
        breakdown = calculate_all_billing_frequencies(float(base_fee or 0), frequency or "monthly")
        payload.update(
            weekly_value=breakdown.weekly,
            monthly_value=breakdown.monthly,
            annual_value=breakdown.annually,
        )

    payload["updated_at"] = utc_now_iso()
    row = crud.update_row(supabase, TABLE_CONTRACTS, contract_id, payload, entity="Contract")

    if site_ids is not None:
        replace_contract_sites(contract_id, site_ids)
    log_contract_change(
        contract_id, "Updated", old_value=original, new_value=payload, changed_by=changed_by
    )
    metadata_cache.invalidate_prefix("contracts:")
    return row


def delete_contract(contract_id: str) -> None:
    supabase = get_supabase_client()
    crud.delete_rows(supabase, TABLE_CONTRACT_SITES, "contract_id", contract_id)
    crud.delete_row(supabase, TABLE_CONTRACTS, contract_id, entity="Contract")
    metadata_cache.invalidate_prefix("contracts:")
    logger.info("contract_deleted", id=contract_id)


# ---------------------------------------------------------------------------
# Site links
# ---------------------------------------------------------------------------

def list_contract_sites(contract_id: str) -> list[dict[str, Any]]:
    rows, _ = crud.query_rows(
        get_supabase_client(),
        TABLE_CONTRACT_SITES,
        columns=SITE_LINK_COLUMNS,
        filters={"contract_id": str(contract_id)},
    )
    return rows


def add_site_to_contract(contract_id: str, site_id: str) -> dict[str, Any]:
    return crud.insert_row(
        get_supabase_client(),
        TABLE_CONTRACT_SITES,
        {"contract_id": str(contract_id), "site_id": str(site_id)},
    )


def remove_site_from_contract(contract_site_id: str) -> None:
    crud.delete_row(
        get_supabase_client(), TABLE_CONTRACT_SITES, contract_site_id, entity="Contract site"
    )


def replace_contract_sites(contract_id: str, site_ids: list[str]) -> list[dict[str, Any]]:
    """Delete every link of the contract, then link site_ids."""
    supabase = get_supabase_client()
    crud.delete_rows(supabase, TABLE_CONTRACT_SITES, "contract_id", contract_id)
    links = [{"contract_id": str(contract_id), "site_id": str(s)} for s in dict.fromkeys(site_ids)]
    return crud.insert_rows(supabase, TABLE_CONTRACT_SITES, links)


# ---------------------------------------------------------------------------
# Change log
# ---------------------------------------------------------------------------

def list_change_logs(contract_id: str) -> list[dict[str, Any]]:
    rows, _ = crud.query_rows(
        get_supabase_client(),
        TABLE_CONTRACT_CHANGE_LOGS,
        filters={"contract_id": str(contract_id)},
        order="change_date",
        desc=True,
    )
    return rows


def log_contract_change(
    contract_id: str,
    change_type: str,
    *,
    old_value: Any = None,
    new_value: Any = None,
    changed_by: str | None = None,
) -> dict[str, Any] | None:
    """
    Record a change log entry. Database failures are logged, not raised.
    """
    now = utc_now_iso()
    entry = {
        "contract_id": str(contract_id),
        "change_type": change_type,
        "change_date": now,
        "effective_date": now,
        "changed_by": changed_by,
        "old_value": json.dumps(old_value, default=str) if old_value is not None else None,
        "new_value": json.dumps(new_value, default=str) if new_value is not None else None,
    }
    try:
        return crud.insert_row(get_supabase_client(), TABLE_CONTRACT_CHANGE_LOGS, entry)
    except DatabaseError as exc:
        logger.warning(
            "contract_change_log_failed",
            contract_id=str(contract_id),
            change_type=change_type,
            error=str(exc),
        )
        return None


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------

def list_contract_types() -> list[str]:
    cached = metadata_cache.get("contracts:types")
    if cached is not None:
        return cached
    types = crud.distinct_values(get_supabase_client(), TABLE_CONTRACTS, "contract_type")
    metadata_cache.set("contracts:types", types)
    return types


def list_statuses() -> list[str]:
    return list(CONTRACT_STATUSES)
