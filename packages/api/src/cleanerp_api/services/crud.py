"""
Generic table operations shared by the entity services.

Every helper takes the Supabase client from the calling service so tests can
patch ``<service>.get_supabase_client`` in one place. Payloads go through
prepare_object_for_db before they are sent; PostgREST errors are classified
and re-raised as DatabaseError.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

import httpx
import structlog
from postgrest.exceptions import APIError

from cleanerp_shared.dates import prepare_object_for_db

from cleanerp_api.errors import RecordNotFoundError, wrap_database_error

logger = structlog.get_logger(__name__)

Row = dict[str, Any]


@contextmanager
def database_errors(entity: str, operation: str) -> Iterator[None]:
    """Translate PostgREST and transport failures into DatabaseError."""
    try:
        yield
    except (APIError, httpx.HTTPError) as exc:
        raise wrap_database_error(exc, entity=entity, operation=operation) from exc


def select_row(
    supabase: Any,
    table: str,
    record_id: Any,
    *,
    columns: str = "*",
    id_column: str = "id",
) -> Row | None:
    with database_errors(table, "select"):
        result = (
            supabase.table(table)
            .select(columns)
            .eq(id_column, str(record_id))
            .limit(1)
            .execute()
        )
    return result.data[0] if result.data else None


def query_rows(
    supabase: Any,
    table: str,
    *,
    columns: str = "*",
    filters: Mapping[str, Any] | None = None,
    in_filters: Mapping[str, Sequence[Any]] | None = None,
    ilike: Mapping[str, str] | None = None,
    or_filter: str | None = None,
    order: str | None = None,
    desc: bool = False,
    limit: int | None = None,
    offset: int | None = None,
    count: bool = False,
) -> tuple[list[Row], int | None]:
    """Run a filtered select. Returns (rows, total count or None)."""
    query = supabase.table(table).select(columns, count="exact") if count else (
        supabase.table(table).select(columns)
    )
    for column, value in (filters or {}).items():
        if value is not None:
            query = query.eq(column, value)
    for column, values in (in_filters or {}).items():
        query = query.in_(column, [str(v) for v in values])
    for column, pattern in (ilike or {}).items():
        query = query.ilike(column, pattern)
    if or_filter:
        query = query.or_(or_filter)
    if order:
        query = query.order(order, desc=desc)
    if offset is not None and limit is not None:
        query = query.range(offset, offset + limit - 1)
    elif limit is not None:
        query = query.limit(limit)

    with database_errors(table, "query"):
        result = query.execute()
    return result.data or [], result.count


def insert_row(supabase: Any, table: str, payload: Mapping[str, Any]) -> Row:
    rows = insert_rows(supabase, table, [payload])
    return rows[0] if rows else dict(prepare_object_for_db(dict(payload)) or {})


def insert_rows(
    supabase: Any, table: str, payloads: Sequence[Mapping[str, Any]]
) -> list[Row]:
    if not payloads:
        return []
    prepared = [prepare_object_for_db(dict(p)) or {} for p in payloads]
    with database_errors(table, "insert"):
        result = supabase.table(table).insert(prepared).execute()
    logger.info("rows_inserted", table=table, rows=len(prepared))
    return result.data or []


def update_row(
    supabase: Any,
    table: str,
    record_id: Any,
    payload: Mapping[str, Any],
    *,
    entity: str | None = None,
    id_column: str = "id",
) -> Row:
    """Update one row by id. Raises RecordNotFoundError when nothing matched."""
    prepared = prepare_object_for_db(dict(payload)) or {}
    prepared.pop("created_at", None)
    prepared.pop(id_column, None)
    with database_errors(table, "update"):
        result = (
            supabase.table(table).update(prepared).eq(id_column, str(record_id)).execute()
        )
    if not result.data:
        raise RecordNotFoundError(entity or table, record_id)
    logger.info("row_updated", table=table, id=str(record_id), fields=sorted(prepared))
    return result.data[0]


def delete_rows(supabase: Any, table: str, column: str, value: Any) -> int:
    """Delete every row where column == value. Returns the deleted count."""
    with database_errors(table, "delete"):
        result = supabase.table(table).delete().eq(column, str(value)).execute()
    deleted = len(result.data or [])
    logger.info("rows_deleted", table=table, column=column, rows=deleted)
    return deleted


def delete_row(
    supabase: Any, table: str, record_id: Any, *, entity: str | None = None
) -> None:
    """Delete one row by id. Raises RecordNotFoundError when nothing matched."""
    if delete_rows(supabase, table, "id", record_id) == 0:
        raise RecordNotFoundError(entity or table, record_id)


def distinct_values(supabase: Any, table: str, column: str, *, limit: int = 500) -> list[str]:
    """Sorted distinct non-empty values of one column."""
    rows, _ = query_rows(
        supabase, table, columns=column, order=column, limit=limit
    )
    return sorted({str(r[column]) for r in rows if r.get(column)})
