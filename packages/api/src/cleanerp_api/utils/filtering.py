"""Query parameter parsing and Supabase filter builders."""

from __future__ import annotations

import re
from collections.abc import Collection, Sequence
from datetime import date, datetime
from typing import Any

from cleanerp_shared.constants import ALL_FILTER_VALUES

# Characters with meaning inside a PostgREST or=(...) expression
_OR_RESERVED = re.compile(r"[,()\\]")


def is_filter_value(value: str | None) -> bool:
    """False for missing values and the UI's "all" sentinels."""
    return value is not None and value.strip().lower() not in ALL_FILTER_VALUES


def apply_date_filters(
    query: Any,
    column: str,
    start_date: date | datetime | None,
    end_date: date | datetime | None,
    *,
    end_column: str | None = None,
) -> Any:
    """Apply date range filters; end_column defaults to column."""
    if start_date is not None:
        query = query.gte(column, start_date.isoformat())
    if end_date is not None:
        query = query.lte(end_column or column, end_date.isoformat())
    return query


def apply_text_search(
    query: Any,
    columns: Sequence[str],
    search_term: str | None,
) -> Any:
    """Case-insensitive substring match on any of columns."""
    if not search_term or not search_term.strip():
        return query
    term = _OR_RESERVED.sub(" ", search_term.strip())
    if len(columns) == 1:
        return query.ilike(columns[0], f"%{term}%")
    return query.or_(",".join(f"{col}.ilike.%{term}%" for col in columns))


def apply_eq_filter(query: Any, column: str, value: Any) -> Any:
    """Equality filter that ignores empty values and "all" sentinels."""
    if value is None:
        return query
    if isinstance(value, str) and not is_filter_value(value):
        return query
    return query.eq(column, str(value))


def apply_enum_filter(
    query: Any,
    column: str,
    value: str | None,
    allowed: Collection[str],
) -> Any:
    """Equality filter applied only when value is a known enum member."""
    if is_filter_value(value) and value in allowed:
        query = query.eq(column, value)
    return query


def apply_sort(
    query: Any,
    sort_by: str | None,
    *,
    allowed: Collection[str],
    default: str,
    descending: bool = False,
) -> Any:
    """Order by sort_by when it is an allowed column, else by default."""
    column = sort_by if sort_by in allowed else default
    return query.order(column, desc=descending)


def apply_page(query: Any, offset: int, page_size: int) -> Any:
    """Inclusive PostgREST range for one page."""
    return query.range(offset, offset + page_size - 1)
