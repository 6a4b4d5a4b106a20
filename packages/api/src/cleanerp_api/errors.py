"""
errors.py — Domain exceptions and Supabase error classification.

Service functions let PostgREST errors propagate; routers never catch them.
The handlers registered in app.create_app() translate them into the
standard error envelope via classify_database_error().
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

import structlog
from postgrest.exceptions import APIError

from cleanerp_shared.models.base import RecordValidationError

logger = structlog.get_logger(__name__)

__all__ = [
    "DatabaseError",
    "DatabaseErrorInfo",
    "RecordNotFoundError",
    "RecordValidationError",
    "classify_database_error",
    "wrap_database_error",
]

POLICY_RECURSION = "policy_recursion"
NOT_FOUND = "not_found"
TIMEOUT = "timeout"
PERMISSION_DENIED = "permission_denied"
VALIDATION = "validation_error"
UNKNOWN = "database_error"

_TABLE_IN_MESSAGE = re.compile(r'relation "([^"]+)"')


@dataclass(frozen=True)
class DatabaseErrorInfo:
    kind: str
    status_code: int
    message: str
    code: str | None = None
    table: str | None = None


class RecordNotFoundError(LookupError):
    """A record requested by id does not exist (or is hidden by RLS)."""

    def __init__(self, entity: str, record_id: Any) -> None:
        self.entity = entity
        self.record_id = str(record_id)
        super().__init__(f"{entity} '{record_id}' not found")


class DatabaseError(RuntimeError):
    """A Supabase call failed; carries the classified error info."""

    def __init__(self, info: DatabaseErrorInfo, *, entity: str | None = None) -> None:
        self.info = info
        self.entity = entity
        super().__init__(info.message)

    @property
    def status_code(self) -> int:
        return self.info.status_code


def _error_fields(exc: BaseException) -> tuple[str | None, str]:
    if isinstance(exc, APIError):
        return exc.code, exc.message or str(exc)
    code = getattr(exc, "code", None)
    message = getattr(exc, "message", None) or str(exc)
    return (str(code) if code is not None else None), str(message)


def classify_database_error(
    exc: BaseException, entity: str = "data"
) -> DatabaseErrorInfo:
    """
    Map a backend error to a kind, an HTTP status and a user-facing message.

    Matching uses the PostgREST/Postgres error code first, then substrings of
    the message, so plain exceptions from the HTTP layer classify as well.
    """
    code, message = _error_fields(exc)
    lowered = message.lower()

    if code == "42P17" or "infinite recursion" in lowered:
        match = _TABLE_IN_MESSAGE.search(message)
        table = match.group(1) if match else "unknown table"
        return DatabaseErrorInfo(
            kind=POLICY_RECURSION,
            status_code=500,
            message=(
                "Database security policy error. Please contact an administrator "
                f'and reference error code 42P17 on table "{table}".'
            ),
            code=code or "42P17",
            table=table,
        )
    if code == "PGRST116":
        return DatabaseErrorInfo(NOT_FOUND, 404, f"{entity} not found", code)
    if "timeout" in lowered or "timed out" in lowered or code == "57014":
        return DatabaseErrorInfo(
            TIMEOUT, 504, f"Timed out loading {entity}", code
        )
    if code == "42501" or "permission denied" in lowered:
        return DatabaseErrorInfo(
            PERMISSION_DENIED, 403, f"Permission denied for {entity}", code
        )
    if code in {"23502", "23503", "23505", "23514", "22P02"}:
        return DatabaseErrorInfo(VALIDATION, 422, message, code)
    return DatabaseErrorInfo(
        UNKNOWN, 500, f"Error loading {entity}: {message or 'Unknown error'}", code
    )


def wrap_database_error(exc: BaseException, *, entity: str, operation: str) -> DatabaseError:
    """Classify exc, log it once with context and return a DatabaseError."""
    info = classify_database_error(exc, entity)
    log = logger.bind(entity=entity, operation=operation, kind=info.kind, code=info.code)
    if info.kind == POLICY_RECURSION:
        log.error("rls_policy_recursion", table=info.table, error=str(exc))
    else:
        log.error("database_error", error=str(exc))
    return DatabaseError(info, entity=entity)
