"""
utils/retry.py — Exponential-backoff retries for Supabase writes.

Uses tenacity under the hood. Logs each retried attempt with structlog so
transient failures are visible without aborting an import.

Usage:
    from cleanerp_pipeline.utils.retry import retrying

    controller = retrying(max_attempts=3, base_delay=1.0)
    controller(lambda: client.table("sites").insert(rows).execute())
"""

from __future__ import annotations

from collections.abc import Callable

import httpx
import structlog
from postgrest.exceptions import APIError
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

log = structlog.get_logger(__name__)

# Postgres statement timeout / serialization failure / deadlock
_TRANSIENT_PG_CODES = frozenset({"57014", "40001", "40P01"})


def is_transient_error(exc: BaseException) -> bool:
    """True for network failures and database errors worth retrying."""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, APIError):
        if exc.code in _TRANSIENT_PG_CODES:
            return True
        message = (exc.message or "").lower()
        return "timeout" in message or "timed out" in message
    return False


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    log.warning(
        "retry_attempt",
        function=getattr(state.fn, "__qualname__", None),
        attempt=state.attempt_number,
        error=str(exc) if exc else None,
    )


def retrying(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    retry_if: Callable[[BaseException], bool] = is_transient_error,
) -> Retrying:
    """
    Build a tenacity Retrying controller.

    Delays: base_delay * 2^(attempt-1), capped at max_delay. The last
    exception is re-raised once max_attempts is exhausted.
    """
    return Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=base_delay, max=max_delay),
        retry=retry_if_exception(retry_if),
        before_sleep=_log_retry,
        reraise=True,
    )

