"""
tests/test_retry.py — Tests for the tenacity retry helpers.
"""

from __future__ import annotations

import httpx
import pytest
from postgrest.exceptions import APIError

from cleanerp_pipeline.utils.retry import is_transient_error, retrying


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (httpx.ConnectError("refused"), True),
        (httpx.ReadTimeout("slow"), True),
        (APIError({"message": "canceling statement due to statement timeout", "code": "57014"}), True),
        (APIError({"message": "deadlock detected", "code": "40P01"}), True),
        (APIError({"message": "duplicate key value", "code": "23505"}), False),
        (ValueError("bad"), False),
    ],
)
def test_is_transient_error(exc, expected):
    assert is_transient_error(exc) is expected


def test_retrying_succeeds_after_transient_failures():
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise httpx.ConnectError("down")
        return "ok"

    assert retrying(max_attempts=3, base_delay=0)(flaky) == "ok"
    assert len(calls) == 3


def test_retrying_reraises_non_transient_immediately():
    calls = []

    def broken():
        calls.append(1)
        raise ValueError("bad input")

    with pytest.raises(ValueError):
        retrying(max_attempts=5, base_delay=0)(broken)
    assert len(calls) == 1


def test_retrying_reraises_last_error():
    def down():
        raise httpx.ConnectError("still down")

    with pytest.raises(httpx.ConnectError, match="still down"):
        retrying(max_attempts=2, base_delay=0)(down)


def test_retrying_custom_predicate():
    calls = []

    def conflict():
        calls.append(1)
        raise APIError({"message": "duplicate key value", "code": "23505"})

    with pytest.raises(APIError):
        retrying(max_attempts=2, base_delay=0, retry_if=lambda exc: True)(conflict)
    assert len(calls) == 2
