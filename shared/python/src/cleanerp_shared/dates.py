"""
dates.py — Date serialisation for database writes and parsing for reads.

Supabase REST accepts dates as ISO-8601 strings, so every payload goes
through prepare_object_for_db() before it is sent:

    prepare_object_for_db({"start_date": date(2024, 7, 1), "notes": None})
    # {"start_date": "2024-07-01"}

    prepare_object_for_db({"scheduled_start": datetime(2024, 7, 1, 9, 30)})
    # {"scheduled_start": "2024-07-01T09:30:00.000Z"}

Null values are dropped from mappings so the database keeps its default
(on insert) or the existing value (on update).
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

import structlog
from dateutil import parser as date_parser

log = structlog.get_logger(__name__)

DEFAULT_DISPLAY_FORMAT = "%d %b %Y"


def to_iso_string(value: datetime) -> str:
    """Render a datetime in UTC with millisecond precision and a Z suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"


def utc_now_iso() -> str:
    return to_iso_string(datetime.now(timezone.utc))


def _prepare_value(value: Any) -> Any:
    # datetime is a subclass of date: check it first
    if isinstance(value, datetime):
        return to_iso_string(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Mapping):
        return {k: _prepare_value(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_prepare_value(v) for v in value]
    return value


def prepare_object_for_db(obj: Any) -> Any:
    """
    Return a copy of obj that the Supabase client can serialise.

    - datetime → ISO-8601 UTC string, date → YYYY-MM-DD
    - UUID → str, Enum → value, Decimal → float
    - None values removed from mappings (kept inside lists)
    - nested mappings and lists are walked recursively

    Falsy input (None, empty dict) is returned unchanged.
    """
    if not obj:
        return obj
    return _prepare_value(obj)


def parse_db_datetime(value: str | date | datetime | None) -> datetime | None:
    """Parse a timestamp or date coming back from the database."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return date_parser.isoparse(value)


def format_date(
    value: str | date | datetime | None,
    fmt: str = DEFAULT_DISPLAY_FORMAT,
) -> str:
    """Human-readable date, "N/A" when missing, "Invalid date" when unparseable."""
    if not value:
        return "N/A"
    try:
        parsed = parse_db_datetime(value)
    except (ValueError, OverflowError) as exc:
        log.debug("date_format_failed", value=str(value), error=str(exc))
        return "Invalid date"
    return parsed.strftime(fmt) if parsed else "N/A"
