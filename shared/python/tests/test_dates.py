"""
tests/test_dates.py — Tests for database value preparation and date display.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from uuid import UUID

from cleanerp_shared.dates import (
    format_date,
    parse_db_datetime,
    prepare_object_for_db,
    to_iso_string,
    utc_now_iso,
)


class Colour(Enum):
    RED = "red"


class TestPrepareObjectForDb:
    def test_naive_datetime_taken_as_utc(self):
        result = prepare_object_for_db({"scheduled_start": datetime(2024, 3, 1, 9, 30)})
        assert result == {"scheduled_start": "2024-03-01T09:30:00.000Z"}

    def test_aware_datetime_converted_to_utc(self):
        aest = timezone(timedelta(hours=10))
        result = prepare_object_for_db({"due": datetime(2024, 3, 1, 19, 30, tzinfo=aest)})
        assert result["due"] == "2024-03-01T09:30:00.000Z"

    def test_date_becomes_iso_day(self):
        assert prepare_object_for_db({"start_date": date(2024, 7, 1)}) == {"start_date": "2024-07-01"}

    def test_none_removed_from_mappings(self):
        assert prepare_object_for_db({"a": 1, "notes": None}) == {"a": 1}

    def test_none_kept_inside_lists(self):
        assert prepare_object_for_db({"values": [1, None, 2]}) == {"values": [1, None, 2]}

    def test_scalar_types(self):
        uid = UUID("12345678-1234-5678-1234-567812345678")
        result = prepare_object_for_db({"id": uid, "colour": Colour.RED, "fee": Decimal("1.50")})
        assert result == {"id": str(uid), "colour": "red", "fee": 1.5}

    def test_nested_structures_walked(self):
        result = prepare_object_for_db({"items": [{"when": date(2024, 1, 2), "skip": None}]})
        assert result == {"items": [{"when": "2024-01-02"}]}

    def test_falsy_input_returned_as_is(self):
        assert prepare_object_for_db(None) is None
        assert prepare_object_for_db({}) == {}

    def test_input_not_mutated(self):
        original = {"start_date": date(2024, 7, 1), "notes": None}
        prepare_object_for_db(original)
        assert original == {"start_date": date(2024, 7, 1), "notes": None}


def test_to_iso_string_millisecond_precision():
    assert to_iso_string(datetime(2024, 3, 1, 9, 30, 0, 123456)) == "2024-03-01T09:30:00.123Z"


def test_utc_now_iso_format():
    value = utc_now_iso()
    assert value.endswith("Z")
    assert len(value) == len("2024-03-01T09:30:00.000Z")


class TestParseAndFormat:
    def test_parse_iso_with_zulu(self):
        parsed = parse_db_datetime("2024-03-01T09:30:00.000Z")
        assert parsed == datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)

    def test_parse_empty(self):
        assert parse_db_datetime(None) is None
        assert parse_db_datetime("") is None

    def test_parse_date_object(self):
        assert parse_db_datetime(date(2024, 1, 5)) == datetime(2024, 1, 5)

    def test_format_default(self):
        assert format_date("2024-03-01") == "01 Mar 2024"

    def test_format_custom(self):
        assert format_date(date(2024, 3, 1), "%Y/%m/%d") == "2024/03/01"

    def test_format_missing(self):
        assert format_date(None) == "N/A"
        assert format_date("") == "N/A"

    def test_format_invalid(self):
        assert format_date("not a date") == "Invalid date"
