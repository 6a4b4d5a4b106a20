"""
mappers.py — snake_case ⇄ camelCase key mapping between API payloads and rows.

Database columns are snake_case; clients of the API may speak camelCase.

    map_to_db({"siteName": "HQ", "serviceStartDate": date(2024, 1, 8)})
    # {"site_name": "HQ", "service_start_date": "2024-01-08"}

    map_from_db({"site_name": "HQ", "client": {"company_name": "Acme"}})
    # {"siteName": "HQ", "client": {"companyName": "Acme"}}
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any

from cleanerp_shared.dates import prepare_object_for_db

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")
_UNDERSCORE_WORD = re.compile(r"(?<=[^_])_+([A-Za-z\d])")


def to_snake_case(name: str) -> str:
    """Convert 'siteName' or 'HTTPStatus' to 'site_name' / 'http_status'."""
    s = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    s = _WORD_BOUNDARY.sub(r"\1_\2", s)
    return s.replace("-", "_").replace(" ", "_").lower()


def to_camel_case(name: str) -> str:
    """Convert 'site_name' to 'siteName'. Leading underscores are kept."""
    return _UNDERSCORE_WORD.sub(lambda m: m.group(1).upper(), name)


def _transform_keys(data: Any, convert: Callable[[str], str]) -> Any:
    if isinstance(data, Mapping):
        return {
            (convert(k) if isinstance(k, str) else k): _transform_keys(v, convert)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [_transform_keys(item, convert) for item in data]
    return data


def map_to_db(data: Mapping[str, Any]) -> dict[str, Any]:
    """Prepare dates/nulls for the database, then snake_case every key."""
    return _transform_keys(prepare_object_for_db(data), to_snake_case)


def map_from_db(data: Mapping[str, Any]) -> dict[str, Any]:
    """camelCase every key of a database row, nested relations included."""
    return _transform_keys(data, to_camel_case)


def map_many_from_db(rows: Any) -> list[dict[str, Any]]:
    if not isinstance(rows, list):
        return []
    return [map_from_db(row) for row in rows if isinstance(row, Mapping)]
