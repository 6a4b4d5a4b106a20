"""Standardized API response wrappers."""

from __future__ import annotations

from typing import Any, Generic, Literal, TypeVar

from fastapi import Query
from pydantic import BaseModel, Field

from cleanerp_shared.mappers import map_from_db

T = TypeVar("T")

KeyCase = Literal["snake", "camel"]


class ResponseMeta(BaseModel):
    total_count: int | None = None
    page: int | None = None
    page_size: int | None = None


class ApiResponse(BaseModel, Generic[T]):
    data: T
    meta: ResponseMeta = Field(default_factory=ResponseMeta)
    links: dict[str, str] = Field(default_factory=dict)


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class ApiError(BaseModel):
    error: ErrorDetail


def response_case(
    case: KeyCase = Query("snake", description="Key style of the response body"),
) -> KeyCase:
    return case


def _apply_case(data: Any, case: KeyCase) -> Any:
    if case != "camel":
        return data
    if isinstance(data, list):
        return [map_from_db(item) if isinstance(item, dict) else item for item in data]
    if isinstance(data, dict):
        return map_from_db(data)
    return data


def wrap_response(
    data: Any,
    *,
    total_count: int | None = None,
    page: int | None = None,
    page_size: int | None = None,
    links: dict[str, str] | None = None,
    case: KeyCase = "snake",
) -> dict[str, Any]:
    """Build a standardized API response dict."""
    meta = {
        "total_count": total_count,
        "page": page,
        "page_size": page_size,
    }
    return {
        "data": _apply_case(data, case),
        "meta": {k: v for k, v in meta.items() if v is not None},
        "links": links or {},
    }


def error_response(
    code: str,
    message: str,
    *,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a standardized error response dict."""
    err: dict[str, Any] = {"code": code, "message": message}
    if details:
        err["details"] = details
    return {"error": err}
