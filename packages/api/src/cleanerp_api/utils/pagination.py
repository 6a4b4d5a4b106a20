"""Page-based pagination and sorting helpers."""

from __future__ import annotations

from typing import Any, Literal
from urllib.parse import urlencode

from fastapi import Query

from cleanerp_shared.config import settings


class PaginationParams:
    """Dependency for extracting pagination and sort query params."""

    def __init__(
        self,
        page: int = Query(1, ge=1, description="1-based page number"),
        page_size: int = Query(
            settings.default_page_size,
            ge=1,
            le=500,
            description="Number of results per page",
        ),
        sort_by: str | None = Query(None, description="Column to sort by"),
        sort_order: Literal["asc", "desc"] = Query("asc", description="asc or desc"),
    ) -> None:
        self.page = page
        self.page_size = min(page_size, settings.max_page_size)
        self.sort_by = sort_by
        self.sort_order = sort_order

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def descending(self) -> bool:
        return self.sort_order == "desc"

    def as_query(self) -> dict[str, Any]:
        return {
            "page_size": self.page_size,
            "sort_by": self.sort_by,
            "sort_order": self.sort_order,
        }


def _link(path: str, params: dict[str, Any]) -> str:
    query = urlencode({k: v for k, v in params.items() if v is not None})
    return f"{path}?{query}" if query else path


def build_links(
    path: str,
    params: dict[str, Any],
    pagination: PaginationParams,
    total_count: int | None,
) -> dict[str, str]:
    """Build self/next/prev links for a paginated response."""
    base = {**params, **pagination.as_query()}
    links: dict[str, str] = {"self": _link(path, {**base, "page": pagination.page})}

    if total_count is not None and pagination.offset + pagination.page_size < total_count:
        links["next"] = _link(path, {**base, "page": pagination.page + 1})
    if pagination.page > 1:
        links["prev"] = _link(path, {**base, "page": pagination.page - 1})

    return links
