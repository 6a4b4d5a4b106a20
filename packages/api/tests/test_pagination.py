"""Tests for pagination parameters and link building."""

from __future__ import annotations

from cleanerp_api.responses import wrap_response
from cleanerp_api.utils.filtering import apply_text_search, is_filter_value
from cleanerp_api.utils.pagination import PaginationParams, build_links


def _params(page=1, page_size=20, sort_by=None, sort_order="asc") -> PaginationParams:
    return PaginationParams(page=page, page_size=page_size, sort_by=sort_by, sort_order=sort_order)


def test_offset_and_descending():
    params = _params(page=3, page_size=10, sort_order="desc")
    assert params.offset == 20
    assert params.descending


def test_links_first_page():
    links = build_links("/v1/sites", {"q": "tower", "status": None}, _params(page_size=10), 25)
    assert links["self"] == "/v1/sites?q=tower&page_size=10&sort_order=asc&page=1"
    assert links["next"].endswith("page=2")
    assert "prev" not in links


def test_links_last_page():
    links = build_links("/v1/sites", {}, _params(page=3, page_size=10), 25)
    assert "next" not in links
    assert links["prev"].endswith("page=2")


def test_links_without_count_have_no_next():
    links = build_links("/v1/sites", {}, _params(), None)
    assert set(links) == {"self"}


def test_wrap_response_drops_empty_meta():
    body = wrap_response([{"site_name": "HQ"}], total_count=0, case="camel")
    assert body == {"data": [{"siteName": "HQ"}], "meta": {"total_count": 0}, "links": {}}


def test_page_size_over_limit_rejected(client):
    response = client.get("/v1/clients?page_size=501")
    assert response.status_code == 422


def test_is_filter_value():
    assert is_filter_value("Active")
    assert not is_filter_value(None)
    assert not is_filter_value("all")
    assert not is_filter_value("  ALL-STATUSES ")


def test_text_search_strips_reserved_characters():
    calls = []

    class Query:
        def or_(self, expr):
            calls.append(expr)
            return self

    apply_text_search(Query(), ("a", "b"), "x,(y)")
    assert calls == ["a.ilike.%x  y %,b.ilike.%x  y %"]
