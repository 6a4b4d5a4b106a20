"""Quote endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from cleanerp_shared.models import (
    QuoteCreate,
    QuoteLineItemCreate,
    QuoteLineItemUpdate,
    QuoteUpdate,
)

from cleanerp_api.dependencies import (
    AuthUser,
    KeyCase,
    require_auth,
    require_manager,
    require_staff,
    response_case,
)
from cleanerp_api.responses import wrap_response
from cleanerp_api.services import quote_service

router = APIRouter(prefix="/quotes", tags=["sales"])


class QuoteCreateRequest(QuoteCreate):
    line_items: list[QuoteLineItemCreate] | None = None


@router.get("")
async def list_quotes(
    q: str | None = Query(None, description="Search quote number or description"),
    client_id: str | None = Query(None),
    lead_id: str | None = Query(None),
    status: str | None = Query(None),
    from_date: date | None = Query(None),
    to_date: date | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = quote_service.search_quotes(
        q=q, client_id=client_id, lead_id=lead_id, status=status,
        from_date=from_date, to_date=to_date, limit=limit,
    )
    return wrap_response(data, total_count=len(data), page_size=limit, case=case)


@router.get("/statuses")
async def list_quote_statuses(_user: AuthUser = Depends(require_auth)):
    return wrap_response(quote_service.list_statuses())


@router.get("/{quote_id}")
async def get_quote(
    quote_id: str,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = quote_service.get_quote(quote_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Quote not found")
    return wrap_response(data, case=case)


@router.post("", status_code=201)
async def create_quote(
    body: QuoteCreateRequest,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_staff),
):
    quote = QuoteCreate.model_validate(body.model_dump(exclude={"line_items"}))
    data = quote_service.create_quote(
        quote, line_items=[i.model_dump() for i in body.line_items or []]
    )
    return wrap_response(data, case=case)


@router.patch("/{quote_id}")
async def update_quote(
    quote_id: str,
    body: QuoteUpdate,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_staff),
):
    return wrap_response(quote_service.update_quote(quote_id, body), case=case)


@router.delete("/{quote_id}", status_code=204)
async def delete_quote(quote_id: str, _user: AuthUser = Depends(require_manager)):
    quote_service.delete_quote(quote_id)
    return Response(status_code=204)


@router.get("/{quote_id}/line-items")
async def list_line_items(
    quote_id: str,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = quote_service.list_line_items(quote_id)
    return wrap_response(data, total_count=len(data), case=case)


@router.post("/{quote_id}/line-items", status_code=201)
async def add_line_item(
    quote_id: str,
    body: QuoteLineItemCreate,
    _user: AuthUser = Depends(require_staff),
):
    return wrap_response(quote_service.add_line_item(quote_id, body.model_dump()))


@router.patch("/{quote_id}/line-items/{item_id}")
async def update_line_item(
    quote_id: str,
    item_id: str,
    body: QuoteLineItemUpdate,
    _user: AuthUser = Depends(require_staff),
):
    data = quote_service.update_line_item(quote_id, item_id, body.model_dump(exclude_unset=True))
    return wrap_response(data)


@router.delete("/{quote_id}/line-items/{item_id}", status_code=204)
async def delete_line_item(
    quote_id: str,
    item_id: str,
    _user: AuthUser = Depends(require_staff),
):
    quote_service.delete_line_item(quote_id, item_id)
    return Response(status_code=204)
