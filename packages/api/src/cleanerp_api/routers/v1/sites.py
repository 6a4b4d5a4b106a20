"""Site endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from cleanerp_shared.models import SiteCreate, SiteUpdate

from cleanerp_api.dependencies import (
    AuthUser,
    KeyCase,
    PaginationParams,
    require_auth,
    require_manager,
    require_staff,
    response_case,
)
from cleanerp_api.responses import wrap_response
from cleanerp_api.services import site_service, work_order_service
from cleanerp_api.utils.pagination import build_links

router = APIRouter(prefix="/sites", tags=["sites"])


@router.get("")
async def list_sites(
    pagination: PaginationParams = Depends(),
    q: str | None = Query(None, description="Search site name, street or city"),
    status: str | None = Query(None),
    client_id: str | None = Query(None),
    region: str | None = Query(None),
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data, total = site_service.search_sites(
        q=q,
        status=status,
        client_id=client_id,
        region=region,
        sort_by=pagination.sort_by,
        descending=pagination.descending,
        page_size=pagination.page_size,
        offset=pagination.offset,
    )
    links = build_links(
        "/v1/sites",
        {"q": q, "status": status, "client_id": client_id, "region": region},
        pagination,
        total,
    )
    return wrap_response(
        data, total_count=total, page=pagination.page, page_size=pagination.page_size,
        links=links, case=case,
    )


@router.get("/counts")
async def site_counts(
    group_by: Literal["region", "status"] = Query("status"),
    _user: AuthUser = Depends(require_auth),
):
    return wrap_response(site_service.get_site_counts(group_by))


@router.post("/bulk", status_code=201)
async def bulk_import_sites(
    body: list[SiteCreate],
    _user: AuthUser = Depends(require_staff),
):
    data = site_service.bulk_import_sites(body)
    return wrap_response(data, total_count=len(data))


@router.get("/{site_id}")
async def get_site(
    site_id: str,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = site_service.get_site(site_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Site not found")
    return wrap_response(data, case=case)


@router.get("/{site_id}/pricing")
async def get_site_pricing(site_id: str, _user: AuthUser = Depends(require_auth)):
    data = site_service.get_site_pricing(site_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Site not found")
    return wrap_response(data)


@router.get("/{site_id}/work-orders")
async def list_site_work_orders(
    site_id: str,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = work_order_service.list_work_orders_for_site(site_id)
    return wrap_response(data, total_count=len(data), case=case)


@router.post("", status_code=201)
async def create_site(
    body: SiteCreate,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_staff),
):
    return wrap_response(site_service.create_site(body), case=case)


@router.patch("/{site_id}")
async def update_site(
    site_id: str,
    body: SiteUpdate,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_staff),
):
    return wrap_response(site_service.update_site(site_id, body), case=case)


@router.delete("/{site_id}", status_code=204)
async def delete_site(site_id: str, _user: AuthUser = Depends(require_manager)):
    site_service.delete_site(site_id)
    return Response(status_code=204)
