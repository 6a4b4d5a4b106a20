"""Client endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from cleanerp_shared.models import ClientCreate, ClientUpdate, ContactCreate

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
from cleanerp_api.services import client_service, site_service
from cleanerp_api.utils.pagination import build_links

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("")
async def list_clients(
    pagination: PaginationParams = Depends(),
    q: str | None = Query(None, description="Search company, contact, email or city"),
    status: str | None = Query(None),
    industry: str | None = Query(None),
    region: str | None = Query(None),
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data, total = client_service.search_clients(
        q=q,
        status=status,
        industry=industry,
        region=region,
        sort_by=pagination.sort_by,
        descending=pagination.descending,
        page_size=pagination.page_size,
        offset=pagination.offset,
    )
    links = build_links(
        "/v1/clients",
        {"q": q, "status": status, "industry": industry, "region": region},
        pagination,
        total,
    )
    return wrap_response(
        data, total_count=total, page=pagination.page, page_size=pagination.page_size,
        links=links, case=case,
    )


@router.get("/industries")
async def list_industries(_user: AuthUser = Depends(require_auth)):
    return wrap_response(client_service.list_industries())


@router.get("/regions")
async def list_regions(_user: AuthUser = Depends(require_auth)):
    return wrap_response(client_service.list_regions())


@router.get("/statuses")
async def list_statuses(_user: AuthUser = Depends(require_auth)):
    return wrap_response(client_service.list_statuses())


@router.get("/{client_id}")
async def get_client(
    client_id: str,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = client_service.get_client(client_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Client not found")
    return wrap_response(data, case=case)


@router.post("", status_code=201)
async def create_client(
    body: ClientCreate,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_staff),
):
    return wrap_response(client_service.create_client(body), case=case)


@router.patch("/{client_id}")
async def update_client(
    client_id: str,
    body: ClientUpdate,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_staff),
):
    return wrap_response(client_service.update_client(client_id, body), case=case)


@router.delete("/{client_id}", status_code=204)
async def delete_client(client_id: str, _user: AuthUser = Depends(require_manager)):
    client_service.delete_client(client_id)
    return Response(status_code=204)


@router.get("/{client_id}/sites")
async def list_client_sites(
    client_id: str,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = site_service.list_sites_for_client(client_id)
    return wrap_response(data, total_count=len(data), case=case)


@router.get("/{client_id}/contacts")
async def list_client_contacts(
    client_id: str,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = client_service.list_client_contacts(client_id)
    return wrap_response(data, total_count=len(data), case=case)


@router.post("/{client_id}/contacts", status_code=201)
async def add_client_contact(
    client_id: str,
    body: ContactCreate,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_staff),
):
    data = client_service.add_client_contact(
        client_id, body.model_dump(exclude={"client_id"}, exclude_none=True)
    )
    return wrap_response(data, case=case)
