"""Contract endpoints."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from cleanerp_shared.models import ContractCreate, ContractUpdate
from cleanerp_shared.models.base import DbModel

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
from cleanerp_api.services import contract_service
from cleanerp_api.utils.pagination import build_links

router = APIRouter(prefix="/contracts", tags=["contracts"])


class ContractCreateRequest(ContractCreate):
    site_ids: list[UUID] | None = None


class ContractUpdateRequest(ContractUpdate):
    site_ids: list[UUID] | None = None


class SiteLinkRequest(DbModel):
    site_id: UUID


class SiteIdsRequest(DbModel):
    site_ids: list[UUID]


def _site_ids(ids: list[UUID] | None) -> list[str] | None:
    return [str(i) for i in ids] if ids is not None else None


@router.get("")
async def list_contracts(
    pagination: PaginationParams = Depends(),
    q: str | None = Query(None, description="Search number, scope or type"),
    client_id: str | None = Query(None),
    status: str | None = Query(None),
    contract_type: str | None = Query(None),
    from_date: date | None = Query(None, description="Earliest start_date"),
    to_date: date | None = Query(None, description="Latest end_date"),
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data, total = contract_service.search_contracts(
        q=q,
        client_id=client_id,
        status=status,
        contract_type=contract_type,
        from_date=from_date,
        to_date=to_date,
        sort_by=pagination.sort_by,
        descending=pagination.descending,
        page_size=pagination.page_size,
        offset=pagination.offset,
    )
    links = build_links(
        "/v1/contracts",
        {
            "q": q, "client_id": client_id, "status": status, "contract_type": contract_type,
            "from_date": from_date, "to_date": to_date,
        },
        pagination,
        total,
    )
    return wrap_response(
        data, total_count=total, page=pagination.page, page_size=pagination.page_size,
        links=links, case=case,
    )


@router.get("/types")
async def list_contract_types(_user: AuthUser = Depends(require_auth)):
    return wrap_response(contract_service.list_contract_types())


@router.get("/statuses")
async def list_contract_statuses(_user: AuthUser = Depends(require_auth)):
    return wrap_response(contract_service.list_statuses())


@router.get("/{contract_id}")
async def get_contract(
    contract_id: str,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = contract_service.get_contract(contract_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Contract not found")
    return wrap_response(data, case=case)


@router.post("", status_code=201)
async def create_contract(
    body: ContractCreateRequest,
    case: KeyCase = Depends(response_case),
    user: AuthUser = Depends(require_staff),
):
    contract = ContractCreate.model_validate(body.model_dump(exclude={"site_ids"}))
    data = contract_service.create_contract(
        contract, site_ids=_site_ids(body.site_ids), changed_by=user.user_id
    )
    return wrap_response(data, case=case)


@router.patch("/{contract_id}")
async def update_contract(
    contract_id: str,
    body: ContractUpdateRequest,
    case: KeyCase = Depends(response_case),
    user: AuthUser = Depends(require_staff),
):
    changes = ContractUpdate.model_validate(
        body.model_dump(exclude_unset=True, exclude={"site_ids"})
    )
    data = contract_service.update_contract(
        contract_id, changes, site_ids=_site_ids(body.site_ids), changed_by=user.user_id
    )
    return wrap_response(data, case=case)


@router.delete("/{contract_id}", status_code=204)
async def delete_contract(contract_id: str, _user: AuthUser = Depends(require_manager)):
    contract_service.delete_contract(contract_id)
    return Response(status_code=204)


@router.get("/{contract_id}/sites")
async def list_contract_sites(
    contract_id: str,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = contract_service.list_contract_sites(contract_id)
    return wrap_response(data, total_count=len(data), case=case)


@router.post("/{contract_id}/sites", status_code=201)
async def add_contract_site(
    contract_id: str,
    body: SiteLinkRequest,
    _user: AuthUser = Depends(require_staff),
):
    return wrap_response(contract_service.add_site_to_contract(contract_id, str(body.site_id)))


@router.put("/{contract_id}/sites")
async def replace_contract_sites(
    contract_id: str,
    body: SiteIdsRequest,
    _user: AuthUser = Depends(require_staff),
):
    data = contract_service.replace_contract_sites(contract_id, _site_ids(body.site_ids) or [])
    return wrap_response(data, total_count=len(data))


@router.delete("/{contract_id}/sites/{contract_site_id}", status_code=204)
async def remove_contract_site(
    contract_id: str,
    contract_site_id: str,
    _user: AuthUser = Depends(require_staff),
):
    contract_service.remove_site_from_contract(contract_site_id)
    return Response(status_code=204)


@router.get("/{contract_id}/history")
async def list_contract_history(
    contract_id: str,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = contract_service.list_change_logs(contract_id)
    return wrap_response(data, total_count=len(data), case=case)
