"""Sales lead endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from cleanerp_shared.models import LeadCreate, LeadUpdate

from cleanerp_api.dependencies import (
    AuthUser,
    KeyCase,
    require_auth,
    require_manager,
    require_staff,
    response_case,
)
from cleanerp_api.responses import wrap_response
from cleanerp_api.services import lead_service

router = APIRouter(prefix="/leads", tags=["sales"])


@router.get("")
async def list_leads(
    q: str | None = Query(None, description="Search lead, company or contact name"),
    stage: str | None = Query(None),
    status: str | None = Query(None),
    source: str | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = lead_service.search_leads(q=q, stage=stage, status=status, source=source, limit=limit)
    return wrap_response(data, total_count=len(data), page_size=limit, case=case)


@router.get("/enums")
async def lead_enums(_user: AuthUser = Depends(require_auth)):
    return wrap_response(lead_service.list_enums())


@router.get("/{lead_id}")
async def get_lead(
    lead_id: str,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = lead_service.get_lead(lead_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Lead not found")
    return wrap_response(data, case=case)


@router.post("", status_code=201)
async def create_lead(
    body: LeadCreate,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_staff),
):
    return wrap_response(lead_service.create_lead(body), case=case)


@router.patch("/{lead_id}")
async def update_lead(
    lead_id: str,
    body: LeadUpdate,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_staff),
):
    return wrap_response(lead_service.update_lead(lead_id, body), case=case)


@router.delete("/{lead_id}", status_code=204)
async def delete_lead(lead_id: str, _user: AuthUser = Depends(require_manager)):
    lead_service.delete_lead(lead_id)
    return Response(status_code=204)
