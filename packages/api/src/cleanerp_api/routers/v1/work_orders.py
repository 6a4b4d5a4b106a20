"""Work order endpoints."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from cleanerp_shared.models import (
    AuditChecklistItemCreate,
    WorkOrderAssignmentCreate,
    WorkOrderCreate,
    WorkOrderUpdate,
)

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
from cleanerp_api.services import work_order_service
from cleanerp_api.utils.pagination import build_links

router = APIRouter(prefix="/work-orders", tags=["work-orders"])

_CHILDREN = {"assignments", "checklist_items"}


class WorkOrderCreateRequest(WorkOrderCreate):
    assignments: list[WorkOrderAssignmentCreate] | None = None
    checklist_items: list[AuditChecklistItemCreate] | None = None


class WorkOrderUpdateRequest(WorkOrderUpdate):
    assignments: list[WorkOrderAssignmentCreate] | None = None
    checklist_items: list[AuditChecklistItemCreate] | None = None


@router.get("")
async def list_work_orders(
    pagination: PaginationParams = Depends(),
    q: str | None = Query(None, description="Search title or description"),
    client_id: str | None = Query(None),
    site_id: str | None = Query(None),
    contract_id: str | None = Query(None),
    status: str | None = Query(None),
    category: str | None = Query(None),
    priority: str | None = Query(None),
    from_date: datetime | None = Query(None, description="Earliest scheduled_start"),
    to_date: datetime | None = Query(None, description="Latest due_date"),
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    # Newest first unless the caller picks a sort column
    descending = pagination.descending if pagination.sort_by else True
    data, total = work_order_service.search_work_orders(
        q=q,
        client_id=client_id,
        site_id=site_id,
        contract_id=contract_id,
        status=status,
        category=category,
        priority=priority,
        from_date=from_date,
        to_date=to_date,
        sort_by=pagination.sort_by,
        descending=descending,
        page_size=pagination.page_size,
        offset=pagination.offset,
    )
    links = build_links(
        "/v1/work-orders",
        {
            "q": q, "client_id": client_id, "site_id": site_id, "contract_id": contract_id,
            "status": status, "category": category, "priority": priority,
        },
        pagination,
        total,
    )
    return wrap_response(
        data, total_count=total, page=pagination.page, page_size=pagination.page_size,
        links=links, case=case,
    )


@router.get("/{work_order_id}")
async def get_work_order(
    work_order_id: str,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = work_order_service.get_work_order(work_order_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Work order not found")
    return wrap_response(data, case=case)


@router.post("", status_code=201)
async def create_work_order(
    body: WorkOrderCreateRequest,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_staff),
):
    work_order = WorkOrderCreate.model_validate(body.model_dump(exclude=_CHILDREN))
    data = work_order_service.create_work_order(
        work_order,
        assignments=[a.model_dump() for a in body.assignments or []],
        checklist_items=[i.model_dump() for i in body.checklist_items or []],
    )
    return wrap_response(data, case=case)


@router.patch("/{work_order_id}")
async def update_work_order(
    work_order_id: str,
    body: WorkOrderUpdateRequest,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_staff),
):
    changes = WorkOrderUpdate.model_validate(
        body.model_dump(exclude_unset=True, exclude=_CHILDREN)
    )
    data = work_order_service.update_work_order(
        work_order_id,
        changes,
        assignments=(
            [a.model_dump() for a in body.assignments] if body.assignments is not None else None
        ),
        checklist_items=(
            [i.model_dump() for i in body.checklist_items]
            if body.checklist_items is not None
            else None
        ),
    )
    return wrap_response(data, case=case)


@router.delete("/{work_order_id}", status_code=204)
async def delete_work_order(work_order_id: str, _user: AuthUser = Depends(require_manager)):
    work_order_service.delete_work_order(work_order_id)
    return Response(status_code=204)


@router.get("/{work_order_id}/assignments")
async def list_assignments(
    work_order_id: str,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = work_order_service.list_assignments(work_order_id)
    return wrap_response(data, total_count=len(data), case=case)


@router.post("/{work_order_id}/assignments", status_code=201)
async def add_assignments(
    work_order_id: str,
    body: list[WorkOrderAssignmentCreate],
    _user: AuthUser = Depends(require_staff),
):
    data = work_order_service.create_assignments(work_order_id, [a.model_dump() for a in body])
    return wrap_response(data, total_count=len(data))


@router.get("/{work_order_id}/checklist")
async def list_checklist_items(
    work_order_id: str,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = work_order_service.list_checklist_items(work_order_id)
    return wrap_response(data, total_count=len(data), case=case)


@router.post("/{work_order_id}/checklist", status_code=201)
async def add_checklist_items(
    work_order_id: str,
    body: list[AuditChecklistItemCreate],
    _user: AuthUser = Depends(require_staff),
):
    data = work_order_service.create_checklist_items(work_order_id, [i.model_dump() for i in body])
    return wrap_response(data, total_count=len(data))


@router.delete("/{work_order_id}/assignments", status_code=204)
async def clear_assignments(work_order_id: str, _user: AuthUser = Depends(require_staff)):
    work_order_service.delete_assignments(work_order_id)
    return Response(status_code=204)


@router.delete("/{work_order_id}/checklist", status_code=204)
async def clear_checklist_items(work_order_id: str, _user: AuthUser = Depends(require_staff)):
    work_order_service.delete_checklist_items(work_order_id)
    return Response(status_code=204)
