"""Employee (HR) endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from cleanerp_shared.models import EmployeeCreate, EmployeeUpdate

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
from cleanerp_api.services import employee_service
from cleanerp_api.utils.pagination import build_links

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("")
async def list_employees(
    pagination: PaginationParams = Depends(),
    q: str | None = Query(None, description="Search name, email or job title"),
    department: str | None = Query(None),
    status: str | None = Query(None),
    employment_type: str | None = Query(None),
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data, total = employee_service.search_employees(
        q=q,
        department=department,
        status=status,
        employment_type=employment_type,
        sort_by=pagination.sort_by,
        descending=pagination.descending,
        page_size=pagination.page_size,
        offset=pagination.offset,
    )
    links = build_links(
        "/v1/employees",
        {"q": q, "department": department, "status": status, "employment_type": employment_type},
        pagination,
        total,
    )
    return wrap_response(
        data, total_count=total, page=pagination.page, page_size=pagination.page_size,
        links=links, case=case,
    )


@router.get("/departments")
async def list_departments(_user: AuthUser = Depends(require_auth)):
    return wrap_response(employee_service.list_departments())


@router.get("/{employee_id}")
async def get_employee(
    employee_id: str,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = employee_service.get_employee(employee_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Employee not found")
    return wrap_response(data, case=case)


@router.post("", status_code=201)
async def create_employee(
    body: EmployeeCreate,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_staff),
):
    return wrap_response(employee_service.create_employee(body), case=case)


@router.patch("/{employee_id}")
async def update_employee(
    employee_id: str,
    body: EmployeeUpdate,
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_staff),
):
    return wrap_response(employee_service.update_employee(employee_id, body), case=case)


@router.delete("/{employee_id}", status_code=204)
async def delete_employee(employee_id: str, _user: AuthUser = Depends(require_manager)):
    employee_service.delete_employee(employee_id)
    return Response(status_code=204)
