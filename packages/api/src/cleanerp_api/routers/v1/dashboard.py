"""Dashboard endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from cleanerp_api.dependencies import AuthUser, KeyCase, require_auth, response_case
from cleanerp_api.responses import wrap_response
from cleanerp_api.services import dashboard_service

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats")
async def dashboard_stats(
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    return wrap_response(dashboard_service.get_dashboard_stats(), case=case)


@router.get("/expiring-contracts")
async def expiring_contracts(
    days: int = Query(30, ge=1, le=365),
    limit: int = Query(5, ge=1, le=100),
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = dashboard_service.get_expiring_contracts(days=days, limit=limit)
    return wrap_response(data, total_count=len(data), case=case)


@router.get("/pending-work-orders")
async def pending_work_orders(
    limit: int = Query(5, ge=1, le=100),
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = dashboard_service.get_pending_work_orders(limit=limit)
    return wrap_response(data, total_count=len(data), case=case)


@router.get("/map-locations")
async def map_locations(
    case: KeyCase = Depends(response_case),
    _user: AuthUser = Depends(require_auth),
):
    data = dashboard_service.get_map_locations()
    return wrap_response(data, total_count=len(data), case=case)


@router.get("/work-order-summary")
async def work_order_summary(_user: AuthUser = Depends(require_auth)):
    return wrap_response(dashboard_service.get_work_order_status_summary())
