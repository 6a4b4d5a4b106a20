from fastapi import APIRouter

from cleanerp_api.routers import meta
from cleanerp_api.routers.v1 import (
    billing,
    clients,
    contracts,
    dashboard,
    employees,
    leads,
    quotes,
    sites,
    work_orders,
)

v1_router = APIRouter(prefix="/v1")

v1_router.include_router(clients.router)
v1_router.include_router(sites.router)
v1_router.include_router(contracts.router)
v1_router.include_router(work_orders.router)
v1_router.include_router(employees.router)
v1_router.include_router(leads.router)
v1_router.include_router(quotes.router)
v1_router.include_router(dashboard.router)
v1_router.include_router(billing.router)
v1_router.include_router(meta.router)
