"""
Utility / metadata endpoints.

Serves /v1/meta/enums, the fixed value sets the database enforces, so
front-end selectors and imports validate against the same lists.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from cleanerp_shared.billing import CONVERSION_FACTORS
from cleanerp_shared.constants import ENUMERATIONS

from cleanerp_api.responses import wrap_response

router = APIRouter(prefix="/meta", tags=["meta"])

_CACHE = {"Cache-Control": "max-age=3600"}


@router.get("/enums", summary="All enumerations")
async def list_enums() -> JSONResponse:
    data = {name: list(values) for name, values in ENUMERATIONS.items()}
    return JSONResponse(content=wrap_response(data), headers=_CACHE)


@router.get("/enums/{name}", summary="One enumeration by name")
async def get_enum(name: str) -> JSONResponse:
    values = ENUMERATIONS.get(name)
    if values is None:
        raise HTTPException(status_code=404, detail=f"Unknown enumeration '{name}'")
    return JSONResponse(content=wrap_response(list(values)), headers=_CACHE)


@router.get("/billing-factors", summary="Weeks per billing period")
async def billing_factors() -> JSONResponse:
    return JSONResponse(content=wrap_response(dict(CONVERSION_FACTORS)), headers=_CACHE)
