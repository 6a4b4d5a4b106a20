"""FastAPI application factory."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cleanerp_shared import __version__
from cleanerp_shared.config import settings
from cleanerp_shared.log_config import configure_logging
from cleanerp_shared.models import error_location

from cleanerp_api.errors import DatabaseError, RecordNotFoundError, RecordValidationError
from cleanerp_api.middleware.logging import LoggingMiddleware
from cleanerp_api.responses import error_response
from cleanerp_api.routers.health import router as health_router
from cleanerp_api.routers.v1 import v1_router

logger = structlog.get_logger(__name__)

_HTTP_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    422: "validation_error",
}


def _field_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [
        {
            "loc": [str(p) for p in error_location(e.get("loc"))],
            "msg": e.get("msg"),
            "type": e.get("type"),
        }
        for e in errors
    ]


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RecordNotFoundError)
    async def _not_found(request: Request, exc: RecordNotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content=error_response("not_found", str(exc), details={"id": exc.record_id}),
        )

    @app.exception_handler(RecordValidationError)
    async def _invalid_record(request: Request, exc: RecordValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=error_response(
                "validation_error",
                str(exc),
                details={"model": exc.model, "errors": _field_errors(exc.errors)},
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=error_response(
                "validation_error",
                "Request validation failed",
                details={"errors": _field_errors(list(exc.errors()))},
            ),
        )

    @app.exception_handler(DatabaseError)
    async def _database_error(request: Request, exc: DatabaseError) -> JSONResponse:
        details = {"kind": exc.info.kind}
        if exc.info.code:
            details["code"] = exc.info.code
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.info.kind, exc.info.message, details=details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(_HTTP_CODES.get(exc.status_code, "error"), str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="CleanERP API",
        description="Operations, HR and sales backend for contract cleaning services",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Custom middleware (order matters: last added = first executed)
    app.add_middleware(LoggingMiddleware)

    register_exception_handlers(app)

    # Routers
    app.include_router(health_router)
    app.include_router(v1_router)

    logger.info("app_created", cors_origins=settings.cors_origins_list)
    return app


app = create_app()
