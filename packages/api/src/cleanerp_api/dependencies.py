"""Shared FastAPI dependencies."""

from __future__ import annotations

from cleanerp_api.middleware.auth import (
    AuthUser,
    get_current_user,
    require_auth,
    require_manager,
    require_role,
    require_staff,
)
from cleanerp_api.responses import KeyCase, response_case
from cleanerp_api.utils.pagination import PaginationParams

__all__ = [
    "AuthUser",
    "KeyCase",
    "PaginationParams",
    "get_current_user",
    "require_auth",
    "require_manager",
    "require_role",
    "require_staff",
    "response_case",
]
