"""Supabase JWT authentication and role checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

import structlog
from fastapi import Depends, HTTPException, Request
from jose import JWTError
from jose import jwt as jose_jwt

from cleanerp_shared.config import settings

logger = structlog.get_logger(__name__)

Role = Literal["viewer", "staff", "manager", "admin"]

ROLE_ORDER: dict[str, int] = {
    "viewer": 0,
    "staff": 1,
    "manager": 2,
    "admin": 3,
}


@dataclass
class AuthUser:
    user_id: str
    role: Role = "viewer"
    email: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def has_role(self, min_role: str) -> bool:
        return ROLE_ORDER.get(self.role, 0) >= ROLE_ORDER.get(min_role, 0)


def _validate_jwt(token: str) -> dict[str, Any] | None:
    """Validate a Supabase JWT and return its claims."""
    try:
        return jose_jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=["HS256"],
            audience=settings.jwt_audience,
        )
    except JWTError as exc:
        logger.info("jwt_rejected", error=str(exc))
        return None


def user_from_claims(claims: dict[str, Any]) -> AuthUser:
    app_metadata = claims.get("app_metadata") or {}
    role = app_metadata.get("role", "viewer")
    if role not in ROLE_ORDER:
        role = "viewer"
    return AuthUser(
        user_id=str(claims.get("sub", "")),
        role=role,
        email=claims.get("email"),
        metadata=claims.get("user_metadata") or {},
    )


async def get_current_user(request: Request) -> AuthUser | None:
    """Extract and validate the user from the bearer token.

    Returns None if no credentials are provided.
    Raises 401 if the token is invalid or expired.
    """
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    claims = _validate_jwt(auth_header[7:])
    if claims is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    user = user_from_claims(claims)
    structlog.contextvars.bind_contextvars(user_id=user.user_id, role=user.role)
    return user


def require_role(min_role: Role = "viewer"):
    """Dependency factory that requires authentication at a minimum role."""

    async def _dependency(
        user: AuthUser | None = Depends(get_current_user),
    ) -> AuthUser:
        if user is None:
            raise HTTPException(status_code=401, detail="Authentication required")
        if not user.has_role(min_role):
            raise HTTPException(
                status_code=403,
                detail=f"This action requires the '{min_role}' role or above. "
                f"Your current role is '{user.role}'.",
            )
        return user

    return _dependency


require_auth = require_role("viewer")
require_staff = require_role("staff")
require_manager = require_role("manager")
