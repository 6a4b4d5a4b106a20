"""
db.py — Supabase clients for the API services and the CSV importer.

The API reads and writes as the anon role, so row-level security decides
what each request may touch. Bulk imports run as the service role.

Usage:
    from cleanerp_shared.db import get_supabase_client

    supabase = get_supabase_client()                    # anon key (RLS applies)
    supabase = get_supabase_client(service_role=True)   # service key (site imports)
"""

from __future__ import annotations

import threading
from typing import Literal

import structlog
from supabase import Client, create_client

from cleanerp_shared.config import settings

logger = structlog.get_logger(__name__)

SupabaseRole = Literal["anon", "service_role"]

# Role -> Settings attribute holding its key
_ROLE_KEYS: dict[str, str] = {
    "anon": "supabase_anon_key",
    "service_role": "supabase_service_key",
}

_lock = threading.Lock()
_clients: dict[str, Client] = {}


class SupabaseConfigError(RuntimeError):
    """The key for the requested Supabase role is not configured."""

    def __init__(self, role: str, setting: str) -> None:
        self.role = role
        self.setting = setting
        super().__init__(
            f"{setting.upper()} is not set; it is required for the {role} Supabase client."
        )


def _create(role: SupabaseRole) -> Client:
    setting = _ROLE_KEYS[role]
    key = getattr(settings, setting)
    if not key:
        raise SupabaseConfigError(role, setting)
    client = create_client(settings.supabase_url, key)
    logger.info("supabase_client_created", role=role, url=settings.supabase_url)
    return client


def get_supabase_client(*, service_role: bool = False) -> Client:
    """
    Return the process-wide client for the anon or service role.

    Raises:
        SupabaseConfigError: the role's key is empty.
    """
    role: SupabaseRole = "service_role" if service_role else "anon"
    with _lock:
        client = _clients.get(role)
        if client is None:
            client = _clients[role] = _create(role)
        return client


def reset_supabase_clients() -> None:
    """Drop cached clients so the next call re-reads settings."""
    with _lock:
        _clients.clear()
