"""Thread-safe in-memory TTL cache."""

from __future__ import annotations

import threading
import time
from typing import Any


class TTLCache:
    """Simple dict-based cache with per-key TTL expiry."""

    def __init__(self, default_ttl: float = 300.0) -> None:
        self._store: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._default_ttl = default_ttl

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if time.monotonic() > expires_at:
                del self._store[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        with self._lock:
            expires_at = time.monotonic() + (ttl if ttl is not None else self._default_ttl)
            self._store[key] = (value, expires_at)

    def invalidate_prefix(self, prefix: str) -> int:
        """Drop every key starting with prefix. Returns count of dropped keys."""
        with self._lock:
            keys = [k for k in self._store if k.startswith(prefix)]
            for k in keys:
                del self._store[k]
            return len(keys)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()


# Distinct-value lookups (industries, regions, departments, contract types)
metadata_cache = TTLCache(default_ttl=600)   # 10 min
dashboard_cache = TTLCache(default_ttl=60)   # 1 min
