"""
config.py — pydantic-settings Settings class.

All environment variables for CleanERP are declared here.
Both the API and the CLI import `settings` from this module.

Usage:
    from cleanerp_shared.config import settings
    print(settings.supabase_url)
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_dotenv() -> Path | None:
    """Walk up from CWD to find the nearest .env file."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        candidate = parent / ".env"
        if candidate.is_file():
            return candidate
    return None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_find_dotenv() or ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Supabase
    # -------------------------------------------------------------------------
    supabase_url: str = Field(default="http://localhost:54321")
    supabase_anon_key: str = Field(default="")
    supabase_service_key: str = Field(default="")

    # -------------------------------------------------------------------------
    # API server
    # -------------------------------------------------------------------------
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    cors_origins: str = Field(default="http://localhost:5173,http://localhost:8080")
    jwt_secret: str = Field(default="change-me-in-production")
    jwt_audience: str = Field(default="authenticated")

    # Listing defaults
    default_page_size: int = Field(default=20)
    max_page_size: int = Field(default=500)
    search_result_limit: int = Field(default=100)

    # -------------------------------------------------------------------------
    # Billing display
    # -------------------------------------------------------------------------
    default_currency: str = Field(default="AUD")

    # -------------------------------------------------------------------------
    # Bulk import
    # -------------------------------------------------------------------------
    import_batch_size: int = Field(default=200)
    import_max_attempts: int = Field(default=3)

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["json", "console"] = Field(default="console")

    # -------------------------------------------------------------------------
    # Derived / computed
    # -------------------------------------------------------------------------
    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @field_validator("supabase_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") if isinstance(v, str) else v


# ---------------------------------------------------------------------------
# Module-level singleton, import this everywhere
# ---------------------------------------------------------------------------
settings = Settings()
