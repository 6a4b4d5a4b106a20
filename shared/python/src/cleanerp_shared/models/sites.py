"""
models/sites.py — Pydantic models for the sites table.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import EmailStr, Field

from cleanerp_shared.constants import BillingFrequency, ServiceType, SiteStatus
from cleanerp_shared.models.base import (
    COORDINATES_PATTERN,
    PHONE_PATTERN,
    POSTCODE_PATTERN,
    DbModel,
    UpdateModel,
)


class ServiceItem(DbModel):
    """One priced service line stored in sites.service_items (jsonb)."""

    id: str | None = None
    description: str = Field(min_length=1)
    amount: float = Field(ge=0)
    frequency: BillingFrequency = "weekly"
    provider: ServiceType = "Internal"


class SiteCreate(DbModel):
    """Insert payload for the sites table."""

    client_id: UUID
    site_name: str = Field(min_length=2, max_length=100)
    site_type: str = Field(min_length=1, max_length=50)
    address_street: str = Field(min_length=2, max_length=100)
    address_city: str = Field(min_length=2, max_length=50)
    address_state: str = Field(min_length=2, max_length=50)
    address_postcode: str = Field(pattern=POSTCODE_PATTERN)
    region: str | None = None
    status: SiteStatus = "Active"
    service_type: ServiceType = "Internal"
    service_start_date: date | None = None
    service_end_date: date | None = None
    special_instructions: str | None = Field(default=None, max_length=1000)
    site_manager_id: UUID | None = None
    primary_contact: str | None = None
    contact_phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    contact_email: EmailStr | None = None
    service_frequency: str | None = None
    custom_frequency: str | None = None
    price_per_week: float | None = Field(default=None, ge=0)
    price_frequency: BillingFrequency | None = None
    coordinates: str | None = Field(default=None, pattern=COORDINATES_PATTERN)
    service_items: list[ServiceItem] | None = None


class SiteUpdate(UpdateModel):
    client_id: UUID | None = None
    site_name: str | None = Field(default=None, min_length=2, max_length=100)
    site_type: str | None = Field(default=None, min_length=1, max_length=50)
    address_street: str | None = Field(default=None, min_length=2, max_length=100)
    address_city: str | None = Field(default=None, min_length=2, max_length=50)
    address_state: str | None = Field(default=None, min_length=2, max_length=50)
    address_postcode: str | None = Field(default=None, pattern=POSTCODE_PATTERN)
    region: str | None = None
    status: SiteStatus | None = None
    service_type: ServiceType | None = None
    service_start_date: date | None = None
    service_end_date: date | None = None
    special_instructions: str | None = Field(default=None, max_length=1000)
    site_manager_id: UUID | None = None
    primary_contact: str | None = None
    contact_phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    contact_email: EmailStr | None = None
    service_frequency: str | None = None
    custom_frequency: str | None = None
    price_per_week: float | None = Field(default=None, ge=0)
    price_frequency: BillingFrequency | None = None
    coordinates: str | None = Field(default=None, pattern=COORDINATES_PATTERN)
    service_items: list[ServiceItem] | None = None


class Site(SiteCreate):
    """Matches the sites table row, optionally with its joined client."""

    id: UUID
    client: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


def parse_coordinates(raw: str | None) -> tuple[float, float] | None:
    """Parse the "lat,lng" string stored in sites.coordinates."""
    if not raw:
        return None
    parts = raw.split(",")
    if len(parts) != 2:
        return None
    try:
        return float(parts[0]), float(parts[1])
    except ValueError:
        return None
