"""
models/clients.py — Pydantic models for the clients and contacts tables.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from cleanerp_shared.constants import ClientStatus
from cleanerp_shared.models.base import (
    PHONE_PATTERN,
    POSTCODE_PATTERN,
    DbModel,
    UpdateModel,
)


class ClientCreate(DbModel):
    """Insert payload for the clients table."""

    company_name: str = Field(min_length=2, max_length=100)
    billing_address_street: str = Field(min_length=2, max_length=100)
    billing_address_city: str = Field(min_length=2, max_length=50)
    billing_address_state: str = Field(min_length=2, max_length=50)
    billing_address_postcode: str = Field(pattern=POSTCODE_PATTERN)
    contact_name: str | None = Field(default=None, max_length=100)
    contact_phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    contact_email: EmailStr | None = None
    payment_terms: str = Field(min_length=2, max_length=50)
    status: ClientStatus = "Active"
    industry: str | None = Field(default=None, max_length=50)
    region: str | None = Field(default=None, max_length=50)
    notes: str | None = Field(default=None, max_length=500)
    business_number: str | None = Field(default=None, max_length=20)
    on_hold_reason: str | None = Field(default=None, max_length=200)


class ClientUpdate(UpdateModel):
    company_name: str | None = Field(default=None, min_length=2, max_length=100)
    billing_address_street: str | None = Field(default=None, min_length=2, max_length=100)
    billing_address_city: str | None = Field(default=None, min_length=2, max_length=50)
    billing_address_state: str | None = Field(default=None, min_length=2, max_length=50)
    billing_address_postcode: str | None = Field(default=None, pattern=POSTCODE_PATTERN)
    contact_name: str | None = Field(default=None, max_length=100)
    contact_phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    contact_email: EmailStr | None = None
    payment_terms: str | None = Field(default=None, min_length=2, max_length=50)
    status: ClientStatus | None = None
    industry: str | None = Field(default=None, max_length=50)
    region: str | None = Field(default=None, max_length=50)
    notes: str | None = Field(default=None, max_length=500)
    business_number: str | None = Field(default=None, max_length=20)
    on_hold_reason: str | None = Field(default=None, max_length=200)


class Client(ClientCreate):
    """Matches the clients table row."""

    id: UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ContactCreate(DbModel):
    client_id: UUID | None = None
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    position: str | None = None
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    email: EmailStr
    is_primary: bool | None = None
    notes: str | None = None


class Contact(ContactCreate):
    """Matches the contacts table row."""

    id: UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None
