"""
models/sales.py — Pydantic models for leads, quotes and quote_line_items.
"""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import EmailStr, Field, model_validator

from cleanerp_shared.billing import round_currency
from cleanerp_shared.constants import LeadSource, LeadStage, LeadStatus, QuoteStatus
from cleanerp_shared.models.base import DbModel, UpdateModel


# ---------------------------------------------------------------------------
# Leads
# ---------------------------------------------------------------------------

class LeadCreate(DbModel):
    """Insert payload for the leads table."""

    lead_name: str = Field(min_length=1, max_length=100)
    company_name: str = Field(min_length=1, max_length=100)
    contact_name: str | None = None
    contact_email: EmailStr | None = None
    contact_phone: str | None = None
    potential_value: float = Field(default=0, ge=0)
    stage: LeadStage = "Discovery"
    status: LeadStatus = "Open"
    next_action: str | None = None
    next_action_date: date | None = None
    notes: str | None = None
    created_by: str = Field(min_length=1)
    source: LeadSource | None = None
    converted_client_id: UUID | None = None
    converted_quote_id: UUID | None = None


class LeadUpdate(UpdateModel):
    lead_name: str | None = Field(default=None, min_length=1, max_length=100)
    company_name: str | None = Field(default=None, min_length=1, max_length=100)
    contact_name: str | None = None
    contact_email: EmailStr | None = None
    contact_phone: str | None = None
    potential_value: float | None = Field(default=None, ge=0)
    stage: LeadStage | None = None
    status: LeadStatus | None = None
    next_action: str | None = None
    next_action_date: date | None = None
    notes: str | None = None
    source: LeadSource | None = None
    converted_client_id: UUID | None = None
    converted_quote_id: UUID | None = None


class Lead(LeadCreate):
    """Matches the leads table row."""

    id: UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------------

class QuoteCreate(DbModel):
    """Insert payload for the quotes table."""

    quote_number: str = Field(min_length=1, max_length=50)
    client_id: UUID | None = None
    lead_id: UUID | None = None
    issue_date: date
    valid_until: date
    status: QuoteStatus = "Draft"
    service_description: str = Field(min_length=1)
    total_amount: float = Field(default=0, ge=0)
    internal_cost_estimate: float | None = Field(default=None, ge=0)
    notes: str | None = None
    service_request_id: UUID | None = None
    converted_contract_id: UUID | None = None
    converted_work_order_id: UUID | None = None
    created_by: str = Field(min_length=1)

    @model_validator(mode="after")
    def _valid_after_issue(self) -> "QuoteCreate":
        if self.valid_until < self.issue_date:
            raise ValueError("valid_until must not be before issue_date")
        return self


class QuoteUpdate(UpdateModel):
    quote_number: str | None = Field(default=None, min_length=1, max_length=50)
    client_id: UUID | None = None
    lead_id: UUID | None = None
    issue_date: date | None = None
    valid_until: date | None = None
    status: QuoteStatus | None = None
    service_description: str | None = Field(default=None, min_length=1)
    total_amount: float | None = Field(default=None, ge=0)
    internal_cost_estimate: float | None = Field(default=None, ge=0)
    notes: str | None = None
    converted_contract_id: UUID | None = None
    converted_work_order_id: UUID | None = None


class Quote(QuoteCreate):
    """Matches the quotes table row."""

    id: UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None


class QuoteLineItemCreate(DbModel):
    description: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    unit_price: float = Field(ge=0)
    amount: float | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _default_amount(self) -> "QuoteLineItemCreate":
        if self.amount is None:
            self.amount = round_currency(self.quantity * self.unit_price)
        return self


class QuoteLineItemUpdate(UpdateModel):
    description: str | None = Field(default=None, min_length=1)
    quantity: float | None = Field(default=None, gt=0)
    unit_price: float | None = Field(default=None, ge=0)
    amount: float | None = Field(default=None, ge=0)


class QuoteLineItem(QuoteLineItemCreate):
    """Matches the quote_line_items table row."""

    id: UUID | None = None
    quote_id: UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None
