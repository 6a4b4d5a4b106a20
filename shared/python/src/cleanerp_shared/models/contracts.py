"""
models/contracts.py — Pydantic models for contracts, contract_sites and
contract_change_logs.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import Field, model_validator

from cleanerp_shared.billing import calculate_all_billing_frequencies
from cleanerp_shared.constants import BillingFrequency, ContractStatus
from cleanerp_shared.models.base import DbModel, UpdateModel


class ContractCreate(DbModel):
    """Insert payload for the contracts table."""

    contract_number: str = Field(min_length=1, max_length=50)
    client_id: UUID
    start_date: date
    end_date: date | None = None
    billing_frequency: BillingFrequency = "monthly"
    base_fee: float = Field(ge=0)
    scope_of_work: str = Field(min_length=1)
    sla_kpi: str | None = None
    renewal_terms: str | None = None
    contract_type: str = Field(min_length=1, max_length=50)
    status: ContractStatus = "Active"
    payment_terms: str | None = None
    next_review_date: date | None = None
    under_negotiation: bool | None = None
    weekly_value: float | None = None
    monthly_value: float | None = None
    annual_value: float | None = None

    @model_validator(mode="after")
    def _end_after_start(self) -> "ContractCreate":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    def with_billing_values(self) -> "ContractCreate":
        """Fill weekly/monthly/annual values from base_fee when any is missing."""
        if self.base_fee and (
            not self.weekly_value or not self.monthly_value or not self.annual_value
        ):
            breakdown = calculate_all_billing_frequencies(
                self.base_fee, self.billing_frequency
            )
            self.weekly_value = breakdown.weekly
            self.monthly_value = breakdown.monthly
            self.annual_value = breakdown.annually
        return self


class ContractUpdate(UpdateModel):
    contract_number: str | None = Field(default=None, min_length=1, max_length=50)
    client_id: UUID | None = None
    start_date: date | None = None
    end_date: date | None = None
    billing_frequency: BillingFrequency | None = None
    base_fee: float | None = Field(default=None, ge=0)
    scope_of_work: str | None = Field(default=None, min_length=1)
    sla_kpi: str | None = None
    renewal_terms: str | None = None
    contract_type: str | None = Field(default=None, min_length=1, max_length=50)
    status: ContractStatus | None = None
    payment_terms: str | None = None
    next_review_date: date | None = None
    under_negotiation: bool | None = None

    @property
    def changes_billing(self) -> bool:
        return bool({"base_fee", "billing_frequency"} & self.model_fields_set)


class Contract(ContractCreate):
    """Matches the contracts table row."""

    id: UUID
    client: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ContractSite(DbModel):
    """Matches the contract_sites junction row."""

    id: UUID | None = None
    contract_id: UUID
    site_id: UUID
    created_at: datetime | None = None


class ContractChangeLog(DbModel):
    """Matches the contract_change_logs table row."""

    id: UUID | None = None
    contract_id: UUID
    change_type: str
    old_value: str | None = None
    new_value: str | None = None
    change_date: datetime
    changed_by: str | None = None
    effective_date: datetime
    approval_status: str | None = None
    created_at: datetime | None = None
