"""
models/employees.py — Pydantic models for the employees table.
"""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import EmailStr, Field

from cleanerp_shared.constants import (
    EmployeeStatus,
    EmploymentType,
    PayCycle,
    TerminationReason,
)
from cleanerp_shared.models.base import (
    PHONE_PATTERN,
    POSTCODE_PATTERN,
    DbModel,
    UpdateModel,
)


class EmployeeCreate(DbModel):
    """Insert payload for the employees table."""

    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    date_of_birth: date
    contact_phone: str = Field(pattern=PHONE_PATTERN)
    contact_email: EmailStr
    address_street: str = Field(min_length=2, max_length=100)
    address_city: str = Field(min_length=2, max_length=50)
    address_state: str = Field(min_length=2, max_length=50)
    address_postcode: str = Field(pattern=POSTCODE_PATTERN)
    employee_id: str = Field(min_length=1, max_length=20)
    job_title: str = Field(min_length=1, max_length=100)
    department: str = Field(min_length=1, max_length=50)
    start_date: date
    employment_type: EmploymentType
    status: EmployeeStatus = "Onboarding"
    wage_classification: str | None = None
    pay_rate: float = Field(ge=0)
    pay_cycle: PayCycle = "Fortnightly"
    tax_id: str | None = None
    bank_bsb: str | None = Field(default=None, pattern=r"^\d{3}-?\d{3}$")
    bank_account_number: str | None = Field(default=None, pattern=r"^\d{6,10}$")
    super_fund_name: str | None = None
    super_member_number: str | None = None
    user_account_id: UUID | None = None
    end_of_employment_date: date | None = None
    end_of_employment_reason: TerminationReason | None = None


class EmployeeUpdate(UpdateModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=50)
    last_name: str | None = Field(default=None, min_length=1, max_length=50)
    date_of_birth: date | None = None
    contact_phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    contact_email: EmailStr | None = None
    address_street: str | None = Field(default=None, min_length=2, max_length=100)
    address_city: str | None = Field(default=None, min_length=2, max_length=50)
    address_state: str | None = Field(default=None, min_length=2, max_length=50)
    address_postcode: str | None = Field(default=None, pattern=POSTCODE_PATTERN)
    job_title: str | None = Field(default=None, min_length=1, max_length=100)
    department: str | None = Field(default=None, min_length=1, max_length=50)
    start_date: date | None = None
    employment_type: EmploymentType | None = None
    status: EmployeeStatus | None = None
    wage_classification: str | None = None
    pay_rate: float | None = Field(default=None, ge=0)
    pay_cycle: PayCycle | None = None
    tax_id: str | None = None
    bank_bsb: str | None = Field(default=None, pattern=r"^\d{3}-?\d{3}$")
    bank_account_number: str | None = Field(default=None, pattern=r"^\d{6,10}$")
    super_fund_name: str | None = None
    super_member_number: str | None = None
    end_of_employment_date: date | None = None
    end_of_employment_reason: TerminationReason | None = None


class Employee(EmployeeCreate):
    """Matches the employees table row."""

    id: UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
