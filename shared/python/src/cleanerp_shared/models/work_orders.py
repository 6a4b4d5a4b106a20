"""
models/work_orders.py — Pydantic models for work_orders, work_order_assignments
and audit_checklist_items.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from cleanerp_shared.constants import (
    WorkOrderCategory,
    WorkOrderPriority,
    WorkOrderStatus,
)
from cleanerp_shared.models.base import DbModel, UpdateModel


class WorkOrderCreate(DbModel):
    """Insert payload for the work_orders table."""

    site_id: UUID
    contract_id: UUID | None = None
    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    category: WorkOrderCategory
    scheduled_start: datetime
    due_date: datetime
    priority: WorkOrderPriority = "Medium"
    status: WorkOrderStatus = "Scheduled"
    recurring_template_id: UUID | None = None


class WorkOrderUpdate(UpdateModel):
    site_id: UUID | None = None
    contract_id: UUID | None = None
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    category: WorkOrderCategory | None = None
    scheduled_start: datetime | None = None
    due_date: datetime | None = None
    priority: WorkOrderPriority | None = None
    status: WorkOrderStatus | None = None
    completed_by: UUID | None = None
    completion_timestamp: datetime | None = None
    actual_duration: float | None = Field(default=None, ge=0)
    outcome_notes: str | None = None
    client_signoff: bool | None = None
    completion_status: str | None = None
    audit_score: float | None = Field(default=None, ge=0, le=100)
    audit_followup_required: bool | None = None


class WorkOrder(WorkOrderCreate):
    """Matches the work_orders table row with its optional joins."""

    id: UUID
    work_order_number: str | None = None
    completed_by: UUID | None = None
    completion_timestamp: datetime | None = None
    actual_duration: float | None = None
    outcome_notes: str | None = None
    client_signoff: bool | None = None
    completion_status: str | None = None
    audit_score: float | None = None
    audit_followup_required: bool | None = None
    site: dict[str, Any] | None = None
    assignments: list[dict[str, Any]] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class WorkOrderAssignmentCreate(DbModel):
    employee_id: UUID
    assignment_type: str = Field(min_length=1, max_length=50)


class WorkOrderAssignment(WorkOrderAssignmentCreate):
    """Matches the work_order_assignments table row."""

    id: UUID | None = None
    work_order_id: UUID
    created_at: datetime | None = None


class AuditChecklistItemCreate(DbModel):
    question: str = Field(min_length=1)
    answer: str | None = None
    comments: str | None = None
    score: float | None = None


class AuditChecklistItem(AuditChecklistItemCreate):
    """Matches the audit_checklist_items table row."""

    id: UUID | None = None
    work_order_id: UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None
