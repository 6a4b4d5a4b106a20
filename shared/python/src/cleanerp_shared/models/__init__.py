"""
cleanerp_shared.models — Pydantic models matching each database table.

These models are used by:
- packages/api: validate request bodies before writing to Supabase
- packages/pipeline: validate imported CSV rows

Each entity has a <Entity>Create (insert payload), <Entity>Update (partial
update) and <Entity> (table row) model. All models provide:
  .from_db_row(row: dict) -> Model
  .to_insert_dict() -> dict
"""

from cleanerp_shared.models.base import (
    DbModel,
    RecordValidationError,
    UpdateModel,
    error_location,
    validate_for_db,
    validate_model,
)
from cleanerp_shared.models.clients import (
    Client,
    ClientCreate,
    ClientUpdate,
    Contact,
    ContactCreate,
)
from cleanerp_shared.models.contracts import (
    Contract,
    ContractChangeLog,
    ContractCreate,
    ContractSite,
    ContractUpdate,
)
from cleanerp_shared.models.employees import Employee, EmployeeCreate, EmployeeUpdate
from cleanerp_shared.models.sales import (
    Lead,
    LeadCreate,
    LeadUpdate,
    Quote,
    QuoteCreate,
    QuoteLineItem,
    QuoteLineItemCreate,
    QuoteLineItemUpdate,
    QuoteUpdate,
)
from cleanerp_shared.models.sites import ServiceItem, Site, SiteCreate, SiteUpdate
from cleanerp_shared.models.work_orders import (
    AuditChecklistItem,
    AuditChecklistItemCreate,
    WorkOrder,
    WorkOrderAssignment,
    WorkOrderAssignmentCreate,
    WorkOrderCreate,
    WorkOrderUpdate,
)

__all__ = [
    "DbModel",
    "UpdateModel",
    "RecordValidationError",
    "error_location",
    "validate_for_db",
    "validate_model",
    "Client",
    "ClientCreate",
    "ClientUpdate",
    "Contact",
    "ContactCreate",
    "Site",
    "SiteCreate",
    "SiteUpdate",
    "ServiceItem",
    "Contract",
    "ContractCreate",
    "ContractUpdate",
    "ContractSite",
    "ContractChangeLog",
    "WorkOrder",
    "WorkOrderCreate",
    "WorkOrderUpdate",
    "WorkOrderAssignment",
    "WorkOrderAssignmentCreate",
    "AuditChecklistItem",
    "AuditChecklistItemCreate",
    "Employee",
    "EmployeeCreate",
    "EmployeeUpdate",
    "Lead",
    "LeadCreate",
    "LeadUpdate",
    "Quote",
    "QuoteCreate",
    "QuoteUpdate",
    "QuoteLineItem",
    "QuoteLineItemCreate",
    "QuoteLineItemUpdate",
]
