"""
constants.py — shared constants used across the API and the CLI.

Table names, status enumerations and typed literals are defined here so
that models, services and filters stay in sync with the database enums.
"""

from __future__ import annotations

from typing import Final, Literal, get_args

# ---------------------------------------------------------------------------
# Table names
# ---------------------------------------------------------------------------
TABLE_CLIENTS: Final = "clients"
TABLE_CONTACTS: Final = "contacts"
TABLE_SITES: Final = "sites"
TABLE_CONTRACTS: Final = "contracts"
TABLE_CONTRACT_SITES: Final = "contract_sites"
TABLE_CONTRACT_CHANGE_LOGS: Final = "contract_change_logs"
TABLE_WORK_ORDERS: Final = "work_orders"
TABLE_WORK_ORDER_ASSIGNMENTS: Final = "work_order_assignments"
TABLE_AUDIT_CHECKLIST_ITEMS: Final = "audit_checklist_items"
TABLE_EMPLOYEES: Final = "employees"
TABLE_LEADS: Final = "leads"
TABLE_QUOTES: Final = "quotes"
TABLE_QUOTE_LINE_ITEMS: Final = "quote_line_items"

# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------
ClientStatus = Literal["Active", "On Hold"]
SiteStatus = Literal["Active", "Inactive", "Pending Launch", "Suspended"]
ServiceType = Literal["Internal", "Contractor"]
ContractStatus = Literal["Active", "Expiring", "Expired", "Terminated"]
ContractChangeType = Literal["Created", "Updated", "Renewed", "Terminated", "Price Change"]

WorkOrderStatus = Literal[
    "Scheduled", "In Progress", "On Hold", "Completed", "Cancelled", "Overdue"
]
# Only Low/Medium/High match the database constraint
WorkOrderPriority = Literal["Low", "Medium", "High"]
WorkOrderCategory = Literal["Routine Clean", "Ad-hoc Request", "Audit"]

# ---------------------------------------------------------------------------
# HR
# ---------------------------------------------------------------------------
EmploymentType = Literal["Full-time", "Part-time", "Contractor"]
EmployeeStatus = Literal["Onboarding", "Active", "Terminated"]
PayCycle = Literal["Weekly", "Fortnightly", "Monthly"]
TerminationReason = Literal[
    "Resignation", "Contract End", "Termination", "Retirement", "Other"
]

# ---------------------------------------------------------------------------
# Sales
# ---------------------------------------------------------------------------
LeadStage = Literal["Discovery", "Proposal", "Negotiation", "Won", "Lost"]
LeadStatus = Literal["Open", "Closed-Won", "Closed-Lost"]
LeadSource = Literal["Referral", "Website", "Cold Call", "Event", "Partner", "Other"]
QuoteStatus = Literal["Draft", "Sent", "Accepted", "Rejected"]

# ---------------------------------------------------------------------------
# Billing
# ---------------------------------------------------------------------------
BillingFrequency = Literal["weekly", "fortnightly", "monthly", "quarterly", "annually"]

# ---------------------------------------------------------------------------
# Tuples for filters and enum listings
# ---------------------------------------------------------------------------
CLIENT_STATUSES: Final[tuple[str, ...]] = get_args(ClientStatus)
SITE_STATUSES: Final[tuple[str, ...]] = get_args(SiteStatus)
CONTRACT_STATUSES: Final[tuple[str, ...]] = get_args(ContractStatus)
WORK_ORDER_STATUSES: Final[tuple[str, ...]] = get_args(WorkOrderStatus)
WORK_ORDER_PRIORITIES: Final[tuple[str, ...]] = get_args(WorkOrderPriority)
WORK_ORDER_CATEGORIES: Final[tuple[str, ...]] = get_args(WorkOrderCategory)
EMPLOYMENT_TYPES: Final[tuple[str, ...]] = get_args(EmploymentType)
EMPLOYEE_STATUSES: Final[tuple[str, ...]] = get_args(EmployeeStatus)
PAY_CYCLES: Final[tuple[str, ...]] = get_args(PayCycle)
TERMINATION_REASONS: Final[tuple[str, ...]] = get_args(TerminationReason)
LEAD_STAGES: Final[tuple[str, ...]] = get_args(LeadStage)
LEAD_STATUSES: Final[tuple[str, ...]] = get_args(LeadStatus)
LEAD_SOURCES: Final[tuple[str, ...]] = get_args(LeadSource)
QUOTE_STATUSES: Final[tuple[str, ...]] = get_args(QuoteStatus)
BILLING_FREQUENCIES: Final[tuple[str, ...]] = get_args(BillingFrequency)

# Work orders still awaiting completion (dashboard task list)
PENDING_WORK_ORDER_STATUSES: Final[tuple[str, ...]] = ("Scheduled", "In Progress")

# Filter values the UI sends to mean "no filter"
ALL_FILTER_VALUES: Final[frozenset[str]] = frozenset(
    {
        "",
        "all",
        "all-statuses",
        "all-sites",
        "all-clients",
        "all-categories",
        "all-priorities",
        "all-departments",
        "all-types",
    }
)

ENUMERATIONS: Final[dict[str, tuple[str, ...]]] = {
    "client_status": CLIENT_STATUSES,
    "site_status": SITE_STATUSES,
    "contract_status": CONTRACT_STATUSES,
    "work_order_status": WORK_ORDER_STATUSES,
    "work_order_priority": WORK_ORDER_PRIORITIES,
    "work_order_category": WORK_ORDER_CATEGORIES,
    "employment_type": EMPLOYMENT_TYPES,
    "employee_status": EMPLOYEE_STATUSES,
    "pay_cycle": PAY_CYCLES,
    "termination_reason": TERMINATION_REASONS,
    "lead_stage": LEAD_STAGES,
    "lead_status": LEAD_STATUSES,
    "lead_source": LEAD_SOURCES,
    "quote_status": QUOTE_STATUSES,
    "billing_frequency": BILLING_FREQUENCIES,
}
