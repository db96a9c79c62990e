"""
Core Data Models for Contractor Ledger

These models define the schemas for every record the ledger keeps.
They are designed to:
1. Enforce type safety at runtime
2. Round-trip through the persisted snapshot using the camelCase storage names
3. Be immutable once created, so the store is the only place state changes

DESIGN DECISION: Entity records are frozen. A change to a project's spent
total or a bill's status replaces the record instead of mutating it, which
keeps every store transition all-or-nothing for readers.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# Label used when a record references a project the store does not know.
UNKNOWN_PROJECT_NAME = "Unknown Project"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ProjectStatus(str, Enum):
    """Lifecycle of a contract/job."""
    ACTIVE = "active"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"


class BillStatus(str, Enum):
    """
    Payable status of a vendor bill.

    The initial value is derived once from the due date when the bill is
    added. After that it only changes through an explicit status update;
    a pending bill does NOT become overdue on its own as time passes.
    """
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class PaymentStatus(str, Enum):
    """Status of an inbound payment from a client."""
    PENDING = "pending"
    RECEIVED = "received"


class ExpenseCategory(str, Enum):
    """
    Expense categories offered to the user.

    The store does not enforce this set: an expense keeps whatever category
    string it was given. Enforcement is left to whoever builds the form.
    """
    LABOR = "Labor"
    MATERIALS = "Materials"
    EQUIPMENT = "Equipment"
    TRANSPORT = "Transport"
    UTILITIES = "Utilities"
    OTHER = "Other"


class PaymentMethod(str, Enum):
    """Payment methods offered for expenses (not enforced by the store)."""
    CASH = "Cash"
    BANK_TRANSFER = "Bank Transfer"
    CHEQUE = "Cheque"
    UPI = "UPI"
    CREDIT_CARD = "Credit Card"


class _LedgerModel(BaseModel):
    """Base for all ledger models: snake_case in Python, camelCase on disk."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class _EntityModel(_LedgerModel):
    model_config = ConfigDict(frozen=True)


# =============================================================================
# CALLER-FACING FIELD MODELS (command input)
# =============================================================================

class ProjectFields(_LedgerModel):
    """
    Fields supplied when creating a project.

    `spent` is accepted so that callers can pass a full form payload, but
    the store always starts a new project at zero.
    """
    name: str = Field(..., description="Project name")
    client: str = Field(default="", description="Client the work is for")
    location: str = Field(default="", description="Site location")
    status: ProjectStatus = Field(default=ProjectStatus.ACTIVE)
    budget: Decimal = Field(default=Decimal("0"), ge=0, description="Contract budget")
    spent: Decimal = Field(default=Decimal("0"), description="Ignored on create")
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    progress: int = Field(default=0, ge=0, le=100, description="Percent complete")


class ProjectUpdate(_LedgerModel):
    """
    Partial update for a project.

    Only fields that were explicitly set are merged. `id` and `spent` are
    not part of this model and are dropped if a caller passes them.
    Passing None clears `start_date` or `end_date`; it is rejected for the
    other fields.
    """
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    client: Optional[str] = None
    location: Optional[str] = None
    status: Optional[ProjectStatus] = None
    budget: Optional[Decimal] = Field(default=None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    progress: Optional[int] = Field(default=None, ge=0, le=100)

    @field_validator("name", "client", "location", "status", "budget", "progress", mode="before")
    @classmethod
    def reject_none(cls, v):
        """Only the dates can be cleared; every other field needs a value."""
        if v is None:
            raise ValueError("cannot be cleared")
        return v


class ExpenseFields(_LedgerModel):
    """Fields supplied when recording an expense (id and project name are assigned)."""
    project_id: str
    category: str = Field(default=ExpenseCategory.OTHER.value)
    description: str = ""
    amount: Decimal = Field(..., gt=0)
    date: date
    payment_method: str = ""


class BillFields(_LedgerModel):
    """Fields supplied when adding a bill (id, project name and status are assigned)."""
    project_id: str
    vendor: str
    bill_number: str = ""
    amount: Decimal = Field(..., ge=0)
    date: date
    due_date: date
    description: str = ""


# =============================================================================
# ENTITIES
# =============================================================================

class Project(_EntityModel):
    """A tracked contract/job with a budget and cumulative spend."""
    id: str
    name: str
    client: str = ""
    location: str = ""
    status: ProjectStatus = ProjectStatus.ACTIVE
    budget: Decimal = Field(default=Decimal("0"), ge=0)
    spent: Decimal = Field(default=Decimal("0"), ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    progress: int = Field(default=0, ge=0, le=100)


class Expense(_EntityModel):
    """
    A recorded outflow against a project.

    `project_name` is a snapshot taken when the expense was recorded. It is
    not kept in sync if the project is renamed later.
    """
    id: str
    project_id: str
    project_name: str
    category: str
    description: str = ""
    amount: Decimal = Field(..., gt=0)
    date: date
    payment_method: str = ""


class Bill(_EntityModel):
    """A vendor invoice against a project with its own payable lifecycle."""
    id: str
    project_id: str
    project_name: str
    vendor: str
    bill_number: str = ""
    amount: Decimal = Field(..., ge=0)
    date: date
    due_date: date
    status: BillStatus
    description: str = ""


class Payment(_EntityModel):
    """
    An inbound receipt against a project.

    Nothing in the ledger creates or edits payments; they arrive with the
    persisted snapshot and are read by reporting.
    """
    id: str
    project_id: str
    amount: Decimal = Field(..., ge=0)
    status: PaymentStatus
    date: date


# =============================================================================
# SNAPSHOT
# =============================================================================

class LedgerSnapshot(_LedgerModel):
    """
    Full state of the ledger at one point in time.

    This is what the store is restored from at startup and what gets handed
    to storage after every change.
    """
    projects: list[Project] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    bills: list[Bill] = Field(default_factory=list)
    payments: list[Payment] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.projects or self.expenses or self.bills or self.payments)
