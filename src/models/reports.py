"""
Report Models

Shapes returned by the ledger queries. They are computed from the store on
every call and never cached.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from src.models.ledger import Bill


class ProjectExpenseTotal(BaseModel):
    """Total of a project's expenses, summed from the expense records."""

    project_id: str
    name: str
    expenses: Decimal = Field(default=Decimal("0"))


class StatusBreakdown(BaseModel):
    """One slice of a by-status breakdown."""

    status: str
    value: Decimal


class BillTotals(BaseModel):
    """Bill amounts grouped by status."""

    pending: Decimal = Decimal("0")
    overdue: Decimal = Decimal("0")
    paid: Decimal = Decimal("0")


class DashboardSummary(BaseModel):
    """
    Key figures for the overview screen.

    Breakdowns leave out slices whose value is zero.
    """

    total_projects: int = Field(ge=0)
    active_projects: int = Field(ge=0)
    total_expenses: Decimal
    pending_payments: Decimal = Field(description="Sum of payments not yet received")
    received_payments: Decimal
    pending_bills: int = Field(ge=0, description="Number of bills with status pending")
    expenses_by_project: list[ProjectExpenseTotal] = Field(default_factory=list)
    projects_by_status: list[StatusBreakdown] = Field(default_factory=list)
    payments_by_status: list[StatusBreakdown] = Field(default_factory=list)
    recent_bills: list[Bill] = Field(
        default_factory=list,
        description="First bills in stored order, for the recent activity list"
    )
    is_empty: bool = Field(
        default=False,
        description="No projects, expenses or bills recorded yet"
    )
