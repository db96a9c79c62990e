"""
Ledger Queries

DESIGN DECISION: Every figure is derived from the store's current records
at the moment it is asked for. Nothing here is cached and nothing here
writes to the store, so the numbers can never drift from the data.

The only exception is `project_budget_usage`, which reads the project's
store-maintained `spent` total rather than re-summing expenses.
"""

from decimal import Decimal
from typing import Iterable, Optional, Union

from src.models.ledger import (
    Bill,
    BillStatus,
    Expense,
    PaymentStatus,
    Project,
    ProjectStatus,
)
from src.models.reports import (
    BillTotals,
    DashboardSummary,
    ProjectExpenseTotal,
    StatusBreakdown,
)
from src.store import DomainStore


_ZERO = Decimal("0")

# How many projects the per-project expense chart shows
EXPENSE_CHART_PROJECTS = 5

# How many bills the recent activity list shows
RECENT_BILLS = 3


def _total(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, _ZERO)


def _matches(text: str, *candidates: str) -> bool:
    needle = text.lower()
    return any(needle in candidate.lower() for candidate in candidates)


def _status_value(status: Union[str, None, ProjectStatus, BillStatus]) -> Optional[str]:
    if status is None or status == "all":
        return None
    return getattr(status, "value", status)


class LedgerQueries:
    """
    Read-only views over a DomainStore.

    GUARANTEES:
    - Only reports records that are in the store right now
    - Filters are case-insensitive substring matches, "all"/None means no filter
    """

    def __init__(self, store: DomainStore):
        self._store = store

    # -------------------------------------------------------------------------
    # Overview
    # -------------------------------------------------------------------------

    def dashboard_summary(self) -> DashboardSummary:
        projects = self._store.projects
        expenses = self._store.expenses
        bills = self._store.bills
        payments = self._store.payments

        pending_payments = _total(
            p.amount for p in payments if p.status == PaymentStatus.PENDING
        )
        received_payments = _total(
            p.amount for p in payments if p.status == PaymentStatus.RECEIVED
        )

        expenses_by_project = [
            ProjectExpenseTotal(
                project_id=project.id,
                name=project.name,
                expenses=_total(e.amount for e in expenses if e.project_id == project.id),
            )
            for project in projects[:EXPENSE_CHART_PROJECTS]
        ]

        projects_by_status = [
            StatusBreakdown(
                status=status.value,
                value=Decimal(sum(1 for p in projects if p.status == status)),
            )
            for status in ProjectStatus
        ]
        payments_by_status = [
            StatusBreakdown(status=PaymentStatus.RECEIVED.value, value=received_payments),
            StatusBreakdown(status=PaymentStatus.PENDING.value, value=pending_payments),
        ]

        return DashboardSummary(
            total_projects=len(projects),
            active_projects=sum(1 for p in projects if p.status == ProjectStatus.ACTIVE),
            total_expenses=_total(e.amount for e in expenses),
            pending_payments=pending_payments,
            received_payments=received_payments,
            pending_bills=sum(1 for b in bills if b.status == BillStatus.PENDING),
            expenses_by_project=expenses_by_project,
            projects_by_status=[s for s in projects_by_status if s.value > 0],
            payments_by_status=[s for s in payments_by_status if s.value > 0],
            recent_bills=list(bills[:RECENT_BILLS]),
            is_empty=not (projects or expenses or bills),
        )

    def bill_totals(self, bills: Optional[Iterable[Bill]] = None) -> BillTotals:
        """Sum bill amounts per status (all bills unless a subset is given)."""
        bills = self._store.bills if bills is None else tuple(bills)
        return BillTotals(
            pending=_total(b.amount for b in bills if b.status == BillStatus.PENDING),
            overdue=_total(b.amount for b in bills if b.status == BillStatus.OVERDUE),
            paid=_total(b.amount for b in bills if b.status == BillStatus.PAID),
        )

    def project_budget_usage(self, project_id: str) -> Optional[Decimal]:
        """
        Percentage of the budget already spent.

        Returns None for an unknown project and 0 when the budget is 0.
        """
        project = self._store.get_project(project_id)
        if project is None:
            return None
        if project.budget == 0:
            return _ZERO
        return project.spent / project.budget * 100

    # -------------------------------------------------------------------------
    # Search / filter
    # -------------------------------------------------------------------------

    def search_projects(
        self,
        text: str = "",
        status: Union[ProjectStatus, str, None] = None,
    ) -> list[Project]:
        """Projects whose name or client contains `text`."""
        wanted = _status_value(status)
        return [
            p for p in self._store.projects
            if _matches(text, p.name, p.client)
            and (wanted is None or p.status.value == wanted)
        ]

    def search_expenses(
        self,
        text: str = "",
        category: Optional[str] = None,
    ) -> list[Expense]:
        """Expenses whose description or project name contains `text`."""
        wanted = _status_value(category)
        return [
            e for e in self._store.expenses
            if _matches(text, e.description, e.project_name)
            and (wanted is None or e.category == wanted)
        ]

    def search_bills(
        self,
        text: str = "",
        status: Union[BillStatus, str, None] = None,
    ) -> list[Bill]:
        """Bills whose vendor, bill number or project name contains `text`."""
        wanted = _status_value(status)
        return [
            b for b in self._store.bills
            if _matches(text, b.vendor, b.bill_number, b.project_name)
            and (wanted is None or b.status.value == wanted)
        ]

    @staticmethod
    def expense_total(expenses: Iterable[Expense]) -> Decimal:
        return _total(e.amount for e in expenses)
