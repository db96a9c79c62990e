"""
Data Models Package

This package contains all Pydantic models used in the Contractor Ledger.
All data flowing through the system must conform to these schemas.
"""

from src.models.ledger import (
    UNKNOWN_PROJECT_NAME,
    Bill,
    BillFields,
    BillStatus,
    Expense,
    ExpenseCategory,
    ExpenseFields,
    LedgerSnapshot,
    Payment,
    PaymentMethod,
    PaymentStatus,
    Project,
    ProjectFields,
    ProjectStatus,
    ProjectUpdate,
)
from src.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)
from src.models.reports import (
    BillTotals,
    DashboardSummary,
    ProjectExpenseTotal,
    StatusBreakdown,
)
from src.models.session import Session

__all__ = [
    # Ledger models
    "UNKNOWN_PROJECT_NAME",
    "Bill",
    "BillFields",
    "BillStatus",
    "Expense",
    "ExpenseCategory",
    "ExpenseFields",
    "LedgerSnapshot",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "Project",
    "ProjectFields",
    "ProjectStatus",
    "ProjectUpdate",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
    # Report models
    "BillTotals",
    "DashboardSummary",
    "ProjectExpenseTotal",
    "StatusBreakdown",
    # Session
    "Session",
]
