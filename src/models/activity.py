"""
Activity Models for Contractor Ledger

Every command that changes the ledger produces an activity event.
This provides:
1. A structured log line per change for debugging
2. A consistent shape for whatever reads the logs

DESIGN DECISION: Activity events are log records only. They are written to
the structured log and then dropped; the ledger keeps no history of changes.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ActivityEventType(str, Enum):
    """Types of events we log."""
    # Projects
    PROJECT_ADDED = "project_added"
    PROJECT_UPDATED = "project_updated"
    PROJECT_DELETED = "project_deleted"

    # Expenses
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"

    # Bills
    BILL_ADDED = "bill_added"
    BILL_STATUS_UPDATED = "bill_status_updated"
    BILL_DELETED = "bill_deleted"

    # Session
    USER_LOGGED_IN = "user_logged_in"
    USER_LOGGED_OUT = "user_logged_out"
    LOGIN_REJECTED = "login_rejected"

    # Persistence
    SNAPSHOT_LOADED = "snapshot_loaded"
    SNAPSHOT_SAVED = "snapshot_saved"
    SNAPSHOT_INCONSISTENT = "snapshot_inconsistent"

    # System events
    SYSTEM_ERROR = "system_error"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """
    A single activity event.

    Every ledger command creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: ActivityEventType = Field(
        ...,
        description="Type of event"
    )
    severity: ActivitySeverity = Field(
        default=ActivitySeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'project', 'expense', 'bill')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=True,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.project_added(project_id, name)
        event = ActivityEventBuilder.bill_status_updated(bill_id, "paid")
    """

    @staticmethod
    def project_added(project_id: str, name: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.PROJECT_ADDED,
            entity_type="project",
            entity_id=project_id,
            description=f"Project added: {name}",
            details={"name": name},
        )

    @staticmethod
    def project_updated(project_id: str, fields: list[str]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.PROJECT_UPDATED,
            entity_type="project",
            entity_id=project_id,
            description=f"Project updated: {', '.join(fields) or 'no fields'}",
            details={"fields": fields},
        )

    @staticmethod
    def project_deleted(
        project_id: str,
        expenses_removed: int,
        bills_removed: int,
        payments_removed: int,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.PROJECT_DELETED,
            entity_type="project",
            entity_id=project_id,
            description="Project deleted with its expenses, bills and payments",
            details={
                "expenses_removed": expenses_removed,
                "bills_removed": bills_removed,
                "payments_removed": payments_removed,
            },
        )

    @staticmethod
    def expense_added(
        expense_id: str,
        project_id: str,
        amount: Decimal,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense recorded: {amount}",
            details={"project_id": project_id, "amount": str(amount)},
        )

    @staticmethod
    def expense_deleted(expense_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            description="Expense deleted",
        )

    @staticmethod
    def bill_added(
        bill_id: str,
        vendor: str,
        amount: Decimal,
        status: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.BILL_ADDED,
            entity_type="bill",
            entity_id=bill_id,
            description=f"Bill added: {vendor} - {amount} ({status})",
            details={"vendor": vendor, "amount": str(amount), "status": status},
        )

    @staticmethod
    def bill_status_updated(bill_id: str, status: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.BILL_STATUS_UPDATED,
            entity_type="bill",
            entity_id=bill_id,
            description=f"Bill marked {status}",
            details={"status": status},
        )

    @staticmethod
    def bill_deleted(bill_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.BILL_DELETED,
            entity_type="bill",
            entity_id=bill_id,
            description="Bill deleted",
        )

    @staticmethod
    def user_logged_in(username: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.USER_LOGGED_IN,
            entity_type="session",
            description=f"User logged in: {username}",
            details={"username": username},
        )

    @staticmethod
    def user_logged_out(username: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.USER_LOGGED_OUT,
            entity_type="session",
            description=f"User logged out: {username}",
            details={"username": username},
        )

    @staticmethod
    def login_rejected(reason: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.LOGIN_REJECTED,
            severity=ActivitySeverity.WARNING,
            entity_type="session",
            description="Login rejected",
            details={"reason": reason},
        )

    @staticmethod
    def snapshot_loaded(counts: dict[str, int]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SNAPSHOT_LOADED,
            entity_type="snapshot",
            description="Ledger restored from storage",
            details=counts,
            is_user_action=False,
        )

    @staticmethod
    def snapshot_saved(counts: dict[str, int]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SNAPSHOT_SAVED,
            severity=ActivitySeverity.DEBUG,
            entity_type="snapshot",
            description="Ledger saved to storage",
            details=counts,
            is_user_action=False,
        )

    @staticmethod
    def snapshot_inconsistent(discrepancies: dict[str, dict[str, str]]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SNAPSHOT_INCONSISTENT,
            severity=ActivitySeverity.WARNING,
            entity_type="snapshot",
            description=(
                f"{len(discrepancies)} project(s) have a spent total that "
                "does not match their expenses"
            ),
            details={"projects": discrepancies},
            is_user_action=False,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SYSTEM_ERROR,
            severity=ActivitySeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            is_user_action=False,
        )
