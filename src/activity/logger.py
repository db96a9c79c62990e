"""
Activity Logger

DESIGN DECISION: Every command that changes the ledger is logged.
This provides:
1. A structured trace of what the user did, for debugging
2. Warnings when stored data turns out to be damaged or inconsistent

The activity logger:
- Writes JSON lines through structlog on top of stdlib logging
- Never persists events (the ledger keeps no history)
"""

import logging
from decimal import Decimal
from typing import Optional

import structlog

from src.models.activity import ActivityEvent, ActivityEventBuilder, ActivitySeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route the structured log to stderr at the given level.

    structlog renders each event to one JSON string; stdlib only
    needs to print the message.
    """
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger("src").setLevel(level)


class ActivityLogger:
    """
    Central activity logging service.

    One method per ledger command; each builds an ActivityEvent and
    writes it at the event's severity.
    """

    def __init__(self, logger_name: str = "src.activity"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: ActivityEvent) -> None:
        """Write an activity event to the structured log."""
        log_dict = event.to_log_dict()

        if event.severity == ActivitySeverity.ERROR:
            self._logger.error("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.WARNING:
            self._logger.warning("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.DEBUG:
            self._logger.debug("activity_event", **log_dict)
        else:
            self._logger.info("activity_event", **log_dict)

    def log_project_added(self, project_id: str, name: str) -> None:
        self.log(ActivityEventBuilder.project_added(project_id, name))

    def log_project_updated(self, project_id: str, fields: list[str]) -> None:
        self.log(ActivityEventBuilder.project_updated(project_id, fields))

    def log_project_deleted(
        self,
        project_id: str,
        expenses_removed: int,
        bills_removed: int,
        payments_removed: int,
    ) -> None:
        """Log a project delete and the size of its cascade."""
        self.log(ActivityEventBuilder.project_deleted(
            project_id=project_id,
            expenses_removed=expenses_removed,
            bills_removed=bills_removed,
            payments_removed=payments_removed,
        ))

    def log_expense_added(self, expense_id: str, project_id: str, amount: Decimal) -> None:
        self.log(ActivityEventBuilder.expense_added(expense_id, project_id, amount))

    def log_expense_deleted(self, expense_id: str) -> None:
        self.log(ActivityEventBuilder.expense_deleted(expense_id))

    def log_bill_added(self, bill_id: str, vendor: str, amount: Decimal, status: str) -> None:
        self.log(ActivityEventBuilder.bill_added(bill_id, vendor, amount, status))

    def log_bill_status_updated(self, bill_id: str, status: str) -> None:
        self.log(ActivityEventBuilder.bill_status_updated(bill_id, status))

    def log_bill_deleted(self, bill_id: str) -> None:
        self.log(ActivityEventBuilder.bill_deleted(bill_id))

    def log_user_logged_in(self, username: str) -> None:
        self.log(ActivityEventBuilder.user_logged_in(username))

    def log_user_logged_out(self, username: str) -> None:
        self.log(ActivityEventBuilder.user_logged_out(username))

    def log_login_rejected(self, reason: str) -> None:
        self.log(ActivityEventBuilder.login_rejected(reason))

    def log_snapshot_loaded(self, counts: dict[str, int]) -> None:
        self.log(ActivityEventBuilder.snapshot_loaded(counts))

    def log_snapshot_saved(self, counts: dict[str, int]) -> None:
        self.log(ActivityEventBuilder.snapshot_saved(counts))

    def log_snapshot_inconsistent(
        self,
        discrepancies: dict[str, tuple[Decimal, Decimal]],
    ) -> None:
        """Log projects whose stored spent total disagrees with their expenses."""
        self.log(ActivityEventBuilder.snapshot_inconsistent({
            project_id: {"stored": str(stored), "recomputed": str(recomputed)}
            for project_id, (stored, recomputed) in discrepancies.items()
        }))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(ActivityEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
