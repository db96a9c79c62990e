"""
Main Orchestrator for Contractor Ledger

This module ties together all the components and defines the
application-shell duties the domain store deliberately leaves out:
1. Restore the ledger from storage at startup
2. Save the full snapshot after every command that changed something
3. Log every command

DESIGN DECISION: The store is owned explicitly by a LedgerFlow and handed
to whoever renders it, instead of living in ambient global state. The
store finishes its in-memory transition before anything is written, so a
failed save never leaves the store half-updated.
"""

from datetime import date
from typing import Callable, Optional, Union

from src.activity import ActivityLogger, configure_logging
from src.auth import Authenticator, SessionManager
from src.config import Settings, get_settings
from src.models.ledger import (
    Bill,
    BillFields,
    BillStatus,
    Expense,
    ExpenseFields,
    LedgerSnapshot,
    Project,
    ProjectFields,
    ProjectUpdate,
)
from src.queries import LedgerQueries
from src.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
    LedgerStorageInterface,
    StorageError,
)
from src.store import DomainStore


class LedgerFlow:
    """
    Orchestrates ledger commands.

    Flow for every mutating command:
    1. Apply the command to the domain store
    2. If it changed anything, save the full snapshot
    3. Log the activity

    Reads go straight to `store`.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        activity_logger: Optional[ActivityLogger] = None,
        strict: bool = False,
        today: Callable[[], date] = date.today,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._storage = storage
        self._activity_logger = activity_logger

        snapshot = storage.load_snapshot()
        store_kwargs = {"today": today, "strict": strict}
        if id_factory is not None:
            store_kwargs["id_factory"] = id_factory
        self._store = DomainStore(snapshot, **store_kwargs)

        if snapshot is not None and self._activity_logger:
            self._activity_logger.log_snapshot_loaded(self._counts(snapshot))

        discrepancies = self._store.spent_discrepancies()
        if discrepancies and self._activity_logger:
            self._activity_logger.log_snapshot_inconsistent(discrepancies)

    @property
    def store(self) -> DomainStore:
        return self._store

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------

    def add_project(self, data: Union[ProjectFields, dict]) -> Project:
        project = self._store.add_project(data)
        self._persist()
        if self._activity_logger:
            self._activity_logger.log_project_added(project.id, project.name)
        return project

    def update_project(
        self,
        project_id: str,
        changes: Union[ProjectUpdate, dict],
    ) -> bool:
        update = changes if isinstance(changes, ProjectUpdate) else ProjectUpdate.model_validate(changes)
        if not self._store.update_project(project_id, update):
            return False

        self._persist()
        if self._activity_logger:
            self._activity_logger.log_project_updated(
                project_id, sorted(update.model_fields_set)
            )
        return True

    def delete_project(self, project_id: str) -> bool:
        """Delete a project and everything that references it."""
        expenses = sum(1 for e in self._store.expenses if e.project_id == project_id)
        bills = sum(1 for b in self._store.bills if b.project_id == project_id)
        payments = sum(1 for p in self._store.payments if p.project_id == project_id)

        if not self._store.delete_project(project_id):
            return False

        self._persist()
        if self._activity_logger:
            self._activity_logger.log_project_deleted(project_id, expenses, bills, payments)
        return True

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    def add_expense(self, data: Union[ExpenseFields, dict]) -> Expense:
        expense = self._store.add_expense(data)
        self._persist()
        if self._activity_logger:
            self._activity_logger.log_expense_added(
                expense.id, expense.project_id, expense.amount
            )
        return expense

    def delete_expense(self, expense_id: str) -> bool:
        if not self._store.delete_expense(expense_id):
            return False

        self._persist()
        if self._activity_logger:
            self._activity_logger.log_expense_deleted(expense_id)
        return True

    # -------------------------------------------------------------------------
    # Bills
    # -------------------------------------------------------------------------

    def add_bill(self, data: Union[BillFields, dict]) -> Bill:
        bill = self._store.add_bill(data)
        self._persist()
        if self._activity_logger:
            self._activity_logger.log_bill_added(
                bill.id, bill.vendor, bill.amount, bill.status.value
            )
        return bill

    def update_bill_status(self, bill_id: str, status: Union[BillStatus, str]) -> bool:
        if not self._store.update_bill_status(bill_id, status):
            return False

        self._persist()
        if self._activity_logger:
            self._activity_logger.log_bill_status_updated(bill_id, BillStatus(status).value)
        return True

    def delete_bill(self, bill_id: str) -> bool:
        if not self._store.delete_bill(bill_id):
            return False

        self._persist()
        if self._activity_logger:
            self._activity_logger.log_bill_deleted(bill_id)
        return True

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _persist(self) -> None:
        snapshot = self._store.snapshot()
        try:
            self._storage.save_snapshot(snapshot)
        except StorageError as e:
            if self._activity_logger:
                self._activity_logger.log_error(
                    error_type="save_failed",
                    error_message=str(e),
                )
            raise

        if self._activity_logger:
            self._activity_logger.log_snapshot_saved(self._counts(snapshot))

    @staticmethod
    def _counts(snapshot: LedgerSnapshot) -> dict[str, int]:
        return {
            "projects": len(snapshot.projects),
            "expenses": len(snapshot.expenses),
            "bills": len(snapshot.bills),
            "payments": len(snapshot.payments),
        }


def create_storage(settings: Optional[Settings] = None) -> KeyValueStorage:
    """Build the storage backend named in the settings."""
    storage_settings = (settings or get_settings()).storage
    if storage_settings.backend == "memory":
        return InMemoryStorage()
    return JsonFileStorage(storage_settings.data_dir)


def create_app_components(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorage] = None,
    authenticator: Optional[Authenticator] = None,
) -> tuple[LedgerFlow, SessionManager, LedgerQueries]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use. Defaults to get_settings().
        storage: Backend to use instead of the one named in settings.
        authenticator: Login check. Defaults to accepting any non-empty credentials.

    Returns:
        (ledger_flow, session_manager, queries)
    """
    settings = settings or get_settings()
    app_settings = settings.app

    configure_logging("DEBUG" if app_settings.debug_mode else app_settings.log_level)
    activity_logger = ActivityLogger()

    storage = storage or create_storage(settings)

    ledger_flow = LedgerFlow(
        storage=storage,
        activity_logger=activity_logger,
        strict=app_settings.strict_lookups,
    )
    session_manager = SessionManager(
        storage=storage,
        authenticator=authenticator,
        activity_logger=activity_logger,
    )
    queries = LedgerQueries(ledger_flow.store)

    return ledger_flow, session_manager, queries
