"""
Domain Store

The in-memory owner of the four ledger collections (projects, expenses,
bills, payments) and the only place they change.

INVARIANTS kept by every command:
1. A project's `spent` is the running sum of its expenses' amounts. It is
   adjusted when an expense is added or deleted, never rescanned, and a
   delete never takes it below zero.
2. Deleting a project removes every expense, bill and payment that points
   at it in the same transition as the project itself.
3. Ids are handed out by the store and never handed out twice, not even
   after the record that held them is deleted.

The store does no I/O. Whoever owns it snapshots `snapshot()` after each
change and restores it at startup (see src/orchestrator.py).

Unknown ids are ignored by default. With `strict=True` the update and
delete commands raise EntityNotFoundError instead.
"""

from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Optional, TypeVar, Union
from uuid import uuid4

import structlog
from pydantic import BaseModel

from src.exceptions import EntityNotFoundError, LedgerError
from src.models.ledger import (
    UNKNOWN_PROJECT_NAME,
    Bill,
    BillFields,
    BillStatus,
    Expense,
    ExpenseFields,
    LedgerSnapshot,
    Payment,
    Project,
    ProjectFields,
    ProjectUpdate,
)


logger = structlog.get_logger(__name__)

_ZERO = Decimal("0")

# Fresh ids to request from the id factory before giving up
_MAX_ID_ATTEMPTS = 100

FieldsT = TypeVar("FieldsT", bound=BaseModel)


def _coerce(model: type[FieldsT], data: Union[FieldsT, dict]) -> FieldsT:
    if isinstance(data, model):
        return data
    return model.model_validate(data)


def _new_id() -> str:
    return str(uuid4())


class DomainStore:
    """
    Holds projects, expenses, bills and payments and applies commands to
    them under the cross-entity rules.

    Records are frozen pydantic models. Reads return tuples of the current
    records; a command replaces records rather than editing them.
    """

    def __init__(
        self,
        snapshot: Optional[LedgerSnapshot] = None,
        *,
        today: Callable[[], date] = date.today,
        id_factory: Callable[[], str] = _new_id,
        strict: bool = False,
    ):
        """
        Initialize the store.

        Args:
            snapshot: Previously saved state. If None, starts empty.
            today: Clock used to derive a new bill's status.
            id_factory: Source of fresh ids. Ids it repeats are skipped.
            strict: Raise EntityNotFoundError for unknown ids.
        """
        snapshot = snapshot or LedgerSnapshot()
        self._projects: list[Project] = list(snapshot.projects)
        self._expenses: list[Expense] = list(snapshot.expenses)
        self._bills: list[Bill] = list(snapshot.bills)
        self._payments: list[Payment] = list(snapshot.payments)

        self._today = today
        self._id_factory = id_factory
        self._strict = strict

        self._issued_ids: set[str] = {
            record.id
            for collection in (self._projects, self._expenses, self._bills, self._payments)
            for record in collection
        }

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def projects(self) -> tuple[Project, ...]:
        return tuple(self._projects)

    @property
    def expenses(self) -> tuple[Expense, ...]:
        return tuple(self._expenses)

    @property
    def bills(self) -> tuple[Bill, ...]:
        return tuple(self._bills)

    @property
    def payments(self) -> tuple[Payment, ...]:
        return tuple(self._payments)

    @property
    def strict(self) -> bool:
        return self._strict

    def get_project(self, project_id: str) -> Optional[Project]:
        return self._find(self._projects, project_id)

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        return self._find(self._expenses, expense_id)

    def get_bill(self, bill_id: str) -> Optional[Bill]:
        return self._find(self._bills, bill_id)

    def snapshot(self) -> LedgerSnapshot:
        """Current state of all four collections, ready to persist."""
        return LedgerSnapshot(
            projects=list(self._projects),
            expenses=list(self._expenses),
            bills=list(self._bills),
            payments=list(self._payments),
        )

    def spent_discrepancies(self) -> dict[str, tuple[Decimal, Decimal]]:
        """
        Recompute every project's spent total from its expenses.

        Returns {project_id: (stored_spent, recomputed_spent)} for the
        projects where the two disagree. Nothing is changed; this is a
        consistency check for snapshots loaded from storage.
        """
        totals: dict[str, Decimal] = {}
        for expense in self._expenses:
            totals[expense.project_id] = totals.get(expense.project_id, _ZERO) + expense.amount

        return {
            project.id: (project.spent, totals.get(project.id, _ZERO))
            for project in self._projects
            if project.spent != totals.get(project.id, _ZERO)
        }

    # =========================================================================
    # PROJECT COMMANDS
    # =========================================================================

    def add_project(self, data: Union[ProjectFields, dict]) -> Project:
        """
        Create a project.

        Whatever `spent` the caller supplies, a new project starts at zero.
        """
        fields = _coerce(ProjectFields, data)
        values = fields.model_dump(exclude={"spent"})
        project = Project(id=self._next_id(), spent=_ZERO, **values)
        self._projects = [*self._projects, project]

        logger.debug("project_added", project_id=project.id)
        return project

    def update_project(
        self,
        project_id: str,
        changes: Union[ProjectUpdate, dict],
    ) -> bool:
        """
        Merge the explicitly given fields into a project.

        `id` and `spent` cannot be changed this way. Returns False (or raises
        in strict mode) when the project does not exist.
        """
        update = _coerce(ProjectUpdate, changes)
        project = self.get_project(project_id)
        if project is None:
            return self._missing("project", project_id)

        merged = Project.model_validate({
            **project.model_dump(),
            **update.model_dump(exclude_unset=True),
        })
        self._replace_project(merged)
        return True

    def delete_project(self, project_id: str) -> bool:
        """
        Remove a project together with its expenses, bills and payments.

        The four collections are rebuilt first and swapped in together, so no
        reader sees the project gone while its dependents remain.
        """
        if self.get_project(project_id) is None:
            return self._missing("project", project_id)

        projects = [p for p in self._projects if p.id != project_id]
        expenses = [e for e in self._expenses if e.project_id != project_id]
        bills = [b for b in self._bills if b.project_id != project_id]
        payments = [p for p in self._payments if p.project_id != project_id]

        self._projects, self._expenses, self._bills, self._payments = (
            projects, expenses, bills, payments,
        )

        logger.debug("project_deleted", project_id=project_id)
        return True

    # =========================================================================
    # EXPENSE COMMANDS
    # =========================================================================

    def add_expense(self, data: Union[ExpenseFields, dict]) -> Expense:
        """
        Record an expense and charge it to its project.

        The expense is appended first; the owning project's spent total is
        then increased by the amount. An expense for an unknown project is
        kept with the "Unknown Project" label and charges nothing.
        """
        fields = _coerce(ExpenseFields, data)
        project = self.get_project(fields.project_id)

        expense = Expense(
            id=self._next_id(),
            project_name=self._project_name(project),
            **fields.model_dump(),
        )
        self._expenses = [*self._expenses, expense]

        if project is not None:
            self._replace_project(
                project.model_copy(update={"spent": project.spent + expense.amount})
            )

        logger.debug(
            "expense_added",
            expense_id=expense.id,
            project_id=expense.project_id,
            orphan=project is None,
        )
        return expense

    def delete_expense(self, expense_id: str) -> bool:
        """
        Delete an expense and take its amount back off the project.

        The project's spent total never drops below zero.
        """
        expense = self.get_expense(expense_id)
        if expense is None:
            return self._missing("expense", expense_id)

        project = self.get_project(expense.project_id)
        if project is not None:
            spent = max(_ZERO, project.spent - expense.amount)
            self._replace_project(project.model_copy(update={"spent": spent}))

        self._expenses = [e for e in self._expenses if e.id != expense_id]
        return True

    # =========================================================================
    # BILL COMMANDS
    # =========================================================================

    def add_bill(self, data: Union[BillFields, dict]) -> Bill:
        """
        Add a vendor bill.

        Status is decided once, here: overdue if the due date is strictly
        before today, pending otherwise. It is not re-evaluated later.
        """
        fields = _coerce(BillFields, data)
        project = self.get_project(fields.project_id)

        bill = Bill(
            id=self._next_id(),
            project_name=self._project_name(project),
            status=self.initial_bill_status(fields.due_date),
            **fields.model_dump(),
        )
        self._bills = [*self._bills, bill]

        logger.debug("bill_added", bill_id=bill.id, status=bill.status.value)
        return bill

    def initial_bill_status(self, due_date: date) -> BillStatus:
        if due_date < self._today():
            return BillStatus.OVERDUE
        return BillStatus.PENDING

    def update_bill_status(
        self,
        bill_id: str,
        status: Union[BillStatus, str],
    ) -> bool:
        """
        Overwrite a bill's status.

        Any status may follow any other (paid -> pending included).
        """
        status = BillStatus(status)
        bill = self.get_bill(bill_id)
        if bill is None:
            return self._missing("bill", bill_id)

        updated = bill.model_copy(update={"status": status})
        self._bills = [updated if b.id == bill_id else b for b in self._bills]
        return True

    def delete_bill(self, bill_id: str) -> bool:
        if self.get_bill(bill_id) is None:
            return self._missing("bill", bill_id)

        self._bills = [b for b in self._bills if b.id != bill_id]
        return True

    # =========================================================================
    # INTERNALS
    # =========================================================================

    @staticmethod
    def _find(records: Iterable, record_id: str):
        for record in records:
            if record.id == record_id:
                return record
        return None

    @staticmethod
    def _project_name(project: Optional[Project]) -> str:
        return project.name if project is not None else UNKNOWN_PROJECT_NAME

    def _replace_project(self, project: Project) -> None:
        self._projects = [
            project if p.id == project.id else p for p in self._projects
        ]

    def _next_id(self) -> str:
        for _ in range(_MAX_ID_ATTEMPTS):
            record_id = self._id_factory()
            if record_id not in self._issued_ids:
                self._issued_ids.add(record_id)
                return record_id
        raise LedgerError(
            f"id factory returned no unused id in {_MAX_ID_ATTEMPTS} attempts"
        )

    def _missing(self, entity_type: str, entity_id: str) -> bool:
        if self._strict:
            raise EntityNotFoundError(entity_type, entity_id)
        logger.debug("entity_not_found", entity_type=entity_type, entity_id=entity_id)
        return False
