"""
Tests for the domain store.

These cover the cross-record rules: spent bookkeeping on expense add and
delete, the project delete cascade, one-time bill status derivation, and
the "Unknown Project" label for orphans.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError

from conftest import TODAY, bill_for, expense_for
from src.exceptions import EntityNotFoundError, LedgerError
from src.models.ledger import (
    UNKNOWN_PROJECT_NAME,
    BillStatus,
    Expense,
    LedgerSnapshot,
    Payment,
    PaymentStatus,
    Project,
    ProjectFields,
    ProjectStatus,
    ProjectUpdate,
)
from src.store import DomainStore


class TestProjects:
    """Tests for project commands."""

    def test_add_project_assigns_id_and_zero_spent(self, store, project_fields):
        """A new project gets a fresh id and starts at zero spent."""
        project = store.add_project(project_fields)

        assert project.id
        assert project.spent == Decimal("0")
        assert store.projects == (project,)

    @pytest.mark.parametrize("spent", ["750", "-5"])
    def test_add_project_ignores_caller_spent(self, store, spent):
        """Caller-supplied spent is discarded, whatever its value."""
        project = store.add_project({"name": "Shop fit-out", "budget": "5000", "spent": spent})
        assert project.spent == Decimal("0")

    def test_add_project_accepts_camel_case_payload(self, store):
        """Form payloads with the stored field names are accepted."""
        project = store.add_project({
            "name": "Warehouse",
            "startDate": "2025-02-01",
            "endDate": "2025-08-01",
            "status": "on-hold",
        })
        assert project.start_date == date(2025, 2, 1)
        assert project.status == ProjectStatus.ON_HOLD

    def test_update_project_merges_given_fields(self, store, project_fields):
        """Only the fields passed are changed."""
        project = store.add_project(project_fields)

        assert store.update_project(project.id, ProjectUpdate(progress=40)) is True

        updated = store.get_project(project.id)
        assert updated.progress == 40
        assert updated.name == "Riverside Villa"
        assert updated.budget == Decimal("100000")

    def test_update_project_cannot_set_spent_or_id(self, store, project_fields):
        """spent and id are not caller-settable."""
        project = store.add_project(project_fields)

        store.update_project(project.id, {"spent": "999", "id": "hijack", "status": "completed"})

        updated = store.get_project(project.id)
        assert updated.id == project.id
        assert updated.spent == Decimal("0")
        assert updated.status == ProjectStatus.COMPLETED

    @pytest.mark.parametrize("field", ["name", "status", "budget", "progress"])
    def test_update_project_rejects_cleared_required_field(self, store, project_fields, field):
        """None is not a value for fields every project must have."""
        project = store.add_project(project_fields)

        with pytest.raises(ValidationError):
            store.update_project(project.id, {field: None})

        assert store.get_project(project.id) == project

    def test_update_project_clears_dates(self, store, project_fields):
        project = store.add_project(project_fields)

        assert store.update_project(project.id, {"endDate": None}) is True

        updated = store.get_project(project.id)
        assert updated.end_date is None
        assert updated.start_date == date(2025, 1, 10)

    def test_update_unknown_project_is_noop(self, store, project_fields):
        """Updating an unknown id changes nothing."""
        project = store.add_project(project_fields)

        assert store.update_project("missing", {"name": "Other"}) is False
        assert store.projects == (project,)

    def test_returned_records_are_immutable(self, store, project_fields):
        """Callers cannot edit spent behind the store's back."""
        project = store.add_project(project_fields)
        with pytest.raises(ValueError):
            project.spent = Decimal("10")


class TestExpenses:
    """Tests for expense commands and spent bookkeeping."""

    def test_add_expense_increments_spent(self, store, project_fields):
        """Recording an expense adds its amount to the project."""
        project = store.add_project(project_fields)

        expense = store.add_expense(expense_for(project.id, "15000"))

        assert expense.project_name == "Riverside Villa"
        assert store.get_project(project.id).spent == Decimal("15000")
        assert store.expenses == (expense,)

    @pytest.mark.parametrize("amounts", [
        ["100"],
        ["2500", "400.50", "99.50"],
        ["1", "1", "1", "1", "1", "1"],
        ["15000", "5000", "0.01"],
    ])
    def test_spent_equals_sum_of_expenses(self, store, project_fields, amounts):
        """After any sequence of adds, spent is the sum of the amounts."""
        project = store.add_project(project_fields)
        for amount in amounts:
            store.add_expense(expense_for(project.id, amount))

        expected = sum((Decimal(a) for a in amounts), Decimal("0"))
        assert store.get_project(project.id).spent == expected
        assert store.spent_discrepancies() == {}

    def test_delete_expense_restores_spent(self, store, project_fields):
        """Add then delete leaves spent where it was."""
        project = store.add_project(project_fields)
        store.add_expense(expense_for(project.id, "1200"))
        before = store.get_project(project.id).spent

        expense = store.add_expense(expense_for(project.id, "500"))
        store.delete_expense(expense.id)

        assert store.get_project(project.id).spent == before
        assert store.get_expense(expense.id) is None

    def test_delete_expense_clamps_spent_at_zero(self):
        """spent never goes negative."""
        snapshot = LedgerSnapshot(
            projects=[Project(id="p1", name="Old job", spent=Decimal("100"))],
            expenses=[Expense(
                id="e1", project_id="p1", project_name="Old job",
                category="Labor", amount=Decimal("500"), date=date(2025, 1, 1),
            )],
        )
        store = DomainStore(snapshot)

        store.delete_expense("e1")

        assert store.get_project("p1").spent == Decimal("0")
        assert store.expenses == ()

    def test_expense_for_unknown_project_is_labelled(self, store, project_fields):
        """Orphan expenses get the sentinel label and charge nothing."""
        project = store.add_project(project_fields)

        expense = store.add_expense(expense_for("no-such-project", "300"))

        assert expense.project_name == UNKNOWN_PROJECT_NAME
        assert store.get_project(project.id).spent == Decimal("0")

    def test_delete_orphan_expense(self, store):
        """Deleting an orphan expense works without a project to adjust."""
        expense = store.add_expense(expense_for("ghost", "300"))
        assert store.delete_expense(expense.id) is True
        assert store.expenses == ()

    def test_delete_unknown_expense_is_noop(self, store):
        assert store.delete_expense("missing") is False

    def test_project_name_is_a_snapshot(self, store, project_fields):
        """Renaming a project does not rename its existing expenses."""
        project = store.add_project(project_fields)
        expense = store.add_expense(expense_for(project.id, "50"))

        store.update_project(project.id, {"name": "Riverside Villa Phase 2"})

        assert store.get_expense(expense.id).project_name == "Riverside Villa"

    def test_category_is_not_enforced(self, store, project_fields):
        """Any category string is kept as given."""
        project = store.add_project(project_fields)
        expense = store.add_expense(expense_for(project.id, "10", category="Permits"))
        assert expense.category == "Permits"


class TestBills:
    """Tests for bill commands and status derivation."""

    def test_past_due_date_is_overdue(self, store, project_fields):
        project = store.add_project(project_fields)
        bill = store.add_bill(bill_for(project.id, TODAY - timedelta(days=1)))
        assert bill.status == BillStatus.OVERDUE

    def test_due_today_is_pending(self, store, project_fields):
        """A bill due today is not yet overdue."""
        project = store.add_project(project_fields)
        bill = store.add_bill(bill_for(project.id, TODAY))
        assert bill.status == BillStatus.PENDING

    def test_future_due_date_is_pending(self, store, project_fields):
        project = store.add_project(project_fields)
        bill = store.add_bill(bill_for(project.id, TODAY + timedelta(days=1)))
        assert bill.status == BillStatus.PENDING
        assert bill.project_name == "Riverside Villa"

    def test_status_is_not_recomputed_as_time_passes(self, project_fields):
        """A pending bill stays pending after its due date passes."""
        clock = [TODAY]
        store = DomainStore(today=lambda: clock[0])
        project = store.add_project(project_fields)
        bill = store.add_bill(bill_for(project.id, TODAY))

        clock[0] = TODAY + timedelta(days=30)

        assert store.get_bill(bill.id).status == BillStatus.PENDING

    def test_update_bill_status_any_to_any(self, store, project_fields):
        """Status updates are not restricted, paid can go back to pending."""
        project = store.add_project(project_fields)
        overdue = store.add_bill(bill_for(project.id, TODAY - timedelta(days=1)))
        pending = store.add_bill(bill_for(project.id, TODAY + timedelta(days=1)))

        store.update_bill_status(overdue.id, "paid")
        store.update_bill_status(pending.id, BillStatus.PAID)
        assert store.get_bill(overdue.id).status == BillStatus.PAID
        assert store.get_bill(pending.id).status == BillStatus.PAID

        store.update_bill_status(overdue.id, BillStatus.PENDING)
        assert store.get_bill(overdue.id).status == BillStatus.PENDING

    def test_bill_for_unknown_project_is_labelled(self, store):
        bill = store.add_bill(bill_for("ghost", TODAY))
        assert bill.project_name == UNKNOWN_PROJECT_NAME

    def test_bills_do_not_touch_spent(self, store, project_fields):
        project = store.add_project(project_fields)
        store.add_bill(bill_for(project.id, TODAY))
        assert store.get_project(project.id).spent == Decimal("0")

    def test_delete_bill(self, store, project_fields):
        project = store.add_project(project_fields)
        bill = store.add_bill(bill_for(project.id, TODAY))

        assert store.delete_bill(bill.id) is True
        assert store.bills == ()
        assert store.delete_bill(bill.id) is False

    def test_unknown_bill_status_update_is_noop(self, store):
        assert store.update_bill_status("missing", "paid") is False


class TestCascadeDelete:
    """Tests for deleting a project with dependents."""

    def test_delete_project_removes_dependents_only(self, project_fields):
        """Dependents of the deleted project go, other projects' records stay."""
        store = DomainStore(today=lambda: TODAY)
        doomed = store.add_project(project_fields)
        kept = store.add_project(ProjectFields(name="Office", budget=Decimal("5000")))

        store.add_expense(expense_for(doomed.id, "100"))
        kept_expense = store.add_expense(expense_for(kept.id, "200"))
        store.add_bill(bill_for(doomed.id, TODAY))
        kept_bill = store.add_bill(bill_for(kept.id, TODAY))

        # Payments arrive with the snapshot, so rebuild with one for each project
        store = DomainStore(
            store.snapshot().model_copy(update={"payments": [
                Payment(id="pay-1", project_id=doomed.id, amount=Decimal("900"),
                        status=PaymentStatus.RECEIVED, date=TODAY),
                Payment(id="pay-2", project_id=kept.id, amount=Decimal("400"),
                        status=PaymentStatus.PENDING, date=TODAY),
            ]}),
            today=lambda: TODAY,
        )

        assert store.delete_project(doomed.id) is True

        assert [p.id for p in store.projects] == [kept.id]
        assert store.expenses == (kept_expense,)
        assert store.bills == (kept_bill,)
        assert [p.id for p in store.payments] == ["pay-2"]
        assert store.get_project(kept.id).spent == Decimal("200")

    def test_delete_unknown_project_is_noop(self, store, project_fields):
        project = store.add_project(project_fields)
        store.add_expense(expense_for(project.id, "10"))

        assert store.delete_project("missing") is False
        assert len(store.projects) == 1
        assert len(store.expenses) == 1

    def test_worked_example(self, store):
        """Budget 100000: +15000, +5000, -first, then delete the project."""
        project = store.add_project(ProjectFields(name="P", budget=Decimal("100000")))

        first = store.add_expense(expense_for(project.id, "15000"))
        assert store.get_project(project.id).spent == Decimal("15000")

        second = store.add_expense(expense_for(project.id, "5000"))
        assert store.get_project(project.id).spent == Decimal("20000")

        store.delete_expense(first.id)
        assert store.get_project(project.id).spent == Decimal("5000")

        store.delete_project(project.id)
        assert second.id not in [e.id for e in store.expenses]


class TestIdentifiers:
    """Tests for id assignment."""

    def test_ids_are_unique_across_collections(self, store, project_fields):
        project = store.add_project(project_fields)
        expense = store.add_expense(expense_for(project.id, "1"))
        bill = store.add_bill(bill_for(project.id, TODAY))
        assert len({project.id, expense.id, bill.id}) == 3

    def test_repeated_ids_are_skipped(self):
        """An id the factory repeats is never handed out twice."""
        ids = iter(["a", "a", "b"])
        store = DomainStore(id_factory=lambda: next(ids))

        first = store.add_project({"name": "One"})
        second = store.add_project({"name": "Two"})

        assert (first.id, second.id) == ("a", "b")

    def test_deleted_ids_are_not_reused(self):
        ids = iter(["a", "a", "b"])
        store = DomainStore(id_factory=lambda: next(ids))

        first = store.add_project({"name": "One"})
        store.delete_project(first.id)
        second = store.add_project({"name": "Two"})

        assert second.id == "b"

    def test_exhausted_id_factory_raises(self):
        """A factory that only repeats used ids fails instead of spinning."""
        store = DomainStore(id_factory=lambda: "same")
        store.add_project({"name": "One"})

        with pytest.raises(LedgerError, match="no unused id"):
            store.add_project({"name": "Two"})

        assert len(store.projects) == 1

    def test_loaded_ids_are_not_reused(self):
        ids = iter(["p1", "p2"])
        store = DomainStore(
            LedgerSnapshot(projects=[Project(id="p1", name="Loaded")]),
            id_factory=lambda: next(ids),
        )
        assert store.add_project({"name": "New"}).id == "p2"


class TestStrictLookups:
    """Tests for strict mode, where unknown ids raise."""

    @pytest.fixture
    def strict_store(self) -> DomainStore:
        return DomainStore(today=lambda: TODAY, strict=True)

    def test_update_unknown_project_raises(self, strict_store):
        with pytest.raises(EntityNotFoundError, match="project not found: nope"):
            strict_store.update_project("nope", {"progress": 10})

    @pytest.mark.parametrize("command", [
        "delete_project",
        "delete_expense",
        "delete_bill",
    ])
    def test_deletes_raise(self, strict_store, command):
        with pytest.raises(EntityNotFoundError):
            getattr(strict_store, command)("nope")

    def test_update_bill_status_raises(self, strict_store):
        with pytest.raises(EntityNotFoundError) as excinfo:
            strict_store.update_bill_status("nope", "paid")
        assert excinfo.value.entity_type == "bill"

    def test_orphan_adds_still_succeed(self, strict_store):
        """Strict mode only affects lookups by id, not orphan records."""
        expense = strict_store.add_expense(expense_for("ghost", "5"))
        assert expense.project_name == UNKNOWN_PROJECT_NAME


class TestConsistencyCheck:
    """Tests for spent_discrepancies."""

    def test_reports_mismatched_projects(self):
        snapshot = LedgerSnapshot(
            projects=[
                Project(id="p1", name="Off", spent=Decimal("10")),
                Project(id="p2", name="On", spent=Decimal("7")),
            ],
            expenses=[
                Expense(id="e1", project_id="p1", project_name="Off",
                        category="Labor", amount=Decimal("25"), date=TODAY),
                Expense(id="e2", project_id="p2", project_name="On",
                        category="Labor", amount=Decimal("7"), date=TODAY),
            ],
        )
        store = DomainStore(snapshot)

        assert store.spent_discrepancies() == {"p1": (Decimal("10"), Decimal("25"))}

    def test_check_does_not_mutate(self):
        snapshot = LedgerSnapshot(projects=[Project(id="p1", name="Off", spent=Decimal("10"))])
        store = DomainStore(snapshot)

        store.spent_discrepancies()

        assert store.get_project("p1").spent == Decimal("10")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
