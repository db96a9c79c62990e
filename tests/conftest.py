"""Shared fixtures for the ledger tests."""

from datetime import date
from decimal import Decimal

import pytest

from src.models.ledger import BillFields, ExpenseFields, ProjectFields, ProjectStatus
from src.store import DomainStore


TODAY = date(2025, 6, 15)


@pytest.fixture
def store() -> DomainStore:
    """A store whose clock is pinned to TODAY."""
    return DomainStore(today=lambda: TODAY)


@pytest.fixture
def project_fields() -> ProjectFields:
    return ProjectFields(
        name="Riverside Villa",
        client="Mehta Builders",
        location="Pune",
        status=ProjectStatus.ACTIVE,
        budget=Decimal("100000"),
        start_date=date(2025, 1, 10),
        end_date=date(2025, 12, 20),
    )


def expense_for(project_id: str, amount: str, **overrides) -> ExpenseFields:
    values = {
        "project_id": project_id,
        "category": "Materials",
        "description": "Cement bags",
        "amount": Decimal(amount),
        "date": date(2025, 6, 1),
        "payment_method": "Cash",
    }
    values.update(overrides)
    return ExpenseFields(**values)


def bill_for(project_id: str, due_date: date, **overrides) -> BillFields:
    values = {
        "project_id": project_id,
        "vendor": "Shree Steel",
        "bill_number": "INV-1001",
        "amount": Decimal("12500"),
        "date": date(2025, 6, 1),
        "due_date": due_date,
        "description": "TMT bars",
    }
    values.update(overrides)
    return BillFields(**values)
