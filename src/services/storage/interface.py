"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the domain store free of I/O
2. Use in-memory storage for testing
3. Swap the JSON directory for something else later

The interface is intentionally small: the ledger is saved and restored as
a whole snapshot, never record by record.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.exceptions import LedgerError
from src.models.ledger import LedgerSnapshot
from src.models.session import Session


# Keys the ledger is stored under, one document per key
STORAGE_KEYS = {
    "AUTHENTICATED": "contractor_app_authenticated",
    "USERNAME": "contractor_app_username",
    "PROJECTS": "contractor_app_projects",
    "EXPENSES": "contractor_app_expenses",
    "BILLS": "contractor_app_bills",
    "PAYMENTS": "contractor_app_payments",
}

# Snapshot collection -> storage key
COLLECTION_KEYS = {
    "projects": STORAGE_KEYS["PROJECTS"],
    "expenses": STORAGE_KEYS["EXPENSES"],
    "bills": STORAGE_KEYS["BILLS"],
    "payments": STORAGE_KEYS["PAYMENTS"],
}


class LedgerStorageInterface(ABC):
    """
    Abstract interface for persisting the ledger snapshot.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def load_snapshot(self) -> Optional[LedgerSnapshot]:
        """
        Restore the last saved ledger.

        Returns:
            The saved snapshot, or None if nothing was ever saved.
            A collection that cannot be read comes back empty
            instead of failing the whole load.
        """
        pass

    @abstractmethod
    def save_snapshot(self, snapshot: LedgerSnapshot) -> None:
        """
        Durably save the full ledger.

        Args:
            snapshot: Every collection as it stands after a change

        Raises:
            StorageError: If the save fails
        """
        pass


class SessionStorageInterface(ABC):
    """Abstract interface for the login flag and display name."""

    @abstractmethod
    def load_session(self) -> Session:
        """
        Restore the saved session.

        Returns:
            The saved session, or an anonymous one if none was saved
        """
        pass

    @abstractmethod
    def save_session(self, session: Session) -> None:
        """Save the session after a successful login."""
        pass

    @abstractmethod
    def clear_session(self) -> None:
        """Forget the session on logout."""
        pass


class StorageError(LedgerError):
    """Base exception for storage operations."""
    pass


class CorruptSnapshotError(StorageError):
    """A stored document could not be parsed into ledger records."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Stored data under '{key}' is unreadable: {reason}")
