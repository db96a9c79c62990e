"""
Key-Value Storage Base

Both backends keep the ledger the way the web app kept it in local
storage: one document per key, each collection a JSON array of records
using the camelCase field names.

Concrete backends only provide `_read`, `_write`, `_remove` and `_preserve`;
turning documents into records (and tolerating bad ones) happens here.
"""

import json
from abc import abstractmethod
from decimal import Decimal
from typing import Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from src.models.ledger import Bill, Expense, LedgerSnapshot, Payment, Project
from src.models.session import Session
from src.services.storage.interface import (
    COLLECTION_KEYS,
    STORAGE_KEYS,
    CorruptSnapshotError,
    LedgerStorageInterface,
    SessionStorageInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)

_ADAPTERS: dict[str, TypeAdapter] = {
    "projects": TypeAdapter(list[Project]),
    "expenses": TypeAdapter(list[Expense]),
    "bills": TypeAdapter(list[Bill]),
    "payments": TypeAdapter(list[Payment]),
}

_MODELS = {
    "projects": Project,
    "expenses": Expense,
    "bills": Bill,
    "payments": Payment,
}


def corrupt_key(key: str) -> str:
    """Key under which a damaged document is kept before it is overwritten."""
    return f"{key}.corrupt"


class KeyValueStorage(LedgerStorageInterface, SessionStorageInterface):
    """
    Snapshot and session storage over a string-keyed document store.

    A collection whose document cannot be read loads as empty, and invalid
    records are skipped, so one damaged key never prevents the app from
    starting. The damaged document is copied to `corrupt_key(key)` before
    the next save can replace it.
    """

    # -------------------------------------------------------------------------
    # Backend primitives
    # -------------------------------------------------------------------------

    @abstractmethod
    def _read(self, key: str) -> Optional[str]:
        """
        Return the raw document stored under key, or None if absent.

        Raises CorruptSnapshotError if the stored bytes are not text.
        """

    @abstractmethod
    def _write(self, key: str, document: str) -> None:
        """Store a raw document under key, replacing any previous one."""

    @abstractmethod
    def _remove(self, key: str) -> None:
        """Delete key if present."""

    @abstractmethod
    def _preserve(self, key: str) -> None:
        """Copy the document stored under key to corrupt_key(key)."""

    # -------------------------------------------------------------------------
    # Ledger snapshot
    # -------------------------------------------------------------------------

    def load_snapshot(self) -> Optional[LedgerSnapshot]:
        collections = {}
        found = False

        for collection, key in COLLECTION_KEYS.items():
            try:
                document = self._read(key)
            except CorruptSnapshotError as e:
                found = True
                self._unreadable(e)
                collections[collection] = []
                continue

            if document is None:
                collections[collection] = []
                continue

            found = True
            collections[collection] = self._parse_collection(collection, document)

        if not found:
            return None
        return LedgerSnapshot(**collections)

    def save_snapshot(self, snapshot: LedgerSnapshot) -> None:
        for collection, key in COLLECTION_KEYS.items():
            records = getattr(snapshot, collection)
            document = _ADAPTERS[collection].dump_json(records, by_alias=True)
            self._write(key, document.decode("utf-8"))

    def _parse_collection(self, collection: str, document: str) -> list:
        """
        Validate a stored collection record by record.

        Invalid records are dropped and logged. Whenever anything is dropped,
        the stored document is copied aside first, since the next save
        replaces it with the records that survived.
        """
        key = COLLECTION_KEYS[collection]
        try:
            items = json.loads(document, parse_float=Decimal)
        except json.JSONDecodeError as e:
            self._unreadable(CorruptSnapshotError(key, f"invalid JSON: {e.msg}"))
            return []

        if not isinstance(items, list):
            self._unreadable(CorruptSnapshotError(key, "expected a list of records"))
            return []

        model = _MODELS[collection]
        records = []
        for index, item in enumerate(items):
            try:
                records.append(model.model_validate(item))
            except ValidationError as e:
                logger.warning(
                    "stored_record_rejected",
                    key=key,
                    index=index,
                    errors=e.error_count(),
                )

        if len(records) < len(items):
            self._keep_copy(key)
        return records

    def _unreadable(self, error: CorruptSnapshotError) -> None:
        logger.warning(
            "stored_collection_unreadable",
            key=error.key,
            reason=error.reason,
        )
        self._keep_copy(error.key)

    def _keep_copy(self, key: str) -> None:
        try:
            self._preserve(key)
        except StorageError as e:
            logger.warning("stored_copy_failed", key=key, error=str(e))
        else:
            logger.info("stored_document_preserved", key=key, copy=corrupt_key(key))

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    def load_session(self) -> Session:
        authenticated = self._read_json(STORAGE_KEYS["AUTHENTICATED"]) is True
        username = self._read_json(STORAGE_KEYS["USERNAME"])

        # Both must be present, a bare flag does not restore a session
        if authenticated and isinstance(username, str) and username:
            return Session(authenticated=True, username=username)
        return Session.anonymous()

    def save_session(self, session: Session) -> None:
        self._write(STORAGE_KEYS["AUTHENTICATED"], json.dumps(session.authenticated))
        self._write(STORAGE_KEYS["USERNAME"], json.dumps(session.username))

    def clear_session(self) -> None:
        self._remove(STORAGE_KEYS["AUTHENTICATED"])
        self._remove(STORAGE_KEYS["USERNAME"])

    def _read_json(self, key: str):
        try:
            document = self._read(key)
        except CorruptSnapshotError as e:
            logger.warning("stored_value_unreadable", key=key, reason=e.reason)
            return None
        if document is None:
            return None
        try:
            return json.loads(document)
        except json.JSONDecodeError:
            logger.warning("stored_value_unreadable", key=key)
            return None
