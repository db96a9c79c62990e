"""Services package."""

from src.services.storage import (
    CorruptSnapshotError,
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
    LedgerStorageInterface,
    SessionStorageInterface,
    StorageError,
)

__all__ = [
    # Storage services
    "CorruptSnapshotError",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
    "LedgerStorageInterface",
    "SessionStorageInterface",
    "StorageError",
]
