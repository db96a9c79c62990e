"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
The ledger is stored as a directory of JSON documents; an in-memory backend
implements the same interfaces for tests.
"""

from src.services.storage.interface import (
    COLLECTION_KEYS,
    STORAGE_KEYS,
    CorruptSnapshotError,
    LedgerStorageInterface,
    SessionStorageInterface,
    StorageError,
)
from src.services.storage.key_value import KeyValueStorage, corrupt_key
from src.services.storage.json_file import JsonFileStorage
from src.services.storage.memory import InMemoryStorage

__all__ = [
    # Interfaces
    "LedgerStorageInterface",
    "SessionStorageInterface",
    "KeyValueStorage",
    # Keys
    "COLLECTION_KEYS",
    "STORAGE_KEYS",
    "corrupt_key",
    # Exceptions
    "CorruptSnapshotError",
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
