"""In-memory storage backend, used by tests and the `memory` backend setting."""

from typing import Optional

from src.services.storage.key_value import KeyValueStorage, corrupt_key


class InMemoryStorage(KeyValueStorage):
    """Keeps raw documents in a dict; nothing survives the process."""

    def __init__(self, documents: Optional[dict[str, str]] = None):
        self.documents: dict[str, str] = dict(documents or {})

    def _read(self, key: str) -> Optional[str]:
        return self.documents.get(key)

    def _write(self, key: str, document: str) -> None:
        self.documents[key] = document

    def _remove(self, key: str) -> None:
        self.documents.pop(key, None)

    def _preserve(self, key: str) -> None:
        self.documents[corrupt_key(key)] = self.documents[key]
