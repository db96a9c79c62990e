"""In-memory domain store for the ledger collections."""

from src.store.domain_store import DomainStore

__all__ = ["DomainStore"]
