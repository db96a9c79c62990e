"""Exceptions shared across the ledger packages."""


class LedgerError(Exception):
    """Base exception for everything the ledger raises on purpose."""
    pass


class EntityNotFoundError(LedgerError):
    """
    A command referenced an id the store does not hold.

    Only raised when the store runs with strict lookups; by default
    unknown ids are ignored.
    """

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} not found: {entity_id}")
