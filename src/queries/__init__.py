"""Query package."""

from src.queries.summary import LedgerQueries

__all__ = ["LedgerQueries"]
