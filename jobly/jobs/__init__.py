"""Job posting repository."""

from .db_operations import JobDB

__all__ = ["JobDB"]
