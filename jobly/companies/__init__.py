"""Company repository."""

from .db_operations import CompanyDB

__all__ = ["CompanyDB"]
