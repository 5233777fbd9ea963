"""Shared building blocks for the Jobly repositories."""

from .database import Database
from .errors import BadRequestError, ConflictError, JoblyError, NotFoundError
from .sql_fragments import (
    FilterSpec,
    combine_where_clauses,
    compile_filters,
    contains_pattern,
    sql_for_partial_update,
)

__all__ = [
    "Database",
    "JoblyError",
    "BadRequestError",
    "ConflictError",
    "NotFoundError",
    "FilterSpec",
    "combine_where_clauses",
    "compile_filters",
    "contains_pattern",
    "sql_for_partial_update",
]
