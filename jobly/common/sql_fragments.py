"""
Helpers that turn partial caller input into composable SQL fragments.

Responsibilities:
    * Build the ``SET`` clause of a partial update from a field map
    * Compile filter criteria into bound predicates via a declarative table
    * Join predicates into a single ``WHERE ... AND ...`` clause

Nothing in this module talks to the database. Every dynamic value ends up in a
bound parameter list; identifiers go through ``sql.Identifier``.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional

from psycopg2 import sql

from .errors import BadRequestError

logger = logging.getLogger(__name__)


def sql_for_partial_update(
    data: Mapping[str, Any],
    column_aliases: Optional[Mapping[str, str]] = None,
) -> tuple[sql.Composed, list[Any]]:
    """
    Build the assignment list used after ``SET`` in a partial update.

    Keys present in ``data`` are updated, including those explicitly set to
    ``None`` (which clears the column). Keys that are absent are left alone.

    Args:
        data: Mapping of domain field name to new value.
        column_aliases: Domain field name to column name, for fields whose
            column is named differently. Unlisted fields map verbatim.

    Returns:
        ``(set_clause, values)`` where ``set_clause`` renders as
        ``"col_a" = %s, "col_b" = %s`` and ``values`` lines up with the
        placeholders. Extra parameters (e.g. the key in the WHERE clause)
        must be appended after ``values``.

    Raises:
        BadRequestError: If ``data`` is empty.

    Example:
        >>> set_clause, values = sql_for_partial_update(
        ...     {"numEmployees": 10, "logoUrl": None},
        ...     {"numEmployees": "num_employees", "logoUrl": "logo_url"},
        ... )
        >>> values
        [10, None]
    """
    if not data:
        raise BadRequestError("No data")

    column_aliases = column_aliases or {}
    assignments = [
        sql.SQL("{} = {}").format(
            sql.Identifier(column_aliases.get(field_name, field_name)),
            sql.Placeholder(),
        )
        for field_name in data
    ]

    return sql.SQL(", ").join(assignments), list(data.values())


def combine_where_clauses(predicates: Sequence[sql.Composable]) -> sql.Composable:
    """
    Join predicate fragments into one WHERE clause.

    Args:
        predicates: Individual conditions without ``WHERE`` or ``AND``.

    Returns:
        An empty fragment when there is nothing to filter on, otherwise
        ``WHERE p1 AND p2 ...`` in the given order.
    """
    if not predicates:
        return sql.SQL("")
    return sql.SQL("WHERE ") + sql.SQL(" AND ").join(predicates)


def contains_pattern(value: Any) -> str:
    """Wrap ``value`` for a LIKE substring match, escaping LIKE wildcards."""
    escaped = (
        str(value)
        .replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )
    return f"%{escaped}%"


@dataclass(frozen=True)
class FilterSpec:
    """
    Declarative description of one filter key.

    Attributes:
        predicate: Condition with at most one ``%s`` placeholder.
        transform: Optional callable applied to the value before binding.
        flag: Boolean switch. The predicate is emitted without parameters
            when the value is truthy and skipped otherwise.
    """

    predicate: sql.Composable
    transform: Optional[Callable[[Any], Any]] = None
    flag: bool = False


def _allowed_list(names: Sequence[str]) -> str:
    """Render ``["a", "b", "c"]`` as ``a, b, and c``."""
    names = list(names)
    if len(names) <= 2:
        return " and ".join(names)
    return ", ".join(names[:-1]) + f", and {names[-1]}"


def compile_filters(
    criteria: Mapping[str, Any],
    filters: Mapping[str, FilterSpec],
    *,
    strict: bool = True,
) -> tuple[list[sql.Composable], list[Any]]:
    """
    Compile filter criteria into predicates and bound parameters.

    Keys are checked against ``filters`` as a whole before any predicate is
    built, so one bad key among several good ones fails the entire call.

    Args:
        criteria: Filter key to value, e.g. ``{"title": "eng", "minSalary": 1}``.
        filters: Table of recognized keys.
        strict: When True, unknown keys raise ``BadRequestError``. When False
            they are logged and ignored.

    Returns:
        ``(predicates, params)`` ready for ``combine_where_clauses`` and
        ``cursor.execute``.

    Raises:
        BadRequestError: On an unknown key in strict mode.
    """
    unknown = [key for key in criteria if key not in filters]
    if unknown:
        if strict:
            raise BadRequestError(
                f"{unknown[0]} is not a valid filter parameter. "
                f"Filter parameters allowed: {_allowed_list(list(filters))}"
            )
        logger.warning("Ignoring unknown filter parameters", extra={"keys": unknown})

    predicates: list[sql.Composable] = []
    params: list[Any] = []
    for key, value in criteria.items():
        spec = filters.get(key)
        if spec is None:
            continue
        if spec.flag:
            if value:
                predicates.append(spec.predicate)
            continue
        predicates.append(spec.predicate)
        params.append(spec.transform(value) if spec.transform else value)

    logger.debug(
        "Compiled filter criteria",
        extra={"keys": list(criteria), "predicates": len(predicates)},
    )
    return predicates, params


__all__ = [
    "FilterSpec",
    "combine_where_clauses",
    "compile_filters",
    "contains_pattern",
    "sql_for_partial_update",
]
