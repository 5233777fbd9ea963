"""
Database operations for companies.

This module handles all reads and writes against the ``companies`` table:
- Create, fetch, partially update and delete companies
- Filtered listing by name and employee count range
- Attaching a company's job postings on detail fetches
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from psycopg2 import errors as pg_errors
from psycopg2 import sql

from ..common.database import Database
from ..common.errors import BadRequestError, ConflictError, NotFoundError
from ..common.sql_fragments import (
    FilterSpec,
    combine_where_clauses,
    compile_filters,
    contains_pattern,
    sql_for_partial_update,
)
from ..jobs.db_operations import fetch_company_jobs

logger = logging.getLogger(__name__)

COMPANY_COLUMNS = sql.SQL(
    "handle, name, description, "
    'num_employees AS "numEmployees", logo_url AS "logoUrl"'
)

COMPANY_COLUMN_ALIASES = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

# PostgreSQL's default name for the UNIQUE (name) constraint in sql/schema.sql
NAME_CONSTRAINT = "companies_name_key"

COMPANY_FILTERS: dict[str, FilterSpec] = {
    "name": FilterSpec(sql.SQL("name ILIKE %s"), transform=contains_pattern),
    "minEmployees": FilterSpec(sql.SQL("num_employees >= %s")),
    "maxEmployees": FilterSpec(sql.SQL("num_employees <= %s")),
}


class CompanyDB:
    """
    Repository for companies, ordered by name everywhere.

    Unknown filter keys are ignored here; request validation upstream is
    expected to have rejected them already.
    """

    def __init__(self, db: Database):
        self.db = db

    def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Insert a company.

        Args:
            data: ``{handle, name, description, numEmployees, logoUrl}``

        Returns:
            ``{handle, name, description, numEmployees, logoUrl}``

        Raises:
            ConflictError: If the handle (or name) is already taken
        """
        query = sql.SQL(
            "INSERT INTO companies "
            "(handle, name, description, num_employees, logo_url) "
            "VALUES (%s, %s, %s, %s, %s) "
            "RETURNING {columns}"
        ).format(columns=COMPANY_COLUMNS)
        params = (
            data.get("handle"),
            data.get("name"),
            data.get("description"),
            data.get("numEmployees"),
            data.get("logoUrl"),
        )

        try:
            with self.db.cursor() as cur:
                cur.execute(query, params)
                company = dict(cur.fetchone())
        except pg_errors.UniqueViolation as exc:
            if getattr(exc.diag, "constraint_name", None) == NAME_CONSTRAINT:
                raise ConflictError(f"Duplicate company name: {data.get('name')}") from exc
            raise ConflictError(f"Duplicate company: {data.get('handle')}") from exc

        logger.info("Company created", extra={"handle": company["handle"]})
        return company

    def find_all(
        self,
        where: Optional[sql.Composable] = None,
        params: Sequence[Any] = (),
    ) -> list[dict[str, Any]]:
        """
        List companies ordered by name.

        Returns:
            ``[{handle, name, description, numEmployees, logoUrl}, ...]``
        """
        query = sql.SQL("SELECT {columns} FROM companies {where} ORDER BY name").format(
            columns=COMPANY_COLUMNS,
            where=where if where is not None else sql.SQL(""),
        )

        with self.db.cursor() as cur:
            cur.execute(query, list(params))
            rows = cur.fetchall()

        logger.debug("Fetched companies", extra={"count": len(rows)})
        return [dict(row) for row in rows]

    def find_filtered(self, criteria: Mapping[str, Any]) -> list[dict[str, Any]]:
        """
        List companies matching ``criteria``.

        Supported keys: ``name`` (case-insensitive substring), ``minEmployees``
        and ``maxEmployees`` (both inclusive). Any subset may be combined.

        Raises:
            BadRequestError: If ``minEmployees`` exceeds ``maxEmployees``
        """
        min_employees = criteria.get("minEmployees")
        max_employees = criteria.get("maxEmployees")
        if (
            min_employees is not None
            and max_employees is not None
            and min_employees > max_employees
        ):
            raise BadRequestError("minEmployees cannot be greater than maxEmployees")

        predicates, params = compile_filters(criteria, COMPANY_FILTERS, strict=False)
        return self.find_all(combine_where_clauses(predicates), params)

    def get(self, handle: str) -> dict[str, Any]:
        """
        Fetch a company with its jobs attached.

        Returns:
            ``{handle, name, description, numEmployees, logoUrl, jobs}``
            where jobs is ``[{id, title, salary, equity, companyHandle}, ...]``

        Raises:
            NotFoundError: If no such company
        """
        query = sql.SQL("SELECT {columns} FROM companies WHERE handle = %s").format(
            columns=COMPANY_COLUMNS
        )

        with self.db.cursor() as cur:
            cur.execute(query, (handle,))
            row = cur.fetchone()
            jobs = fetch_company_jobs(cur, handle) if row is not None else []

        if row is None:
            raise NotFoundError(f"No company: {handle}")

        company = dict(row)
        company["jobs"] = jobs
        return company

    def update(self, handle: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Partially update a company. Only keys present in ``data`` change.

        Data can include: ``{name, description, numEmployees, logoUrl}``

        Raises:
            BadRequestError: If ``data`` is empty or tries to change the handle
            NotFoundError: If no such company
        """
        if "handle" in data:
            raise BadRequestError("Company handle cannot be updated")
        set_clause, values = sql_for_partial_update(data, COMPANY_COLUMN_ALIASES)

        query = sql.SQL(
            "UPDATE companies SET {set_clause} WHERE handle = %s RETURNING {columns}"
        ).format(set_clause=set_clause, columns=COMPANY_COLUMNS)

        with self.db.cursor() as cur:
            cur.execute(query, [*values, handle])
            row = cur.fetchone()

        if row is None:
            logger.warning("No rows updated - company not found", extra={"handle": handle})
            raise NotFoundError(f"No company: {handle}")

        logger.info("Company updated", extra={"handle": handle, "fields": list(data)})
        return dict(row)

    def remove(self, handle: str) -> None:
        """
        Delete a company (its jobs go with it via ON DELETE CASCADE).

        Raises:
            NotFoundError: If no such company
        """
        with self.db.cursor() as cur:
            cur.execute(
                "DELETE FROM companies WHERE handle = %s RETURNING handle", (handle,)
            )
            row = cur.fetchone()

        if row is None:
            raise NotFoundError(f"No company: {handle}")
        logger.info("Company removed", extra={"handle": handle})


__all__ = ["CompanyDB", "COMPANY_FILTERS"]
