"""
Database operations for job postings.

This module handles all reads and writes against the ``jobs`` table:
- Create, fetch, partially update and delete postings
- Filtered listing by title, minimum salary and equity
- Mapping rows to domain dicts (``companyHandle``, equity as a decimal string)
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from decimal import Decimal, InvalidOperation
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

logger = logging.getLogger(__name__)

JOB_COLUMNS = sql.SQL(
    'id, title, salary, equity, company_handle AS "companyHandle"'
)

JOB_COLUMN_ALIASES = {"companyHandle": "company_handle"}

JOB_FILTERS: dict[str, FilterSpec] = {
    "title": FilterSpec(sql.SQL("title ILIKE %s"), transform=contains_pattern),
    "minSalary": FilterSpec(sql.SQL("salary >= %s")),
    "hasEquity": FilterSpec(sql.SQL("equity > 0"), flag=True),
}


def coerce_equity(value: Any) -> Optional[Decimal]:
    """
    Convert caller equity input to ``Decimal``.

    Floats go through ``str`` first so ``0.1`` is bound as ``Decimal("0.1")``
    rather than its binary approximation.

    Raises:
        BadRequestError: If the value is not a number
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise BadRequestError(f"Invalid equity: {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise BadRequestError(f"Invalid equity: {value!r}") from exc


def job_from_row(row: Mapping[str, Any]) -> dict[str, Any]:
    """Map a cursor row to a job dict with equity rendered as a decimal string."""
    job = dict(row)
    equity = job.get("equity")
    if equity is not None:
        job["equity"] = format(Decimal(equity), "f")
    return job


def fetch_company_jobs(cur, handle: str) -> list[dict[str, Any]]:
    """
    List a company's jobs in ascending id order on an already-open cursor.

    Lets callers read a company and its jobs in one unit of work.
    """
    query = sql.SQL(
        "SELECT {columns} FROM jobs WHERE company_handle = %s ORDER BY id"
    ).format(columns=JOB_COLUMNS)
    cur.execute(query, (handle,))
    return [job_from_row(row) for row in cur.fetchall()]


class JobDB:
    """
    Repository for job postings.

    Results are always ordered by ``id`` descending, except for
    ``find_by_company`` which lists a company's postings oldest first.
    """

    def __init__(self, db: Database):
        self.db = db

    def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Insert a job posting.

        Args:
            data: ``{title, salary, equity, companyHandle}``

        Returns:
            ``{id, title, salary, equity, companyHandle}`` as stored

        Raises:
            ConflictError: If the store reports a uniqueness violation
        """
        query = sql.SQL(
            "INSERT INTO jobs (title, salary, equity, company_handle) "
            "VALUES (%s, %s, %s, %s) "
            "RETURNING {columns}"
        ).format(columns=JOB_COLUMNS)
        params = (
            data.get("title"),
            data.get("salary"),
            coerce_equity(data.get("equity")),
            data.get("companyHandle"),
        )

        try:
            with self.db.cursor() as cur:
                cur.execute(query, params)
                row = cur.fetchone()
        except pg_errors.UniqueViolation as exc:
            raise ConflictError(
                f"Duplicate job: {data.get('title')} at {data.get('companyHandle')}"
            ) from exc

        job = job_from_row(row)
        logger.info(
            "Job created",
            extra={"job_id": job["id"], "company_handle": job["companyHandle"]},
        )
        return job

    def find_all(
        self,
        where: Optional[sql.Composable] = None,
        params: Sequence[Any] = (),
    ) -> list[dict[str, Any]]:
        """
        List jobs, newest id first.

        Args:
            where: Already composed WHERE clause, or None for every job
            params: Bound parameters for ``where``

        Returns:
            ``[{id, title, salary, equity, companyHandle}, ...]``
        """
        query = sql.SQL("SELECT {columns} FROM jobs {where} ORDER BY id DESC").format(
            columns=JOB_COLUMNS,
            where=where if where is not None else sql.SQL(""),
        )

        with self.db.cursor() as cur:
            cur.execute(query, list(params))
            rows = cur.fetchall()

        logger.debug("Fetched jobs", extra={"count": len(rows)})
        return [job_from_row(row) for row in rows]

    def find_filtered(self, criteria: Mapping[str, Any]) -> list[dict[str, Any]]:
        """
        List jobs matching ``criteria``.

        Recognized keys: ``title`` (case-insensitive substring), ``minSalary``
        (inclusive) and ``hasEquity`` (True keeps only equity > 0).

        Raises:
            BadRequestError: If any other key is present
        """
        predicates, params = compile_filters(criteria, JOB_FILTERS)
        return self.find_all(combine_where_clauses(predicates), params)

    def find_by_company(self, handle: str) -> list[dict[str, Any]]:
        """List a company's jobs in ascending id order."""
        with self.db.cursor() as cur:
            return fetch_company_jobs(cur, handle)

    def get(self, job_id: int) -> dict[str, Any]:
        """
        Fetch one job by id.

        Raises:
            NotFoundError: If no such job
        """
        query = sql.SQL("SELECT {columns} FROM jobs WHERE id = %s").format(
            columns=JOB_COLUMNS
        )

        with self.db.cursor() as cur:
            cur.execute(query, (job_id,))
            row = cur.fetchone()

        if row is None:
            raise NotFoundError(f"No job: {job_id}")
        return job_from_row(row)

    def update(self, job_id: int, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Partially update a job. Only keys present in ``data`` change.

        Data can include: ``{title, salary, equity, companyHandle}``

        Raises:
            BadRequestError: If ``data`` is empty or tries to change ``id``
            NotFoundError: If no such job
        """
        if "id" in data:
            raise BadRequestError("Job id cannot be updated")
        data = {
            key: coerce_equity(value) if key == "equity" else value
            for key, value in data.items()
        }
        set_clause, values = sql_for_partial_update(data, JOB_COLUMN_ALIASES)

        query = sql.SQL(
            "UPDATE jobs SET {set_clause} WHERE id = %s RETURNING {columns}"
        ).format(set_clause=set_clause, columns=JOB_COLUMNS)

        with self.db.cursor() as cur:
            cur.execute(query, [*values, job_id])
            row = cur.fetchone()

        if row is None:
            logger.warning("No rows updated - job not found", extra={"job_id": job_id})
            raise NotFoundError(f"No job: {job_id}")

        logger.info("Job updated", extra={"job_id": job_id, "fields": list(data)})
        return job_from_row(row)

    def remove(self, job_id: int) -> None:
        """
        Delete a job.

        Raises:
            NotFoundError: If no such job
        """
        with self.db.cursor() as cur:
            cur.execute("DELETE FROM jobs WHERE id = %s RETURNING id", (job_id,))
            row = cur.fetchone()

        if row is None:
            raise NotFoundError(f"No job: {job_id}")
        logger.info("Job removed", extra={"job_id": job_id})


__all__ = ["JobDB", "JOB_FILTERS", "coerce_equity", "fetch_company_jobs", "job_from_row"]
