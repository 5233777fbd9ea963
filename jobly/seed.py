"""
Seed data loader for the Jobly database.

Reads companies and jobs from a YAML document (``data/seed.yml`` by default)
and inserts them through the repositories, so seeding goes through the same
code paths as the API.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .common.errors import ConflictError
from .companies.db_operations import CompanyDB
from .jobs.db_operations import JobDB

logger = logging.getLogger(__name__)


@dataclass
class SeedData:
    """Companies and jobs to insert."""

    companies: list[dict[str, Any]] = field(default_factory=list)
    jobs: list[dict[str, Any]] = field(default_factory=list)


def _project_root() -> Path:
    """Return the project root path based on this file's location."""
    return Path(__file__).resolve().parent.parent


def _section(raw_config: Mapping[str, Any], name: str) -> list[dict[str, Any]]:
    section = raw_config.get(name) or []
    if not isinstance(section, list):
        raise ValueError(f"`{name}` section must be a list in seed file")
    for index, entry in enumerate(section):
        if not isinstance(entry, Mapping):
            raise ValueError(f"Entry {index} of `{name}` must be a mapping")
    return [dict(entry) for entry in section]


def load_seed_file(seed_path: str | None = None) -> SeedData:
    """
    Load seed data from a YAML file.

    Args:
        seed_path: Optional override for the file path. When omitted, the
            function reads `data/seed.yml` relative to the project root.

    Returns:
        SeedData with the companies and jobs sections.

    Raises:
        FileNotFoundError: If the seed file does not exist.
        ValueError: If the YAML cannot be parsed or has invalid structure.
    """
    path = Path(seed_path) if seed_path else _project_root() / "data" / "seed.yml"
    if not path.exists():
        logger.error("Seed file not found: %s", path)
        raise FileNotFoundError(f"Seed file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as handle:
            raw_config = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        logger.error("Failed to parse seed file: %s", exc)
        raise ValueError(f"Invalid YAML in seed file: {exc}") from exc

    if not raw_config:
        logger.warning("Seed file is empty: %s", path)
        return SeedData()
    if not isinstance(raw_config, Mapping):
        raise ValueError("Seed file must contain a mapping at the top level")

    seed = SeedData(
        companies=_section(raw_config, "companies"),
        jobs=_section(raw_config, "jobs"),
    )
    logger.info(
        "Loaded seed file",
        extra={"companies": len(seed.companies), "jobs": len(seed.jobs)},
    )
    return seed


def seed_database(company_db: CompanyDB, job_db: JobDB, seed: SeedData) -> dict[str, int]:
    """
    Insert seed companies, then seed jobs.

    Companies whose handle already exists, and jobs whose title already
    exists at the same company, are skipped so the seed can be re-run.

    Returns:
        Counts: ``companies_created``, ``companies_skipped``,
        ``jobs_created``, ``jobs_skipped``
    """
    stats = {
        "companies_created": 0,
        "companies_skipped": 0,
        "jobs_created": 0,
        "jobs_skipped": 0,
    }

    for company in seed.companies:
        try:
            company_db.create(company)
            stats["companies_created"] += 1
        except ConflictError:
            logger.info("Company already exists, skipping", extra={"handle": company.get("handle")})
            stats["companies_skipped"] += 1

    for job in seed.jobs:
        try:
            job_db.create(job)
            stats["jobs_created"] += 1
        except ConflictError:
            logger.info(
                "Job already exists, skipping",
                extra={"title": job.get("title"), "company_handle": job.get("companyHandle")},
            )
            stats["jobs_skipped"] += 1

    logger.info("Seeding completed", extra=stats)
    return stats


__all__ = ["SeedData", "load_seed_file", "seed_database"]
