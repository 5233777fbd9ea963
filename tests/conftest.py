"""
Pytest configuration and shared fixtures

This file contains test fixtures that can be used across all tests.
Fixtures are reusable components that set up test preconditions.

Learn more: https://docs.pytest.org/en/stable/fixture.html
"""

import os
from decimal import Decimal

import pytest


@pytest.fixture(scope="session")
def test_database_url() -> str | None:
    """
    Provide the database URL for integration tests.

    Integration tests truncate tables, so they only run against the database
    named by JOBLY_TEST_DATABASE_URL and never fall back to DATABASE_URL.

    Scope: session (created once per test run)

    Returns:
        str | None: PostgreSQL connection URL, or None when not configured
    """
    return os.getenv("JOBLY_TEST_DATABASE_URL")


@pytest.fixture(scope="function")
def company_row() -> dict:
    """
    Provide a company row as returned by the cursor (aliased columns).

    Scope: function (created fresh for each test)

    Returns:
        dict: Company in domain field names
    """
    return {
        "handle": "c1",
        "name": "C1",
        "description": "Desc1",
        "numEmployees": 1,
        "logoUrl": "http://c1.img",
    }


@pytest.fixture(scope="function")
def job_rows() -> list[dict]:
    """
    Provide job rows as returned by the cursor, newest id first.

    Equity comes back from PostgreSQL NUMERIC columns as Decimal.

    Returns:
        list[dict]: Job rows ordered by id descending
    """
    return [
        {"id": 3, "title": "Accountant", "salary": 70000,
         "equity": Decimal("0.2"), "companyHandle": "c1"},
        {"id": 2, "title": "Nurse", "salary": 60000,
         "equity": Decimal("0.1"), "companyHandle": "c2"},
        {"id": 1, "title": "Software Engineer", "salary": 50000,
         "equity": Decimal("0"), "companyHandle": "c1"},
    ]


# Mark tests based on their type for selective running
def pytest_configure(config):
    """
    Register custom pytest markers.

    This allows us to run specific test categories:
    - pytest -m unit        (run only unit tests)
    - pytest -m integration (run only integration tests)
    - pytest -m "not slow"  (skip slow tests)
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (isolated, fast)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires PostgreSQL)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running (>1 second)"
    )
