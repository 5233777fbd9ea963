"""
Integration Tests for the company and job repositories

These tests run the repositories against a real PostgreSQL database.

⚠️  THE TABLES ARE DROPPED AND RECREATED BEFORE EVERY TEST

They only run when JOBLY_TEST_DATABASE_URL points at a dedicated database:
    createdb jobly_test
    export JOBLY_TEST_DATABASE_URL="postgresql://...jobly_test"
    pytest tests/integration -m integration -v
"""

from pathlib import Path

import pytest

from jobly.common.database import Database
from jobly.common.errors import BadRequestError, ConflictError, NotFoundError
from jobly.companies.db_operations import CompanyDB
from jobly.jobs.db_operations import JobDB

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "sql" / "schema.sql"

COMPANIES = [
    {"handle": f"c{i}", "name": f"C{i}", "description": f"Desc{i}",
     "numEmployees": i, "logoUrl": f"http://c{i}.img"}
    for i in (1, 2, 3)
]

# Inserted in this order so ids are 1, 2, 3
JOBS = [
    {"title": "Software Engineer", "salary": 50000, "equity": "0", "companyHandle": "c1"},
    {"title": "Nurse", "salary": 60000, "equity": "0.1", "companyHandle": "c2"},
    {"title": "Accountant", "salary": 70000, "equity": "0.2", "companyHandle": "c1"},
]

pytestmark = pytest.mark.integration


@pytest.fixture
def db(test_database_url):
    if not test_database_url:
        pytest.skip("JOBLY_TEST_DATABASE_URL not set - integration tests need a dedicated database")

    database = Database(test_database_url)
    with database.cursor() as cur:
        cur.execute("DROP TABLE IF EXISTS jobs, companies")
        cur.execute(SCHEMA_PATH.read_text())
    return database


@pytest.fixture
def job_db(db):
    return JobDB(db)


@pytest.fixture
def company_db(db):
    return CompanyDB(db)


@pytest.fixture
def seeded(company_db, job_db):
    for company in COMPANIES:
        company_db.create(company)
    return [job_db.create(job) for job in JOBS]


# ============================================================================
# Companies
# ============================================================================

class TestCompanies:

    def test_create_and_duplicate(self, company_db, seeded):
        new = {"handle": "new", "name": "New", "description": "New Description",
               "numEmployees": 1, "logoUrl": "http://new.img"}

        assert company_db.create(new) == new
        with pytest.raises(ConflictError):
            company_db.create(new)

    def test_duplicate_name(self, company_db, seeded):
        with pytest.raises(ConflictError, match="Duplicate company name: C1"):
            company_db.create({**COMPANIES[0], "handle": "c9"})

    def test_find_all_ordered_by_name(self, company_db, seeded):
        assert company_db.find_all() == COMPANIES

    def test_filter_name_case_insensitive(self, company_db, seeded):
        assert company_db.find_filtered({"name": "C2"}) == [COMPANIES[1]]
        assert company_db.find_filtered({"name": "c2"}) == [COMPANIES[1]]

    def test_filter_range(self, company_db, seeded):
        assert company_db.find_filtered({"minEmployees": 2}) == COMPANIES[1:]
        assert company_db.find_filtered({"maxEmployees": 2}) == COMPANIES[:2]
        assert company_db.find_filtered({"minEmployees": 2, "maxEmployees": 2}) == [COMPANIES[1]]

    def test_filter_name_treats_wildcards_literally(self, company_db, seeded):
        assert company_db.find_filtered({"name": "%"}) == []

    def test_get_nests_jobs_by_id(self, company_db, seeded):
        company = company_db.get("c1")

        assert [job["title"] for job in company["jobs"]] == ["Software Engineer", "Accountant"]
        assert [job["equity"] for job in company["jobs"]] == ["0", "0.2"]

    def test_get_without_jobs(self, company_db, seeded):
        assert company_db.get("c3")["jobs"] == []

    def test_get_not_found(self, company_db, seeded):
        with pytest.raises(NotFoundError):
            company_db.get("nope")

    def test_update_with_nulls(self, company_db, seeded):
        company = company_db.update("c1", {"numEmployees": None, "logoUrl": None})

        assert company == {"handle": "c1", "name": "C1", "description": "Desc1",
                           "numEmployees": None, "logoUrl": None}

    def test_update_leaves_omitted_fields(self, company_db, seeded):
        company = company_db.update("c1", {"name": "New"})

        assert company["numEmployees"] == 1
        assert company["logoUrl"] == "http://c1.img"

    def test_update_errors(self, company_db, seeded):
        with pytest.raises(NotFoundError):
            company_db.update("nope", {"name": "New"})
        with pytest.raises(BadRequestError):
            company_db.update("c1", {})

    def test_remove(self, company_db, job_db, seeded):
        company_db.remove("c1")

        with pytest.raises(NotFoundError):
            company_db.get("c1")
        assert [job["companyHandle"] for job in job_db.find_all()] == ["c2"]
        with pytest.raises(NotFoundError):
            company_db.remove("c1")


# ============================================================================
# Jobs
# ============================================================================

class TestJobs:

    def test_create_returns_decimal_string(self, job_db, seeded):
        job = job_db.create({"title": "Janitor", "salary": 75000, "equity": 0.05,
                             "companyHandle": "c3"})

        assert job["equity"] == "0.05"
        assert isinstance(job["id"], int)

    def test_duplicate_title_at_same_company(self, job_db, seeded):
        with pytest.raises(ConflictError, match="Duplicate job: Nurse at c2"):
            job_db.create(JOBS[1])

        job = job_db.create({**JOBS[1], "companyHandle": "c3"})
        assert job["companyHandle"] == "c3"

    def test_find_all_newest_first(self, job_db, seeded):
        assert [job["title"] for job in job_db.find_all()] == [
            "Accountant", "Nurse", "Software Engineer",
        ]

    def test_filter_min_salary_orders_by_id(self, job_db, seeded):
        jobs = job_db.find_filtered({"minSalary": 60000})

        assert [job["salary"] for job in jobs] == [70000, 60000]

    def test_filter_title(self, job_db, seeded):
        assert [j["title"] for j in job_db.find_filtered({"title": "NuRsE"})] == ["Nurse"]
        assert [j["title"] for j in job_db.find_filtered({"title": "ware"})] == [
            "Software Engineer"
        ]

    def test_filter_has_equity(self, job_db, seeded):
        assert [j["title"] for j in job_db.find_filtered({"hasEquity": True})] == [
            "Accountant", "Nurse",
        ]
        assert len(job_db.find_filtered({"hasEquity": False})) == 3

    def test_filter_unknown_key(self, job_db, seeded):
        with pytest.raises(BadRequestError, match="minEmployees"):
            job_db.find_filtered({"minEmployees": 1})

    def test_get_update_remove(self, job_db, seeded):
        job_id = seeded[1]["id"]

        assert job_db.get(job_id)["title"] == "Nurse"

        updated = job_db.update(job_id, {"salary": None, "companyHandle": "c3"})
        assert updated["salary"] is None
        assert updated["companyHandle"] == "c3"
        assert updated["equity"] == "0.1"

        job_db.remove(job_id)
        with pytest.raises(NotFoundError):
            job_db.get(job_id)
        with pytest.raises(NotFoundError):
            job_db.update(job_id, {"title": "x"})
        with pytest.raises(NotFoundError):
            job_db.remove(job_id)
