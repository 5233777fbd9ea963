"""
Jobly - Command-Line Entry Point

Small CLI over the repositories, handy for inspecting a database and loading
seed data without running the API.

Usage:
    python -m jobly.main [--verbose] COMMAND [OPTIONS]

Commands:
    companies [--name TEXT] [--min-employees N] [--max-employees N]
    company HANDLE
    jobs [--title TEXT] [--min-salary N] [--has-equity]
    job ID
    seed [--file PATH]

Examples:
    # Companies with "net" in their name and at least 100 employees:
    python -m jobly.main companies --name net --min-employees 100

    # Jobs that offer equity:
    python -m jobly.main jobs --has-equity

Exit Codes:
    0: Success
    1: Invalid request (unknown company, bad filter...)
    2: Fatal error (database connection, configuration, etc.)
"""

import argparse
import json
import logging
import sys
from typing import Any, Optional

from dotenv import load_dotenv

from .common.database import Database
from .common.errors import JoblyError
from .companies.db_operations import CompanyDB
from .jobs.db_operations import JobDB
from .seed import load_seed_file, seed_database

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='Query and seed the Jobly companies and jobs tables',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    companies = subparsers.add_parser('companies', help='List companies')
    companies.add_argument('--name', type=str, help='Case-insensitive name substring')
    companies.add_argument('--min-employees', type=int, help='Minimum employee count')
    companies.add_argument('--max-employees', type=int, help='Maximum employee count')

    company = subparsers.add_parser('company', help='Show one company and its jobs')
    company.add_argument('handle', type=str)

    jobs = subparsers.add_parser('jobs', help='List jobs')
    jobs.add_argument('--title', type=str, help='Case-insensitive title substring')
    jobs.add_argument('--min-salary', type=int, help='Minimum salary')
    jobs.add_argument('--has-equity', action='store_true', help='Only jobs with equity')

    job = subparsers.add_parser('job', help='Show one job')
    job.add_argument('job_id', type=int)

    seed = subparsers.add_parser('seed', help='Load seed data from YAML')
    seed.add_argument(
        '--file',
        type=str,
        default=None,
        help='Path to seed file (default: data/seed.yml)'
    )

    return parser.parse_args(argv)


def _criteria(**options: Any) -> dict[str, Any]:
    """Drop options that were not given on the command line."""
    return {
        key: value for key, value in options.items()
        if value is not None and value is not False
    }


def run_command(args: argparse.Namespace, company_db: CompanyDB, job_db: JobDB) -> Any:
    """
    Execute the parsed command against the repositories.

    Returns:
        JSON-serializable result of the command
    """
    if args.command == 'companies':
        criteria = _criteria(
            name=args.name,
            minEmployees=args.min_employees,
            maxEmployees=args.max_employees,
        )
        if criteria:
            return company_db.find_filtered(criteria)
        return company_db.find_all()

    if args.command == 'company':
        return company_db.get(args.handle)

    if args.command == 'jobs':
        criteria = _criteria(
            title=args.title,
            minSalary=args.min_salary,
            hasEquity=args.has_equity,
        )
        return job_db.find_filtered(criteria)

    if args.command == 'job':
        return job_db.get(args.job_id)

    if args.command == 'seed':
        return seed_database(company_db, job_db, load_seed_file(args.file))

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the Jobly CLI.

    Returns:
        Exit code (0 = success, 1 = invalid request, 2 = fatal error)
    """
    args = parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug logging enabled")

    try:
        db = Database.from_env()
        job_db = JobDB(db)
        company_db = CompanyDB(db)

        result = run_command(args, company_db, job_db)
        print(json.dumps(result, indent=2, default=str))
        return 0

    except JoblyError as e:
        logger.warning(f"Request failed: {e.message}")
        print(f"\nERROR: {e.message}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        print(f"\nFATAL ERROR: {e}")
        return 2


if __name__ == '__main__':
    sys.exit(main())
