"""Jobly data-access layer.

This package contains the PostgreSQL repositories for the Jobly API:
- common: store handle, error taxonomy and SQL fragment builders
- companies: company repository
- jobs: job posting repository
- seed: YAML seed loader
"""

__version__ = "0.1.0"
