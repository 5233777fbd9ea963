"""Jobly Test Suite.

This package contains unit and integration tests for the Jobly data-access layer.

Test Structure:
- unit/: Unit tests against an in-memory fake of the database handle
- integration/: Repository tests against a real PostgreSQL database
"""
