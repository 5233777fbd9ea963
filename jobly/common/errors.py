"""
Error taxonomy shared by the Jobly repositories.

Only client-input problems are modelled here. Anything else raised while
talking to PostgreSQL (connectivity, foreign keys, bad configuration) is left
to propagate unchanged so the caller can report a generic server failure.
"""


class JoblyError(Exception):
    """Base class for recoverable errors caused by caller input."""

    status = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(JoblyError):
    """Raised when the request itself is invalid (no data, unknown filter...)."""

    status = 400


class ConflictError(BadRequestError):
    """Raised when a create collides with an existing unique key."""


class NotFoundError(JoblyError):
    """Raised when a primary key does not exist in the store."""

    status = 404


__all__ = ["JoblyError", "BadRequestError", "ConflictError", "NotFoundError"]
