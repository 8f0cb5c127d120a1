"""Domain-level exceptions.

Services and repositories raise these errors to express business rule
violations. A single translator in ``api.errors`` maps them to HTTP
status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str = "Internal server error"):
        self.message = message
        super().__init__(message)


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class InvalidIdError(ValidationError):
    """Identifier cannot be parsed as a resource id."""


class AuthenticationError(DomainError):
    """Missing or bad credentials."""


class InvalidTokenError(AuthenticationError):
    """Bearer token is malformed, badly signed or lacks a subject."""


class TokenExpiredError(AuthenticationError):
    """Bearer token is past its expiry instant."""


class NotFoundError(DomainError):
    """Requested entity does not exist (or is not owned by the caller)."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class StoreError(DomainError):
    """The persistence layer failed."""
