"""
Domain Error Taxonomy

Services signal failures by raising one of the tagged errors below. The HTTP
boundary translates the kind into a status code through STATUS_BY_KIND; the
message text is only ever shown to the caller, never matched on.
"""

import enum
from typing import Any, Optional


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
}


class DomainError(Exception):
    """
    Base class for expected business failures.

    Attributes:
        kind: Which family of failure this is
        message: Human readable text returned to the client
        context: Structured details (ids, field names) for logs
    """
    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.kind.value}: {self.message}>"


class ValidationFailed(DomainError):
    kind = ErrorKind.VALIDATION


class Unauthenticated(DomainError):
    kind = ErrorKind.UNAUTHENTICATED


class Forbidden(DomainError):
    kind = ErrorKind.FORBIDDEN


class NotFound(DomainError):
    kind = ErrorKind.NOT_FOUND


class Conflict(DomainError):
    kind = ErrorKind.CONFLICT


class ConfigurationError(RuntimeError):
    """Raised at startup when a required setting is missing."""

    def __init__(self, missing: list[str], detail: Optional[str] = None):
        self.missing = missing
        super().__init__(detail or f"Missing required configuration: {', '.join(missing)}")
