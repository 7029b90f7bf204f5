"""
Application error taxonomy.

Every error a use case raises on purpose is an ApplicationError carrying a
message and the status classification the transport layer renders. Anything
else that escapes a use case is an unexpected failure.
"""
from __future__ import annotations

from enum import Enum


# PUBLIC_INTERFACE
class ErrorKind(Enum):
    """Closed set of application failure kinds, valued by HTTP status code."""

    VALIDATION = 400
    NOT_FOUND = 404


# PUBLIC_INTERFACE
class ApplicationError(Exception):
    """Base class for errors crossing the use-case boundary."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def status_code(self) -> int:
        return self.kind.value


# PUBLIC_INTERFACE
class ValidationError(ApplicationError):
    """Input or state-invariant violation (HTTP 400)."""

    kind = ErrorKind.VALIDATION


# PUBLIC_INTERFACE
class NotFoundError(ApplicationError):
    """A referenced entity does not exist (HTTP 404)."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message)
