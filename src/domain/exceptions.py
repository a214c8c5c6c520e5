"""
Domain exceptions - Semantic error types for identity and access.

This module defines the error taxonomy shared by every workflow. Each
caller-visible error carries an ErrorKind and a message that is safe to
return verbatim. Errors outside this taxonomy (store failures, exhausted
code generation, misconfigured roles) are internal and must never reach
the caller with their details.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Caller-visible error categories."""

    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    GONE = "gone"
    FORBIDDEN = "forbidden"
    UNAUTHORIZED = "unauthorized"
    INTERNAL = "internal"


class DomainError(Exception):
    """Base class for caller-visible domain errors."""

    kind = ErrorKind.INTERNAL
    default_message = "Request failed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(DomainError):
    """Invalid input; optionally carries a field -> message map."""

    kind = ErrorKind.BAD_REQUEST
    default_message = "Invalid body request."

    def __init__(self, message: str | None = None, errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors


class NotFoundError(DomainError):
    """Resource, field or value absent (or invisible to the caller)."""

    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found."

    @classmethod
    def for_field(cls, resource: str, field: str, value: Any) -> "NotFoundError":
        return cls(f"{resource} with {field} '{value}' not found.")


class ConflictError(DomainError):
    """Uniqueness or state violation."""

    kind = ErrorKind.CONFLICT
    default_message = "Resource already exists."

    @classmethod
    def for_field(cls, resource: str, field: str, value: Any) -> "ConflictError":
        return cls(f"{resource} with {field} '{value}' already exists.")


class GoneError(DomainError):
    """Resource existed but has expired."""

    kind = ErrorKind.GONE
    default_message = "Resource has expired."

    @classmethod
    def for_field(cls, resource: str, field: str, value: Any) -> "GoneError":
        return cls(f"{resource} with {field} '{value}' has expired.")


class ForbiddenError(DomainError):
    """Access denied because of account state."""

    kind = ErrorKind.FORBIDDEN
    default_message = "Access denied."


class UnauthorizedError(DomainError):
    """Missing, malformed, invalid or expired credentials."""

    kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized."


class CodeGenerationExhausted(Exception):
    """No unused verification code was found within the retry budget."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"failed to generate unique code after {attempts} attempts")


class UnknownRoleError(Exception):
    """A role value outside the Role enum reached scope resolution."""

    def __init__(self, role: object) -> None:
        self.role = role
        super().__init__(f"unknown role: {role!r}")
