"""
Domain Errors

Error hierarchy for the facility domain. Instances are carried as ``Err``
payloads by constructors, repositories and the action gate; they are not
raised across the action boundary. ``message`` is what the caller sees.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable codes attached to every domain error, used in logs."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    RULE_VIOLATED = "RULE_VIOLATED"
    NOT_FOUND = "NOT_FOUND"

    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"

    STORAGE_FAILED = "STORAGE_FAILED"
    UNEXPECTED = "UNEXPECTED"


class DomainException(Exception):
    """
    Base class for all domain errors.

    Two errors compare equal when they have the same type and message, so
    ``Err`` payloads can be asserted on directly.
    """

    error_code: ErrorCode

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DomainException):
            return NotImplemented
        return type(self) is type(other) and self.message == other.message

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.message))


class ValidationError(DomainException):
    """Caller-supplied data violates an entity invariant."""

    error_code = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str, field: str | None = None, value: Any | None = None):
        context: dict[str, Any] = {}
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = str(value)
        super().__init__(message, context)
        self.field = field


class RuleViolationError(DomainException):
    """A well-formed request breaks a cross-record rule (e.g. overlapping reservations)."""

    error_code = ErrorCode.RULE_VIOLATED

    def __init__(self, message: str, rule: str | None = None):
        super().__init__(message, {"rule": rule} if rule else None)
        self.rule = rule


class EntityNotFoundError(DomainException):
    error_code = ErrorCode.NOT_FOUND

    def __init__(self, entity_type: str, entity_id: str | None = None):
        context = {"entity_type": entity_type}
        if entity_id:
            context["entity_id"] = entity_id
        super().__init__(f"{entity_type} not found", context)
        self.entity_type = entity_type
        self.entity_id = entity_id


class PersistenceError(DomainException):
    """Storage-layer failure (connectivity, constraint violation)."""

    error_code = ErrorCode.STORAGE_FAILED

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message, {"operation": operation} if operation else None)
        self.operation = operation


class AuthenticationError(DomainException):
    """No session, or the session does not map to a live user record."""

    error_code = ErrorCode.UNAUTHENTICATED

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class AuthorizationError(DomainException):
    error_code = ErrorCode.FORBIDDEN

    def __init__(self, message: str = "Forbidden", action: str | None = None):
        super().__init__(message, {"action": action} if action else None)
        self.action = action


class UnexpectedError(DomainException):
    """A read failed with an exception no layer below anticipated."""

    error_code = ErrorCode.UNEXPECTED

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message)
