"""
Field Validation Helpers

Reusable checks shared by the entity models, plus ``build_entity`` which turns
a pydantic model into a pure ``create_x`` constructor returning a ``Result``.
"""

from typing import Any, TypeVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from shared.domain.exceptions import ValidationError
from shared.domain.result import Err, Ok, Result

ModelT = TypeVar("ModelT", bound=BaseModel)


def require_text(value: Any, field: str) -> Any:
    """Reject missing and whitespace-only values; others go on to type checks."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"{field} is required")
    return value


def optional_text(value: Any, field: str) -> Any:
    """Nullable reference: absent is fine, present-but-blank is not."""
    if value is None:
        return None
    return require_text(value, field)


def require_present(value: Any, field: str) -> Any:
    if value is None:
        raise ValueError(f"{field} is required")
    return value


def optional_non_negative_int(value: Any, field: str) -> int | None:
    """Integers >= 0 or None. Booleans and floats are rejected."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{field} must be a non-negative integer")
    return value


def is_valid_timezone(name: str) -> bool:
    """Check a name against the IANA time-zone database."""
    if not isinstance(name, str) or not name.strip():
        return False
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


def first_violation(exc: PydanticValidationError) -> ValidationError:
    """
    Reduce a pydantic error report to its first entry.

    pydantic reports errors in field declaration order, so the first entry is
    the first violated field.
    """
    error = exc.errors()[0]
    loc = error.get("loc") or ()
    field = str(loc[0]) if loc else None
    original = (error.get("ctx") or {}).get("error")

    if original is not None:
        message = str(original)
    elif field:
        message = f"{field}: {error['msg']}"
    else:
        message = error["msg"]

    return ValidationError(message, field=field, value=error.get("input"))


def build_entity(model: type[ModelT], **fields: Any) -> Result[ModelT, ValidationError]:
    """
    Construct ``model`` from raw fields without raising.

    Args:
        model: Entity model class
        **fields: Already-decoded field values

    Returns:
        Ok(entity) or Err(ValidationError) describing the first violation
    """
    try:
        return Ok(model(**fields))
    except PydanticValidationError as exc:
        return Err(first_violation(exc))
