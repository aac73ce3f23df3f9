"""
Form Decoding

Actions receive raw transport values (HTML form fields, JSON bodies, CLI
arguments) as a ``Mapping[str, Any]`` with snake_case keys. These helpers turn
them into the typed values entity constructors expect. Whatever they cannot
decode is reported as a ``ValidationError``; range and presence checks are
left to the constructors.
"""

import re
from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any, TypeVar
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from shared.domain.exceptions import DomainException, ValidationError
from shared.domain.result import Err, Ok, Result

Form = Mapping[str, Any]

T = TypeVar("T")

_WHOLE_NUMBER = re.compile(r"^[+-]?\d+$")


def text(form: Form, key: str) -> str:
    """Raw string value; a missing key reads as "" so the constructor reports it."""
    value = form.get(key)
    return "" if value is None else str(value)


def optional_text(form: Form, key: str) -> str | None:
    value = form.get(key)
    if value is None or value == "":
        return None
    return str(value)


def optional_int(form: Form, key: str) -> Result[int | None, ValidationError]:
    """
    Decode a whole number such as "10" or "-1".

    Sign is preserved so that a negative capacity reaches the constructor and
    is rejected there with the field's own message.
    """
    value = form.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return Ok(None)
    if isinstance(value, bool):
        return Err(ValidationError(f"{key} must be a whole number", field=key, value=value))
    if isinstance(value, int):
        return Ok(value)
    if isinstance(value, str) and _WHOLE_NUMBER.match(value.strip()):
        return Ok(int(value.strip()))
    return Err(ValidationError(f"{key} must be a whole number", field=key, value=value))


def optional_date(form: Form, key: str) -> Result[date | None, ValidationError]:
    value = form.get(key)
    if value is None or value == "":
        return Ok(None)
    if isinstance(value, datetime):
        return Ok(value.date())
    if isinstance(value, date):
        return Ok(value)
    try:
        return Ok(date.fromisoformat(str(value).strip()))
    except ValueError:
        return Err(ValidationError(f"{key} must be a valid date", field=key, value=value))


def local_datetime(form: Form, key: str, tz: ZoneInfo) -> Result[datetime | None, ValidationError]:
    """
    Interpret a wall-clock value (e.g. "2025-11-21T05:00") in ``tz`` and
    return it in UTC. Values that already carry an offset keep it.
    """
    value = form.get(key)
    if value is None or value == "":
        return Ok(None)
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip())
        except ValueError:
            return Err(ValidationError(f"{key} must be a valid date and time", field=key, value=value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return Ok(parsed.astimezone(timezone.utc))


def id_list(form: Form, key: str) -> list[str]:
    """Ids from a multi-value field or a comma-separated string; blanks dropped."""
    value = form.get(key)
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else list(value)
    return [str(item).strip() for item in items if item is not None and str(item).strip()]


def decoded_or_none(result: Result[T | None, ValidationError]) -> T | None:
    """Value of a decode, or None so the constructor can still report earlier fields."""
    return result.value if isinstance(result, Ok) else None


def in_field_order(
    model: type[BaseModel],
    built: Result[T, DomainException],
    *decoded: Result[Any, ValidationError],
) -> Result[T, DomainException]:
    """
    Merge decode failures with the constructor's outcome.

    The constructor ran with failed decodes replaced by None. Of all the
    failures, the one on the earliest declared field of ``model`` wins; on a
    tie the decode message is kept. Cross-field errors sort last.

    Usage:
        capacity = optional_int(form, "capacity")
        built = create_room(room_id, name, floor_id, decoded_or_none(capacity))
        return in_field_order(Room, built, capacity)
    """
    failures = [result.error for result in (*decoded, built) if isinstance(result, Err)]
    if not failures:
        return built
    order = list(model.model_fields)

    def position(error: DomainException) -> int:
        field = getattr(error, "field", None)
        return order.index(field) if field in order else len(order)

    return Err(min(failures, key=position))
