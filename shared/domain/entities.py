"""
Core Entity Base

Every facility entity is an immutable pydantic model identified by an opaque
string id. Instances are produced by the ``create_x`` constructors only;
changing a field means constructing a new instance with the same id.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from shared.domain.validation import require_text


class DomainEntity(BaseModel):
    """
    Base entity providing identity and immutability.

    Equality is value-based: two entities are equal when every field matches,
    which is what upsert idempotence is checked against.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        use_enum_values=False,
    )

    id: str

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, value: Any, info: ValidationInfo) -> Any:
        return require_text(value, info.field_name)


class Snapshot(BaseModel):
    """Read-time, display-only denormalized view of a related record."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str | None = None
