"""
User Domain Model

Staff accounts. Credentials live with the external identity provider; this
model carries only what the dashboard displays and authorizes against.
"""

from enum import Enum
from typing import Any

from pydantic import ValidationInfo, field_validator

from shared.domain.entities import DomainEntity, Snapshot
from shared.domain.exceptions import ValidationError
from shared.domain.result import Result
from shared.domain.validation import build_entity, require_text


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    GENERAL = "GENERAL"


class User(DomainEntity):
    """Dashboard user with a single role."""

    email: str
    role: UserRole = UserRole.GENERAL
    name: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None
    phone_number: str | None = None
    department: str | None = None

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, value: Any, info: ValidationInfo) -> Any:
        require_text(value, info.field_name)
        if not isinstance(value, str):
            raise ValueError(f"Invalid email: {value}")
        local, _, domain = value.partition("@")
        if not local or "." not in domain or domain.startswith(".") or domain.endswith("."):
            raise ValueError(f"Invalid email: {value}")
        return value

    @field_validator("role", mode="before")
    @classmethod
    def validate_role(cls, value: Any) -> UserRole:
        if value is None:
            return UserRole.GENERAL
        try:
            return UserRole(value)
        except ValueError:
            raise ValueError(f"Invalid role: {value}") from None

    @property
    def label(self) -> str:
        return self.display_name or self.name or self.email

    def snapshot(self) -> Snapshot:
        return Snapshot(id=self.id, name=self.display_name or self.name)


def create_user(
    id: str,
    email: str,
    role: UserRole | str = UserRole.GENERAL,
    name: str | None = None,
    display_name: str | None = None,
    avatar_url: str | None = None,
    phone_number: str | None = None,
    department: str | None = None,
) -> Result[User, ValidationError]:
    return build_entity(
        User,
        id=id,
        email=email,
        role=role,
        name=name,
        display_name=display_name,
        avatar_url=avatar_url,
        phone_number=phone_number,
        department=department,
    )
