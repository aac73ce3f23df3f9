"""
Equipment Domain Models

Equipment, its two-level category catalogue, and user comments. Display
snapshots (administrator, location, author) are attached by storage reads and
are never persisted.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from shared.domain.entities import DomainEntity, Snapshot
from shared.domain.exceptions import ValidationError
from shared.domain.result import Result
from shared.domain.validation import (
    build_entity,
    optional_text,
    require_present,
    require_text,
)


class RunningState(str, Enum):
    """Operational status of a piece of equipment."""

    OPERATIONAL = "OPERATIONAL"
    MAINTENANCE = "MAINTENANCE"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"
    RETIRED = "RETIRED"


class EquipmentLocation(BaseModel):
    """Building/floor/room names resolved from ``room_id``."""

    model_config = ConfigDict(frozen=True)

    building_name: str
    floor_name: str
    room_name: str


class EquipmentCategory(DomainEntity):
    category_major: str
    category_minor: str

    @field_validator("category_major", "category_minor", mode="before")
    @classmethod
    def validate_required_text(cls, value: Any, info: ValidationInfo) -> Any:
        return require_text(value, info.field_name)


class Equipment(DomainEntity):
    """
    A managed, reservable item located (optionally) in a room.

    Management rights are held by one administrator and any number of vice
    administrators; see ``PermissionService.can_edit_equipment_management``.
    """

    name: str
    description: str | None = None
    category_major: str | None = None
    category_minor: str | None = None
    room_id: str | None = None
    running_state: RunningState = RunningState.OPERATIONAL
    installation_date: date | None = None
    administrator_id: str | None = None
    vice_administrator_ids: tuple[str, ...] = ()

    administrator: Snapshot | None = None
    location: EquipmentLocation | None = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, value: Any, info: ValidationInfo) -> Any:
        return require_text(value, info.field_name)

    @field_validator("room_id", "administrator_id", mode="before")
    @classmethod
    def validate_references(cls, value: Any, info: ValidationInfo) -> Any:
        return optional_text(value, info.field_name)

    @field_validator("running_state", mode="before")
    @classmethod
    def validate_running_state(cls, value: Any) -> RunningState:
        if value is None:
            return RunningState.OPERATIONAL
        try:
            return RunningState(value)
        except ValueError:
            raise ValueError(f"Invalid running state: {value}") from None

    @field_validator("vice_administrator_ids", mode="before")
    @classmethod
    def validate_vice_administrators(cls, value: Any, info: ValidationInfo) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            raise ValueError(f"{info.field_name} must be a list of ids")
        unique: list[str] = []
        for item in value:
            require_text(item, info.field_name)
            if item not in unique:
                unique.append(item)
        return tuple(unique)

    def is_managed_by(self, user_id: str) -> bool:
        return user_id == self.administrator_id or user_id in self.vice_administrator_ids

    def without_display(self) -> "Equipment":
        return self.model_copy(update={"administrator": None, "location": None})


class EquipmentComment(DomainEntity):
    equipment_id: str
    user_id: str
    content: str
    created_at: datetime
    author: Snapshot | None = None

    @field_validator("equipment_id", "user_id", "content", mode="before")
    @classmethod
    def validate_required_text(cls, value: Any, info: ValidationInfo) -> Any:
        return require_text(value, info.field_name)

    @field_validator("created_at", mode="before")
    @classmethod
    def validate_created_at(cls, value: Any, info: ValidationInfo) -> Any:
        return require_present(value, info.field_name)

    def with_author(self, author: Snapshot | None) -> "EquipmentComment":
        return self.model_copy(update={"author": author})


def create_equipment_category(
    id: str,
    category_major: str,
    category_minor: str,
) -> Result[EquipmentCategory, ValidationError]:
    return build_entity(
        EquipmentCategory,
        id=id,
        category_major=category_major,
        category_minor=category_minor,
    )


def create_equipment(
    id: str,
    name: str,
    description: str | None = None,
    category_major: str | None = None,
    category_minor: str | None = None,
    room_id: str | None = None,
    running_state: RunningState | str = RunningState.OPERATIONAL,
    installation_date: date | None = None,
    administrator_id: str | None = None,
    vice_administrator_ids: list[str] | tuple[str, ...] = (),
    administrator: Snapshot | None = None,
    location: EquipmentLocation | None = None,
) -> Result[Equipment, ValidationError]:
    return build_entity(
        Equipment,
        id=id,
        name=name,
        description=description,
        category_major=category_major,
        category_minor=category_minor,
        room_id=room_id,
        running_state=running_state,
        installation_date=installation_date,
        administrator_id=administrator_id,
        vice_administrator_ids=vice_administrator_ids,
        administrator=administrator,
        location=location,
    )


def create_equipment_comment(
    id: str,
    equipment_id: str,
    user_id: str,
    content: str,
    created_at: datetime,
    author: Snapshot | None = None,
) -> Result[EquipmentComment, ValidationError]:
    return build_entity(
        EquipmentComment,
        id=id,
        equipment_id=equipment_id,
        user_id=user_id,
        content=content,
        created_at=created_at,
        author=author,
    )
