"""
Facilities Domain Models

Building -> Floor -> Room hierarchy. Children hold a back-reference to their
parent id for lookup; referential existence is the storage layer's concern.
"""

from typing import Any

from pydantic import ValidationInfo, field_validator

from shared.domain.entities import DomainEntity
from shared.domain.exceptions import ValidationError
from shared.domain.result import Result
from shared.domain.validation import build_entity, optional_non_negative_int, require_text


class Building(DomainEntity):
    """Campus building."""

    name: str
    address: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, value: Any, info: ValidationInfo) -> Any:
        return require_text(value, info.field_name)


class Floor(DomainEntity):
    """Floor within a building."""

    name: str
    building_id: str
    floor_number: int | None = None

    @field_validator("name", "building_id", mode="before")
    @classmethod
    def validate_required_text(cls, value: Any, info: ValidationInfo) -> Any:
        return require_text(value, info.field_name)

    @field_validator("floor_number", mode="before")
    @classmethod
    def validate_floor_number(cls, value: Any, info: ValidationInfo) -> int | None:
        return optional_non_negative_int(value, info.field_name)


class Room(DomainEntity):
    """Room on a floor."""

    name: str
    floor_id: str
    capacity: int | None = None

    @field_validator("name", "floor_id", mode="before")
    @classmethod
    def validate_required_text(cls, value: Any, info: ValidationInfo) -> Any:
        return require_text(value, info.field_name)

    @field_validator("capacity", mode="before")
    @classmethod
    def validate_capacity(cls, value: Any, info: ValidationInfo) -> int | None:
        return optional_non_negative_int(value, info.field_name)


def create_building(
    id: str,
    name: str,
    address: str | None = None,
) -> Result[Building, ValidationError]:
    return build_entity(Building, id=id, name=name, address=address)


def create_floor(
    id: str,
    name: str,
    building_id: str,
    floor_number: int | None = None,
) -> Result[Floor, ValidationError]:
    return build_entity(
        Floor, id=id, name=name, building_id=building_id, floor_number=floor_number
    )


def create_room(
    id: str,
    name: str,
    floor_id: str,
    capacity: int | None = None,
) -> Result[Room, ValidationError]:
    return build_entity(Room, id=id, name=name, floor_id=floor_id, capacity=capacity)
