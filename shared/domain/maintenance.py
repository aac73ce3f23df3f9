"""Maintenance history entries for a piece of equipment."""

from datetime import date
from typing import Any

from pydantic import ValidationInfo, field_validator

from shared.domain.entities import DomainEntity, Snapshot
from shared.domain.exceptions import ValidationError
from shared.domain.result import Result
from shared.domain.validation import (
    build_entity,
    optional_non_negative_int,
    require_present,
    require_text,
)


class MaintenanceRecord(DomainEntity):
    equipment_id: str
    record_date: date
    description: str
    performed_by: str
    cost: int | None = None

    performed_by_user: Snapshot | None = None

    @field_validator("equipment_id", "description", "performed_by", mode="before")
    @classmethod
    def validate_required_text(cls, value: Any, info: ValidationInfo) -> Any:
        return require_text(value, info.field_name)

    @field_validator("record_date", mode="before")
    @classmethod
    def validate_record_date(cls, value: Any, info: ValidationInfo) -> Any:
        return require_present(value, info.field_name)

    @field_validator("cost", mode="before")
    @classmethod
    def validate_cost(cls, value: Any, info: ValidationInfo) -> int | None:
        return optional_non_negative_int(value, info.field_name)

    def without_display(self) -> "MaintenanceRecord":
        return self.model_copy(update={"performed_by_user": None})


def create_maintenance_record(
    id: str,
    equipment_id: str,
    record_date: date,
    description: str,
    performed_by: str,
    cost: int | None = None,
    performed_by_user: Snapshot | None = None,
) -> Result[MaintenanceRecord, ValidationError]:
    return build_entity(
        MaintenanceRecord,
        id=id,
        equipment_id=equipment_id,
        record_date=record_date,
        description=description,
        performed_by=performed_by,
        cost=cost,
        performed_by_user=performed_by_user,
    )
