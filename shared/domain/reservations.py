"""
Reservation Domain Model

A booking of one piece of equipment by one user over a half-open time range
``[start_time, end_time)``.
"""

from datetime import datetime
from typing import Any

from pydantic import ValidationInfo, field_validator, model_validator

from shared.domain.entities import DomainEntity, Snapshot
from shared.domain.exceptions import ValidationError
from shared.domain.result import Result
from shared.domain.validation import build_entity, require_present, require_text


class Reservation(DomainEntity):
    equipment_id: str
    user_id: str
    start_time: datetime
    end_time: datetime
    comment: str | None = None

    booker: Snapshot | None = None
    equipment: Snapshot | None = None

    @field_validator("equipment_id", "user_id", mode="before")
    @classmethod
    def validate_required_text(cls, value: Any, info: ValidationInfo) -> Any:
        return require_text(value, info.field_name)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def validate_times(cls, value: Any, info: ValidationInfo) -> Any:
        return require_present(value, info.field_name)

    @model_validator(mode="after")
    def validate_time_range(self) -> "Reservation":
        if self.start_time.tzinfo is None or self.end_time.tzinfo is None:
            raise ValueError("Start and end time must be timezone-aware")
        if self.start_time >= self.end_time:
            raise ValueError("Start time must be before end time")
        return self

    def overlaps(self, start_time: datetime, end_time: datetime) -> bool:
        """Half-open overlap: back-to-back bookings do not collide."""
        return self.start_time < end_time and start_time < self.end_time

    def without_display(self) -> "Reservation":
        return self.model_copy(update={"booker": None, "equipment": None})


def create_reservation(
    id: str,
    equipment_id: str,
    user_id: str,
    start_time: datetime,
    end_time: datetime,
    comment: str | None = None,
    booker: Snapshot | None = None,
    equipment: Snapshot | None = None,
) -> Result[Reservation, ValidationError]:
    return build_entity(
        Reservation,
        id=id,
        equipment_id=equipment_id,
        user_id=user_id,
        start_time=start_time,
        end_time=end_time,
        comment=comment,
        booker=booker,
        equipment=equipment,
    )
