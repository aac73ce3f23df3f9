"""
System Settings

Global key/value configuration edited by administrators. The only key the
dashboard interprets is ``timezone``, whose value must be an IANA zone name.
"""

from datetime import datetime
from typing import Any

from pydantic import ValidationInfo, field_validator, model_validator

from shared.domain.entities import DomainEntity
from shared.domain.exceptions import ValidationError
from shared.domain.result import Result
from shared.domain.validation import (
    build_entity,
    is_valid_timezone,
    optional_text,
    require_present,
    require_text,
)

TIMEZONE_KEY = "timezone"
DEFAULT_TIMEZONE = "Asia/Tokyo"


class SystemSetting(DomainEntity):
    key: str
    value: str
    updated_at: datetime
    updated_by: str | None = None

    @field_validator("key", "value", mode="before")
    @classmethod
    def validate_required_text(cls, value: Any, info: ValidationInfo) -> Any:
        return require_text(value, info.field_name)

    @field_validator("updated_at", mode="before")
    @classmethod
    def validate_updated_at(cls, value: Any, info: ValidationInfo) -> Any:
        return require_present(value, info.field_name)

    @field_validator("updated_by", mode="before")
    @classmethod
    def validate_updated_by(cls, value: Any, info: ValidationInfo) -> Any:
        return optional_text(value, info.field_name)

    @model_validator(mode="after")
    def validate_timezone_value(self) -> "SystemSetting":
        if self.key == TIMEZONE_KEY and not is_valid_timezone(self.value):
            raise ValueError(f"Invalid timezone: {self.value}")
        return self


def create_system_setting(
    id: str,
    key: str,
    value: str,
    updated_at: datetime,
    updated_by: str | None = None,
) -> Result[SystemSetting, ValidationError]:
    return build_entity(
        SystemSetting,
        id=id,
        key=key,
        value=value,
        updated_at=updated_at,
        updated_by=updated_by,
    )
