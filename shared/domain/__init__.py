"""
Facility Dashboard Domain

Immutable entity models, their validating constructors, the Result type they
return, and the repository contracts storage adapters implement.

Hierarchy:
- Building contains Floor contains Room (back-references by id)
- Room holds Equipment; Equipment has Comment, MaintenanceRecord, Reservation
- User favorites Equipment; SystemSetting is global
"""

from shared.domain.entities import DomainEntity, Snapshot
from shared.domain.equipment import (
    Equipment,
    EquipmentCategory,
    EquipmentComment,
    EquipmentLocation,
    RunningState,
    create_equipment,
    create_equipment_category,
    create_equipment_comment,
)
from shared.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainException,
    EntityNotFoundError,
    ErrorCode,
    PersistenceError,
    RuleViolationError,
    UnexpectedError,
    ValidationError,
)
from shared.domain.facilities import (
    Building,
    Floor,
    Room,
    create_building,
    create_floor,
    create_room,
)
from shared.domain.maintenance import MaintenanceRecord, create_maintenance_record
from shared.domain.reservations import Reservation, create_reservation
from shared.domain.result import Err, Ok, Result, UnwrapError
from shared.domain.system_settings import (
    DEFAULT_TIMEZONE,
    TIMEZONE_KEY,
    SystemSetting,
    create_system_setting,
)
from shared.domain.users import User, UserRole, create_user

__all__ = [
    # Result
    "Ok",
    "Err",
    "Result",
    "UnwrapError",
    # Errors
    "ErrorCode",
    "DomainException",
    "ValidationError",
    "RuleViolationError",
    "EntityNotFoundError",
    "PersistenceError",
    "AuthenticationError",
    "AuthorizationError",
    "UnexpectedError",
    # Base
    "DomainEntity",
    "Snapshot",
    # Facilities
    "Building",
    "Floor",
    "Room",
    "create_building",
    "create_floor",
    "create_room",
    # Equipment
    "RunningState",
    "EquipmentLocation",
    "Equipment",
    "EquipmentCategory",
    "EquipmentComment",
    "create_equipment",
    "create_equipment_category",
    "create_equipment_comment",
    # Reservations & maintenance
    "Reservation",
    "create_reservation",
    "MaintenanceRecord",
    "create_maintenance_record",
    # Settings
    "TIMEZONE_KEY",
    "DEFAULT_TIMEZONE",
    "SystemSetting",
    "create_system_setting",
    # Users
    "UserRole",
    "User",
    "create_user",
]
