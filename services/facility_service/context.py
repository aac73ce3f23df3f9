"""
Action Context

Explicit dependencies of the action layer. Everything an action touches comes
from here, so tests substitute fakes by building a different context.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import uuid4

from services.facility_service.views import ViewInvalidator
from shared.config import Settings
from shared.domain.repositories import (
    BuildingRepository,
    EquipmentCategoryRepository,
    EquipmentCommentRepository,
    EquipmentRepository,
    FloorRepository,
    MaintenanceRecordRepository,
    ReservationRepository,
    RoomRepository,
    SystemSettingRepository,
    UserRepository,
)
from shared.security.identity import SessionProvider


def generate_id() -> str:
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Repositories:
    buildings: BuildingRepository
    floors: FloorRepository
    rooms: RoomRepository
    categories: EquipmentCategoryRepository
    equipment: EquipmentRepository
    comments: EquipmentCommentRepository
    maintenance: MaintenanceRecordRepository
    reservations: ReservationRepository
    settings: SystemSettingRepository
    users: UserRepository


@dataclass
class ActionContext:
    repositories: Repositories
    sessions: SessionProvider
    views: ViewInvalidator
    settings: Settings
    new_id: Callable[[], str] = generate_id
    clock: Callable[[], datetime] = utc_now
