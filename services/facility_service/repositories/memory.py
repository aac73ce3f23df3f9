"""
In-Memory Storage Adapter

Implements every repository contract over a single ``InMemoryDatabase``. It
behaves like the relational store it stands in for:

- restrictive foreign keys: a child referencing a missing parent is refused,
  and so is deleting a parent that still has children
- a unique e-mail per live user
- soft-deleted users disappear from every finder and lose equipment management
  rights; favorites go away with their equipment
- display snapshots are stripped on write and attached on read

Setting ``unavailable`` makes every call fail as a lost connection would.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, TypeVar

import structlog

from services.facility_service.context import Repositories
from shared.domain.entities import DomainEntity, Snapshot
from shared.domain.equipment import Equipment, EquipmentCategory, EquipmentComment, EquipmentLocation
from shared.domain.exceptions import PersistenceError
from shared.domain.facilities import Building, Floor, Room
from shared.domain.maintenance import MaintenanceRecord
from shared.domain.repositories import (
    BuildingRepository,
    EquipmentCategoryRepository,
    EquipmentCommentRepository,
    EquipmentRepository,
    FloorRepository,
    MaintenanceRecordRepository,
    Repository,
    ReservationRepository,
    RoomRepository,
    SystemSettingRepository,
    UserRepository,
)
from shared.domain.reservations import Reservation
from shared.domain.result import Err, Ok, Result
from shared.domain.system_settings import SystemSetting
from shared.domain.users import User

logger = structlog.get_logger(__name__)

EntityT = TypeVar("EntityT", bound=DomainEntity)

UNAVAILABLE_MESSAGE = "Database connection unavailable"


@dataclass
class InMemoryDatabase:
    buildings: dict[str, Building] = field(default_factory=dict)
    floors: dict[str, Floor] = field(default_factory=dict)
    rooms: dict[str, Room] = field(default_factory=dict)
    categories: dict[str, EquipmentCategory] = field(default_factory=dict)
    equipment: dict[str, Equipment] = field(default_factory=dict)
    comments: dict[str, EquipmentComment] = field(default_factory=dict)
    maintenance: dict[str, MaintenanceRecord] = field(default_factory=dict)
    reservations: dict[str, Reservation] = field(default_factory=dict)
    settings: dict[str, SystemSetting] = field(default_factory=dict)
    users: dict[str, User] = field(default_factory=dict)
    deleted_user_ids: set[str] = field(default_factory=set)
    favorites: dict[str, set[str]] = field(default_factory=dict)

    unavailable: bool = False
    # (operation, table, id) for every write, in order
    writes: list[tuple[str, str, str]] = field(default_factory=list)

    def is_live_user(self, user_id: str | None) -> bool:
        return user_id in self.users and user_id not in self.deleted_user_ids

    def user_snapshot(self, user_id: str | None) -> Snapshot | None:
        user = self.users.get(user_id) if user_id else None
        return user.snapshot() if user else None

    def record_write(self, operation: str, table: str, entity_id: str) -> None:
        self.writes.append((operation, table, entity_id))


def _unavailable() -> Err[PersistenceError]:
    return Err(PersistenceError(UNAVAILABLE_MESSAGE, operation="connect"))


class InMemoryRepository(Repository[EntityT], Generic[EntityT]):
    """
    Generic table-backed repository.

    Subclasses name their table and override the hooks for foreign keys
    (``_missing_reference``), dependents (``_blocking_dependent``) and
    display snapshots (``_stored`` / ``_present``).
    """

    table: str = ""
    label: str = ""

    def __init__(self, db: InMemoryDatabase):
        self.db = db

    @property
    def rows(self) -> dict[str, EntityT]:
        return getattr(self.db, self.table)

    def _missing_reference(self, entity: EntityT) -> str | None:
        return None

    def _blocking_dependent(self, entity_id: str) -> str | None:
        return None

    def _stored(self, entity: EntityT) -> EntityT:
        return entity

    def _present(self, entity: EntityT) -> EntityT:
        return entity

    def _select(self, predicate: Callable[[EntityT], bool]) -> list[EntityT]:
        return [self._present(row) for row in self.rows.values() if predicate(row)]

    async def find_all(self) -> Result[list[EntityT], PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        return Ok(self._select(lambda row: True))

    async def find_by_id(self, entity_id: str) -> Result[EntityT | None, PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        row = self.rows.get(entity_id)
        return Ok(self._present(row) if row is not None else None)

    async def save(self, entity: EntityT) -> Result[None, PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        missing = self._missing_reference(entity)
        if missing:
            logger.info("Foreign key violation", table=self.table, entity_id=entity.id, reference=missing)
            return Err(PersistenceError(f"Referenced {missing} does not exist", operation="save"))
        self.rows[entity.id] = self._stored(entity)
        self.db.record_write("save", self.table, entity.id)
        return Ok(None)

    async def delete(self, entity_id: str) -> Result[None, PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        dependent = self._blocking_dependent(entity_id)
        if dependent:
            logger.info("Delete restricted", table=self.table, entity_id=entity_id, dependent=dependent)
            return Err(PersistenceError(f"{self.label} still has {dependent}", operation="delete"))
        self.rows.pop(entity_id, None)
        self.db.record_write("delete", self.table, entity_id)
        return Ok(None)


class InMemoryBuildingRepository(InMemoryRepository[Building], BuildingRepository):
    table = "buildings"
    label = "Building"

    def _blocking_dependent(self, entity_id: str) -> str | None:
        if any(floor.building_id == entity_id for floor in self.db.floors.values()):
            return "floors"
        return None


class InMemoryFloorRepository(InMemoryRepository[Floor], FloorRepository):
    table = "floors"
    label = "Floor"

    def _missing_reference(self, entity: Floor) -> str | None:
        return None if entity.building_id in self.db.buildings else "building"

    def _blocking_dependent(self, entity_id: str) -> str | None:
        if any(room.floor_id == entity_id for room in self.db.rooms.values()):
            return "rooms"
        return None

    async def find_by_building_id(self, building_id: str) -> Result[list[Floor], PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        return Ok(self._select(lambda floor: floor.building_id == building_id))


class InMemoryRoomRepository(InMemoryRepository[Room], RoomRepository):
    table = "rooms"
    label = "Room"

    def _missing_reference(self, entity: Room) -> str | None:
        return None if entity.floor_id in self.db.floors else "floor"

    def _blocking_dependent(self, entity_id: str) -> str | None:
        if any(item.room_id == entity_id for item in self.db.equipment.values()):
            return "equipment"
        return None

    async def find_by_floor_id(self, floor_id: str) -> Result[list[Room], PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        return Ok(self._select(lambda room: room.floor_id == floor_id))


class InMemoryEquipmentCategoryRepository(InMemoryRepository[EquipmentCategory], EquipmentCategoryRepository):
    table = "categories"
    label = "Equipment category"


class InMemoryEquipmentRepository(InMemoryRepository[Equipment], EquipmentRepository):
    table = "equipment"
    label = "Equipment"

    def _missing_reference(self, entity: Equipment) -> str | None:
        if entity.room_id is not None and entity.room_id not in self.db.rooms:
            return "room"
        if entity.administrator_id is not None and not self.db.is_live_user(entity.administrator_id):
            return "administrator"
        if any(not self.db.is_live_user(user_id) for user_id in entity.vice_administrator_ids):
            return "vice administrator"
        return None

    def _blocking_dependent(self, entity_id: str) -> str | None:
        if any(c.equipment_id == entity_id for c in self.db.comments.values()):
            return "comments"
        if any(m.equipment_id == entity_id for m in self.db.maintenance.values()):
            return "maintenance records"
        if any(r.equipment_id == entity_id for r in self.db.reservations.values()):
            return "reservations"
        return None

    def _stored(self, entity: Equipment) -> Equipment:
        return entity.without_display()

    def _present(self, entity: Equipment) -> Equipment:
        location = None
        room = self.db.rooms.get(entity.room_id) if entity.room_id else None
        floor = self.db.floors.get(room.floor_id) if room else None
        building = self.db.buildings.get(floor.building_id) if floor else None
        if room and floor and building:
            location = EquipmentLocation(
                building_name=building.name, floor_name=floor.name, room_name=room.name
            )
        return entity.model_copy(
            update={
                "administrator": self.db.user_snapshot(entity.administrator_id),
                "location": location,
            }
        )

    async def delete(self, entity_id: str) -> Result[None, PersistenceError]:
        result = await super().delete(entity_id)
        if result.is_ok():
            for favorites in self.db.favorites.values():
                favorites.discard(entity_id)
        return result

    async def find_by_room_id(self, room_id: str) -> Result[list[Equipment], PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        return Ok(self._select(lambda item: item.room_id == room_id))


class InMemoryEquipmentCommentRepository(InMemoryRepository[EquipmentComment], EquipmentCommentRepository):
    table = "comments"
    label = "Comment"

    def _missing_reference(self, entity: EquipmentComment) -> str | None:
        if entity.equipment_id not in self.db.equipment:
            return "equipment"
        if entity.user_id not in self.db.users:
            return "user"
        return None

    def _stored(self, entity: EquipmentComment) -> EquipmentComment:
        return entity.with_author(None)

    def _present(self, entity: EquipmentComment) -> EquipmentComment:
        return entity.with_author(self.db.user_snapshot(entity.user_id))

    async def find_by_equipment_id(
        self, equipment_id: str
    ) -> Result[list[EquipmentComment], PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        comments = self._select(lambda comment: comment.equipment_id == equipment_id)
        return Ok(sorted(comments, key=lambda comment: comment.created_at))


class InMemoryMaintenanceRecordRepository(InMemoryRepository[MaintenanceRecord], MaintenanceRecordRepository):
    table = "maintenance"
    label = "Maintenance record"

    def _missing_reference(self, entity: MaintenanceRecord) -> str | None:
        if entity.equipment_id not in self.db.equipment:
            return "equipment"
        if entity.performed_by not in self.db.users:
            return "user"
        return None

    def _stored(self, entity: MaintenanceRecord) -> MaintenanceRecord:
        return entity.without_display()

    def _present(self, entity: MaintenanceRecord) -> MaintenanceRecord:
        return entity.model_copy(
            update={"performed_by_user": self.db.user_snapshot(entity.performed_by)}
        )

    async def find_by_equipment_id(
        self, equipment_id: str
    ) -> Result[list[MaintenanceRecord], PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        records = self._select(lambda record: record.equipment_id == equipment_id)
        return Ok(sorted(records, key=lambda record: record.record_date, reverse=True))


class InMemoryReservationRepository(InMemoryRepository[Reservation], ReservationRepository):
    table = "reservations"
    label = "Reservation"

    def _missing_reference(self, entity: Reservation) -> str | None:
        if entity.equipment_id not in self.db.equipment:
            return "equipment"
        if not self.db.is_live_user(entity.user_id):
            return "user"
        return None

    def _stored(self, entity: Reservation) -> Reservation:
        return entity.without_display()

    def _present(self, entity: Reservation) -> Reservation:
        equipment = self.db.equipment.get(entity.equipment_id)
        return entity.model_copy(
            update={
                "booker": self.db.user_snapshot(entity.user_id),
                "equipment": Snapshot(id=equipment.id, name=equipment.name) if equipment else None,
            }
        )

    def _select(self, predicate: Callable[[Reservation], bool]) -> list[Reservation]:
        return sorted(super()._select(predicate), key=lambda reservation: reservation.start_time)

    async def find_by_equipment_id(
        self, equipment_id: str
    ) -> Result[list[Reservation], PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        return Ok(self._select(lambda reservation: reservation.equipment_id == equipment_id))

    async def find_by_equipment_and_date_range(
        self,
        equipment_id: str,
        start_time: datetime,
        end_time: datetime,
    ) -> Result[list[Reservation], PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        return Ok(
            self._select(
                lambda reservation: reservation.equipment_id == equipment_id
                and reservation.overlaps(start_time, end_time)
            )
        )


class InMemorySystemSettingRepository(SystemSettingRepository):
    def __init__(self, db: InMemoryDatabase):
        self.db = db

    async def find_by_key(self, key: str) -> Result[SystemSetting | None, PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        return Ok(self.db.settings.get(key))

    async def save(self, setting: SystemSetting) -> Result[None, PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        self.db.settings[setting.key] = setting
        self.db.record_write("save", "settings", setting.id)
        return Ok(None)


class InMemoryUserRepository(UserRepository):
    def __init__(self, db: InMemoryDatabase):
        self.db = db

    async def find_by_id(self, user_id: str) -> Result[User | None, PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        return Ok(self.db.users[user_id] if self.db.is_live_user(user_id) else None)

    async def find_by_email(self, email: str) -> Result[User | None, PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        for user in self.db.users.values():
            if user.email.lower() == email.lower() and self.db.is_live_user(user.id):
                return Ok(user)
        return Ok(None)

    async def find_all(self) -> Result[list[User], PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        return Ok([user for user in self.db.users.values() if self.db.is_live_user(user.id)])

    async def save(self, user: User) -> Result[None, PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        for other in self.db.users.values():
            if (
                other.id != user.id
                and other.email.lower() == user.email.lower()
                and self.db.is_live_user(other.id)
            ):
                return Err(PersistenceError("Email already in use", operation="save"))
        self.db.users[user.id] = user
        self.db.deleted_user_ids.discard(user.id)
        self.db.record_write("save", "users", user.id)
        return Ok(None)

    async def soft_delete(self, user_id: str) -> Result[None, PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        self.db.deleted_user_ids.add(user_id)
        for equipment_id, equipment in list(self.db.equipment.items()):
            if equipment.is_managed_by(user_id):
                self.db.equipment[equipment_id] = equipment.model_copy(
                    update={
                        "administrator_id": None
                        if equipment.administrator_id == user_id
                        else equipment.administrator_id,
                        "vice_administrator_ids": tuple(
                            vice for vice in equipment.vice_administrator_ids if vice != user_id
                        ),
                    }
                )
        self.db.record_write("soft_delete", "users", user_id)
        logger.info("User soft-deleted", user_id=user_id)
        return Ok(None)

    async def get_favorites(self, user_id: str) -> Result[set[str], PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        return Ok(set(self.db.favorites.get(user_id, set())))

    async def add_favorite(self, user_id: str, equipment_id: str) -> Result[None, PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        if not self.db.is_live_user(user_id):
            return Err(PersistenceError("Referenced user does not exist", operation="add_favorite"))
        if equipment_id not in self.db.equipment:
            return Err(PersistenceError("Referenced equipment does not exist", operation="add_favorite"))
        self.db.favorites.setdefault(user_id, set()).add(equipment_id)
        self.db.record_write("add_favorite", "favorites", equipment_id)
        return Ok(None)

    async def remove_favorite(
        self, user_id: str, equipment_id: str
    ) -> Result[None, PersistenceError]:
        if self.db.unavailable:
            return _unavailable()
        self.db.favorites.get(user_id, set()).discard(equipment_id)
        self.db.record_write("remove_favorite", "favorites", equipment_id)
        return Ok(None)


def create_in_memory_repositories(db: InMemoryDatabase | None = None) -> Repositories:
    """Wire one repository per contract over a shared database."""
    db = db or InMemoryDatabase()
    return Repositories(
        buildings=InMemoryBuildingRepository(db),
        floors=InMemoryFloorRepository(db),
        rooms=InMemoryRoomRepository(db),
        categories=InMemoryEquipmentCategoryRepository(db),
        equipment=InMemoryEquipmentRepository(db),
        comments=InMemoryEquipmentCommentRepository(db),
        maintenance=InMemoryMaintenanceRecordRepository(db),
        reservations=InMemoryReservationRepository(db),
        settings=InMemorySystemSettingRepository(db),
        users=InMemoryUserRepository(db),
    )
