"""
Repository Contracts

Storage-agnostic async interfaces for every aggregate. Implementations never
raise for expected failures: every operation returns a ``Result`` whose error
is a ``PersistenceError``. A lookup that finds nothing is ``Ok(None)``, which
callers must keep distinct from a failed lookup.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Generic, TypeVar

from shared.domain.entities import DomainEntity
from shared.domain.equipment import Equipment, EquipmentCategory, EquipmentComment
from shared.domain.exceptions import PersistenceError
from shared.domain.facilities import Building, Floor, Room
from shared.domain.maintenance import MaintenanceRecord
from shared.domain.reservations import Reservation
from shared.domain.result import Result
from shared.domain.system_settings import SystemSetting
from shared.domain.users import User

EntityT = TypeVar("EntityT", bound=DomainEntity)


class Repository(ABC, Generic[EntityT]):
    """CRUD contract shared by all entity repositories. ``save`` is an upsert keyed by id."""

    @abstractmethod
    async def find_all(self) -> Result[list[EntityT], PersistenceError]:
        ...

    @abstractmethod
    async def find_by_id(self, entity_id: str) -> Result[EntityT | None, PersistenceError]:
        ...

    @abstractmethod
    async def save(self, entity: EntityT) -> Result[None, PersistenceError]:
        ...

    @abstractmethod
    async def delete(self, entity_id: str) -> Result[None, PersistenceError]:
        ...


class BuildingRepository(Repository[Building]):
    pass


class FloorRepository(Repository[Floor]):
    @abstractmethod
    async def find_by_building_id(self, building_id: str) -> Result[list[Floor], PersistenceError]:
        ...


class RoomRepository(Repository[Room]):
    @abstractmethod
    async def find_by_floor_id(self, floor_id: str) -> Result[list[Room], PersistenceError]:
        ...


class EquipmentCategoryRepository(Repository[EquipmentCategory]):
    pass


class EquipmentRepository(Repository[Equipment]):
    @abstractmethod
    async def find_by_room_id(self, room_id: str) -> Result[list[Equipment], PersistenceError]:
        ...


class EquipmentCommentRepository(Repository[EquipmentComment]):
    @abstractmethod
    async def find_by_equipment_id(
        self, equipment_id: str
    ) -> Result[list[EquipmentComment], PersistenceError]:
        """Comments for one equipment, oldest first, with author snapshots attached."""


class MaintenanceRecordRepository(Repository[MaintenanceRecord]):
    @abstractmethod
    async def find_by_equipment_id(
        self, equipment_id: str
    ) -> Result[list[MaintenanceRecord], PersistenceError]:
        """Records for one equipment, most recent ``record_date`` first."""


class ReservationRepository(Repository[Reservation]):
    @abstractmethod
    async def find_by_equipment_id(
        self, equipment_id: str
    ) -> Result[list[Reservation], PersistenceError]:
        ...

    @abstractmethod
    async def find_by_equipment_and_date_range(
        self,
        equipment_id: str,
        start_time: datetime,
        end_time: datetime,
    ) -> Result[list[Reservation], PersistenceError]:
        """Reservations of ``equipment_id`` overlapping ``[start_time, end_time)``."""


class SystemSettingRepository(ABC):
    """Settings are addressed by key; ``save`` upserts on ``key``."""

    @abstractmethod
    async def find_by_key(self, key: str) -> Result[SystemSetting | None, PersistenceError]:
        ...

    @abstractmethod
    async def save(self, setting: SystemSetting) -> Result[None, PersistenceError]:
        ...


class UserRepository(ABC):
    """
    User records and their favorites.

    Soft-deleted users are invisible to every finder. ``add_favorite`` and
    ``remove_favorite`` are idempotent: repeating either is a successful no-op.
    """

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Result[User | None, PersistenceError]:
        ...

    @abstractmethod
    async def find_by_email(self, email: str) -> Result[User | None, PersistenceError]:
        ...

    @abstractmethod
    async def find_all(self) -> Result[list[User], PersistenceError]:
        ...

    @abstractmethod
    async def save(self, user: User) -> Result[None, PersistenceError]:
        ...

    @abstractmethod
    async def soft_delete(self, user_id: str) -> Result[None, PersistenceError]:
        ...

    @abstractmethod
    async def get_favorites(self, user_id: str) -> Result[set[str], PersistenceError]:
        ...

    @abstractmethod
    async def add_favorite(self, user_id: str, equipment_id: str) -> Result[None, PersistenceError]:
        ...

    @abstractmethod
    async def remove_favorite(
        self, user_id: str, equipment_id: str
    ) -> Result[None, PersistenceError]:
        ...
