"""
Dashboard Reads

Aggregated views assembled from independent repository reads issued
concurrently with ``asyncio.gather``. Both reads run under ``ActionGate.guard``
so a failure surfaces as ``Err`` like every other action.
"""

import asyncio

from pydantic import BaseModel, ConfigDict

from services.facility_service.actions.base import ActionGroup
from shared.domain.equipment import Equipment, EquipmentComment
from shared.domain.exceptions import DomainException, EntityNotFoundError
from shared.domain.maintenance import MaintenanceRecord
from shared.domain.reservations import Reservation
from shared.domain.result import Err, Ok, Result
from shared.security.rbac import PermissionService

RECENT_RESERVATION_LIMIT = 10
RECENTLY_USED_LIMIT = 5


class DashboardStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    building_count: int
    equipment_count: int
    active_reservation_count: int
    recent_reservations: list[Reservation]
    favorite_equipment: list[Equipment]
    recently_used_equipment: list[Equipment]


class EquipmentDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    equipment: Equipment
    comments: list[EquipmentComment]
    maintenance_records: list[MaintenanceRecord]
    reservations: list[Reservation]
    is_favorite: bool
    can_edit_management: bool


def _first_error(*results: Result) -> Err | None:
    for result in results:
        if isinstance(result, Err):
            return result
    return None


class DashboardActions(ActionGroup):
    async def statistics(self) -> Result[DashboardStats, DomainException]:
        return await self.gate.guard("dashboard_statistics", self._statistics())

    async def equipment_detail(self, equipment_id: str) -> Result[EquipmentDetail, DomainException]:
        return await self.gate.guard("equipment_detail", self._equipment_detail(equipment_id))

    async def _statistics(self) -> Result[DashboardStats, DomainException]:
        match await self.gate.authenticate():
            case Err() as failed:
                return failed
            case Ok(user):
                pass

        buildings, equipment, reservations, favorites = await asyncio.gather(
            self.repositories.buildings.find_all(),
            self.repositories.equipment.find_all(),
            self.repositories.reservations.find_all(),
            self.repositories.users.get_favorites(user.id),
        )
        failed = _first_error(buildings, equipment, reservations, favorites)
        if failed:
            return failed

        now = self.context.clock()
        by_id = {item.id: item for item in equipment.value}
        mine = sorted(
            (r for r in reservations.value if r.user_id == user.id),
            key=lambda r: r.start_time,
            reverse=True,
        )
        recently_used = list(dict.fromkeys(r.equipment_id for r in mine))

        return Ok(
            DashboardStats(
                building_count=len(buildings.value),
                equipment_count=len(equipment.value),
                active_reservation_count=sum(1 for r in reservations.value if r.end_time >= now),
                recent_reservations=mine[:RECENT_RESERVATION_LIMIT],
                favorite_equipment=[item for item in equipment.value if item.id in favorites.value],
                recently_used_equipment=[
                    by_id[equipment_id] for equipment_id in recently_used if equipment_id in by_id
                ][:RECENTLY_USED_LIMIT],
            )
        )

    async def _equipment_detail(self, equipment_id: str) -> Result[EquipmentDetail, DomainException]:
        match await self.gate.authenticate():
            case Err() as failed:
                return failed
            case Ok(user):
                pass

        equipment, comments, records, reservations, favorites = await asyncio.gather(
            self.repositories.equipment.find_by_id(equipment_id),
            self.repositories.comments.find_by_equipment_id(equipment_id),
            self.repositories.maintenance.find_by_equipment_id(equipment_id),
            self.repositories.reservations.find_by_equipment_id(equipment_id),
            self.repositories.users.get_favorites(user.id),
        )
        failed = _first_error(equipment, comments, records, reservations, favorites)
        if failed:
            return failed
        if equipment.value is None:
            return Err(EntityNotFoundError("Equipment", equipment_id))

        return Ok(
            EquipmentDetail(
                equipment=equipment.value,
                comments=comments.value,
                maintenance_records=records.value,
                reservations=reservations.value,
                is_favorite=equipment_id in favorites.value,
                can_edit_management=PermissionService.can_edit_equipment_management(
                    user, equipment.value
                ),
            )
        )
