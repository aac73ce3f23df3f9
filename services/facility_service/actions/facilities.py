"""
Facility Actions

Create, update and delete buildings, floors and rooms. All mutations require
``MANAGE_BUILDINGS``; reads are open.
"""

from services.facility_service.actions.base import ActionGroup
from services.facility_service.forms import (
    Form,
    decoded_or_none,
    in_field_order,
    optional_int,
    optional_text,
    text,
)
from services.facility_service.gate import ActionState, Outcome
from services.facility_service.views import EntityKind
from shared.domain.exceptions import DomainException, PersistenceError
from shared.domain.facilities import (
    Building,
    Floor,
    Room,
    create_building,
    create_floor,
    create_room,
)
from shared.domain.result import Err, Ok, Result
from shared.domain.users import User
from shared.security.rbac import Action


class BuildingActions(ActionGroup):
    async def list_all(self) -> Result[list[Building], PersistenceError]:
        return await self.repositories.buildings.find_all()

    async def get(self, building_id: str) -> Result[Building | None, PersistenceError]:
        return await self.repositories.buildings.find_by_id(building_id)

    def _build(self, building_id: str, form: Form) -> Result[Building, DomainException]:
        return create_building(building_id, text(form, "name"), optional_text(form, "address"))

    async def create(self, form: Form) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            match self._build(self.context.new_id(), form):
                case Err() as failed:
                    return failed
                case Ok(building):
                    return await self.persist(
                        self.repositories.buildings,
                        building,
                        Outcome(EntityKind.BUILDING, building.id, data=building),
                    )

        return await self.gate.execute("create_building", step, Action.MANAGE_BUILDINGS)

    async def update(self, building_id: str, form: Form) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            match self._build(building_id, form):
                case Err() as failed:
                    return failed
                case Ok(building):
                    return await self.persist(
                        self.repositories.buildings,
                        building,
                        Outcome(EntityKind.BUILDING, building.id, data=building),
                        existing_type="Building",
                    )

        return await self.gate.execute("update_building", step, Action.MANAGE_BUILDINGS)

    async def delete(self, building_id: str) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            return await self.remove(
                self.repositories.buildings,
                building_id,
                "Building",
                Outcome(EntityKind.BUILDING, building_id),
            )

        return await self.gate.execute("delete_building", step, Action.MANAGE_BUILDINGS)


class FloorActions(ActionGroup):
    async def list_all(self) -> Result[list[Floor], PersistenceError]:
        return await self.repositories.floors.find_all()

    async def list_by_building(self, building_id: str) -> Result[list[Floor], PersistenceError]:
        return await self.repositories.floors.find_by_building_id(building_id)

    async def get(self, floor_id: str) -> Result[Floor | None, PersistenceError]:
        return await self.repositories.floors.find_by_id(floor_id)

    def _build(self, floor_id: str, form: Form) -> Result[Floor, DomainException]:
        floor_number = optional_int(form, "floor_number")
        built = create_floor(
            floor_id,
            text(form, "name"),
            text(form, "building_id"),
            decoded_or_none(floor_number),
        )
        return in_field_order(Floor, built, floor_number)

    async def create(self, form: Form) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            match self._build(self.context.new_id(), form):
                case Err() as failed:
                    return failed
                case Ok(floor):
                    return await self.persist(
                        self.repositories.floors,
                        floor,
                        Outcome(EntityKind.FLOOR, floor.id, data=floor),
                    )

        return await self.gate.execute("create_floor", step, Action.MANAGE_BUILDINGS)

    async def update(self, floor_id: str, form: Form) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            match self._build(floor_id, form):
                case Err() as failed:
                    return failed
                case Ok(floor):
                    return await self.persist(
                        self.repositories.floors,
                        floor,
                        Outcome(EntityKind.FLOOR, floor.id, data=floor),
                        existing_type="Floor",
                    )

        return await self.gate.execute("update_floor", step, Action.MANAGE_BUILDINGS)

    async def delete(self, floor_id: str) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            return await self.remove(
                self.repositories.floors, floor_id, "Floor", Outcome(EntityKind.FLOOR, floor_id)
            )

        return await self.gate.execute("delete_floor", step, Action.MANAGE_BUILDINGS)


class RoomActions(ActionGroup):
    async def list_all(self) -> Result[list[Room], PersistenceError]:
        return await self.repositories.rooms.find_all()

    async def list_by_floor(self, floor_id: str) -> Result[list[Room], PersistenceError]:
        return await self.repositories.rooms.find_by_floor_id(floor_id)

    async def get(self, room_id: str) -> Result[Room | None, PersistenceError]:
        return await self.repositories.rooms.find_by_id(room_id)

    def _build(self, room_id: str, form: Form) -> Result[Room, DomainException]:
        capacity = optional_int(form, "capacity")
        built = create_room(room_id, text(form, "name"), text(form, "floor_id"), decoded_or_none(capacity))
        return in_field_order(Room, built, capacity)

    async def create(self, form: Form) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            match self._build(self.context.new_id(), form):
                case Err() as failed:
                    return failed
                case Ok(room):
                    return await self.persist(
                        self.repositories.rooms,
                        room,
                        Outcome(EntityKind.ROOM, room.id, data=room),
                    )

        return await self.gate.execute("create_room", step, Action.MANAGE_BUILDINGS)

    async def update(self, room_id: str, form: Form) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            match self._build(room_id, form):
                case Err() as failed:
                    return failed
                case Ok(room):
                    return await self.persist(
                        self.repositories.rooms,
                        room,
                        Outcome(EntityKind.ROOM, room.id, data=room),
                        existing_type="Room",
                    )

        return await self.gate.execute("update_room", step, Action.MANAGE_BUILDINGS)

    async def delete(self, room_id: str) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            return await self.remove(
                self.repositories.rooms, room_id, "Room", Outcome(EntityKind.ROOM, room_id)
            )

        return await self.gate.execute("delete_room", step, Action.MANAGE_BUILDINGS)
