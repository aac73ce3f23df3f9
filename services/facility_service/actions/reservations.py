"""
Reservation Actions

Form times are wall-clock values in the system timezone; they are stored in
UTC. A reservation may not overlap another one for the same equipment.
"""

from zoneinfo import ZoneInfo

from services.facility_service.actions.base import ActionGroup
from services.facility_service.actions.settings import resolve_timezone
from services.facility_service.forms import (
    Form,
    decoded_or_none,
    in_field_order,
    local_datetime,
    optional_text,
    text,
)
from services.facility_service.gate import ActionState, Outcome, require_existing
from services.facility_service.views import EntityKind
from shared.domain.exceptions import (
    AuthorizationError,
    DomainException,
    PersistenceError,
    RuleViolationError,
)
from shared.domain.reservations import Reservation, create_reservation
from shared.domain.result import Err, Ok, Result
from shared.domain.users import User
from shared.security.rbac import PermissionService

CONFLICT_MESSAGE = "Time slot already reserved"


class ReservationActions(ActionGroup):
    async def list_all(self) -> Result[list[Reservation], PersistenceError]:
        return await self.repositories.reservations.find_all()

    async def get(self, reservation_id: str) -> Result[Reservation | None, PersistenceError]:
        return await self.repositories.reservations.find_by_id(reservation_id)

    async def list_by_equipment(self, equipment_id: str) -> Result[list[Reservation], PersistenceError]:
        return await self.repositories.reservations.find_by_equipment_id(equipment_id)

    async def _build(
        self, reservation_id: str, owner_id: str, form: Form
    ) -> Result[Reservation, DomainException]:
        tz = ZoneInfo(await resolve_timezone(self.context))
        start_time = local_datetime(form, "start_time", tz)
        end_time = local_datetime(form, "end_time", tz)
        built = create_reservation(
            reservation_id,
            text(form, "equipment_id"),
            owner_id,
            decoded_or_none(start_time),
            decoded_or_none(end_time),
            optional_text(form, "comment"),
        )
        return in_field_order(Reservation, built, start_time, end_time)

    async def _check_conflicts(self, reservation: Reservation) -> Result[Reservation, DomainException]:
        found = await self.repositories.reservations.find_by_equipment_and_date_range(
            reservation.equipment_id, reservation.start_time, reservation.end_time
        )
        match found:
            case Err() as failed:
                return failed
            case Ok(overlapping):
                if any(other.id != reservation.id for other in overlapping):
                    return Err(RuleViolationError(CONFLICT_MESSAGE, rule="no_overlap"))
                return Ok(reservation)

    async def _save(self, reservation: Reservation) -> Result[Outcome, DomainException]:
        match await self._check_conflicts(reservation):
            case Err() as failed:
                return failed
        return await self.persist(
            self.repositories.reservations,
            reservation,
            Outcome(
                EntityKind.RESERVATION,
                reservation.id,
                equipment_id=reservation.equipment_id,
                data=reservation,
            ),
        )

    async def create(self, form: Form) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            match await self._build(self.context.new_id(), user.id, form):
                case Err() as failed:
                    return failed
                case Ok(reservation):
                    return await self._save(reservation)

        return await self.gate.execute("create_reservation", step)

    async def update(self, reservation_id: str, form: Form) -> ActionState:
        """Owner or staff may move a reservation; it stays with its original booker."""

        async def step(user: User) -> Result[Outcome, DomainException]:
            match await require_existing(self.repositories.reservations, reservation_id, "Reservation"):
                case Err() as failed:
                    return failed
                case Ok(existing):
                    pass

            if not PermissionService.can_manage_reservation(user, existing):
                return Err(AuthorizationError(action="reservation:update"))

            match await self._build(reservation_id, existing.user_id, form):
                case Err() as failed:
                    return failed
                case Ok(reservation):
                    return await self._save(reservation)

        return await self.gate.execute("update_reservation", step)

    async def delete(self, reservation_id: str) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            match await require_existing(self.repositories.reservations, reservation_id, "Reservation"):
                case Err() as failed:
                    return failed
                case Ok(existing):
                    pass

            if not PermissionService.can_manage_reservation(user, existing):
                return Err(AuthorizationError(action="reservation:delete"))

            return await self.remove(
                self.repositories.reservations,
                reservation_id,
                "Reservation",
                Outcome(EntityKind.RESERVATION, reservation_id, equipment_id=existing.equipment_id),
            )

        return await self.gate.execute("delete_reservation", step)
