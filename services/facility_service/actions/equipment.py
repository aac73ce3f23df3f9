"""
Equipment Actions

Equipment and its category catalogue require ``MANAGE_EQUIPMENT``. Management
assignments and maintenance history may also be edited by the equipment's
own administrator or vice administrators. Any signed-in user may comment;
comments are deleted by their author or an administrator.
"""

from services.facility_service.actions.base import ActionGroup
from services.facility_service.forms import (
    Form,
    decoded_or_none,
    id_list,
    in_field_order,
    optional_date,
    optional_int,
    optional_text,
    text,
)
from services.facility_service.gate import ActionState, Outcome, require_existing
from services.facility_service.views import EntityKind
from shared.domain.equipment import (
    Equipment,
    EquipmentCategory,
    EquipmentComment,
    RunningState,
    create_equipment,
    create_equipment_category,
    create_equipment_comment,
)
from shared.domain.exceptions import AuthorizationError, DomainException, PersistenceError
from shared.domain.maintenance import MaintenanceRecord, create_maintenance_record
from shared.domain.result import Err, Ok, Result
from shared.domain.users import User
from shared.security.rbac import Action, PermissionService


class CategoryActions(ActionGroup):
    async def list_all(self) -> Result[list[EquipmentCategory], PersistenceError]:
        return await self.repositories.categories.find_all()

    async def create(self, form: Form) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            built = create_equipment_category(
                self.context.new_id(),
                text(form, "category_major"),
                text(form, "category_minor"),
            )
            match built:
                case Err() as failed:
                    return failed
                case Ok(category):
                    return await self.persist(
                        self.repositories.categories,
                        category,
                        Outcome(EntityKind.EQUIPMENT_CATEGORY, category.id, data=category),
                    )

        return await self.gate.execute("create_category", step, Action.MANAGE_EQUIPMENT)

    async def delete(self, category_id: str) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            return await self.remove(
                self.repositories.categories,
                category_id,
                "Category",
                Outcome(EntityKind.EQUIPMENT_CATEGORY, category_id),
            )

        return await self.gate.execute("delete_category", step, Action.MANAGE_EQUIPMENT)


def _rebuild(existing: Equipment, **changes) -> Result[Equipment, DomainException]:
    """Re-validate a stored equipment with some fields replaced."""
    fields = existing.without_display().model_dump(exclude={"administrator", "location"})
    fields.update(changes)
    return create_equipment(**fields)


class EquipmentActions(ActionGroup):
    async def list_all(self) -> Result[list[Equipment], PersistenceError]:
        return await self.repositories.equipment.find_all()

    async def get(self, equipment_id: str) -> Result[Equipment | None, PersistenceError]:
        return await self.repositories.equipment.find_by_id(equipment_id)

    async def list_by_room(self, room_id: str) -> Result[list[Equipment], PersistenceError]:
        return await self.repositories.equipment.find_by_room_id(room_id)

    @staticmethod
    def _build(
        equipment_id: str,
        form: Form,
        administrator_id: str | None,
        vice_administrator_ids: list[str] | tuple[str, ...],
    ) -> Result[Equipment, DomainException]:
        installation_date = optional_date(form, "installation_date")
        built = create_equipment(
            equipment_id,
            text(form, "name"),
            description=optional_text(form, "description"),
            category_major=optional_text(form, "category_major"),
            category_minor=optional_text(form, "category_minor"),
            room_id=optional_text(form, "room_id"),
            running_state=optional_text(form, "running_state") or RunningState.OPERATIONAL,
            installation_date=decoded_or_none(installation_date),
            administrator_id=administrator_id,
            vice_administrator_ids=vice_administrator_ids,
        )
        return in_field_order(Equipment, built, installation_date)

    async def create(self, form: Form) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            built = self._build(
                self.context.new_id(),
                form,
                optional_text(form, "administrator_id"),
                id_list(form, "vice_administrator_ids"),
            )
            match built:
                case Err() as failed:
                    return failed
                case Ok(equipment):
                    return await self.persist(
                        self.repositories.equipment,
                        equipment,
                        Outcome(EntityKind.EQUIPMENT, equipment.id, data=equipment),
                    )

        return await self.gate.execute("create_equipment", step, Action.MANAGE_EQUIPMENT)

    async def update(self, equipment_id: str, form: Form) -> ActionState:
        """Replace the descriptive fields. Vice administrators are kept as stored."""

        async def step(user: User) -> Result[Outcome, DomainException]:
            match await require_existing(self.repositories.equipment, equipment_id, "Equipment"):
                case Err() as failed:
                    return failed
                case Ok(existing):
                    pass

            administrator_id = (
                optional_text(form, "administrator_id")
                if "administrator_id" in form
                else existing.administrator_id
            )
            match self._build(equipment_id, form, administrator_id, existing.vice_administrator_ids):
                case Err() as failed:
                    return failed
                case Ok(equipment):
                    return await self.persist(
                        self.repositories.equipment,
                        equipment,
                        Outcome(EntityKind.EQUIPMENT, equipment.id, data=equipment),
                    )

        return await self.gate.execute("update_equipment", step, Action.MANAGE_EQUIPMENT)

    async def update_management(self, equipment_id: str, form: Form) -> ActionState:
        """Reassign the administrator and vice administrators."""

        async def step(user: User) -> Result[Outcome, DomainException]:
            match await require_existing(self.repositories.equipment, equipment_id, "Equipment"):
                case Err() as failed:
                    return failed
                case Ok(existing):
                    pass

            if not PermissionService.can_edit_equipment_management(user, existing):
                return Err(AuthorizationError(action="equipment:update_management"))

            rebuilt = _rebuild(
                existing,
                administrator_id=optional_text(form, "administrator_id"),
                vice_administrator_ids=id_list(form, "vice_administrator_ids"),
            )
            match rebuilt:
                case Err() as failed:
                    return failed
                case Ok(equipment):
                    return await self.persist(
                        self.repositories.equipment,
                        equipment,
                        Outcome(EntityKind.EQUIPMENT, equipment.id, data=equipment),
                    )

        return await self.gate.execute("update_equipment_management", step)

    async def delete(self, equipment_id: str) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            return await self.remove(
                self.repositories.equipment,
                equipment_id,
                "Equipment",
                Outcome(EntityKind.EQUIPMENT, equipment_id),
            )

        return await self.gate.execute("delete_equipment", step, Action.MANAGE_EQUIPMENT)


class CommentActions(ActionGroup):
    async def list_by_equipment(
        self, equipment_id: str
    ) -> Result[list[EquipmentComment], PersistenceError]:
        return await self.repositories.comments.find_by_equipment_id(equipment_id)

    async def create(self, equipment_id: str, form: Form) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            built = create_equipment_comment(
                self.context.new_id(),
                equipment_id,
                user.id,
                text(form, "content"),
                self.context.clock(),
            )
            match built:
                case Err() as failed:
                    return failed
                case Ok(comment):
                    pass

            match await require_existing(self.repositories.equipment, equipment_id, "Equipment"):
                case Err() as failed:
                    return failed

            return await self.persist(
                self.repositories.comments,
                comment,
                Outcome(
                    EntityKind.EQUIPMENT_COMMENT,
                    comment.id,
                    equipment_id=equipment_id,
                    data=comment.with_author(user.snapshot()),
                ),
            )

        return await self.gate.execute("create_comment", step)

    async def delete(self, comment_id: str) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            match await require_existing(self.repositories.comments, comment_id, "Comment"):
                case Err() as failed:
                    return failed
                case Ok(comment):
                    pass

            if not PermissionService.can_delete_comment(user, comment):
                return Err(AuthorizationError(action="comment:delete"))

            return await self.remove(
                self.repositories.comments,
                comment_id,
                "Comment",
                Outcome(EntityKind.EQUIPMENT_COMMENT, comment_id, equipment_id=comment.equipment_id),
            )

        return await self.gate.execute("delete_comment", step)


class MaintenanceActions(ActionGroup):
    async def list_by_equipment(
        self, equipment_id: str
    ) -> Result[list[MaintenanceRecord], PersistenceError]:
        return await self.repositories.maintenance.find_by_equipment_id(equipment_id)

    async def _managed_equipment(self, user: User, equipment_id: str) -> Result[Equipment, DomainException]:
        match await require_existing(self.repositories.equipment, equipment_id, "Equipment"):
            case Err() as failed:
                return failed
            case Ok(equipment):
                if not PermissionService.can_edit_equipment_management(user, equipment):
                    return Err(AuthorizationError(action="maintenance_record:write"))
                return Ok(equipment)

    @staticmethod
    def _build(
        record_id: str,
        equipment_id: str,
        form: Form,
        performed_by: str,
    ) -> Result[MaintenanceRecord, DomainException]:
        record_date = optional_date(form, "record_date")
        cost = optional_int(form, "cost")
        built = create_maintenance_record(
            record_id,
            equipment_id,
            decoded_or_none(record_date),
            text(form, "description"),
            performed_by,
            decoded_or_none(cost),
        )
        return in_field_order(MaintenanceRecord, built, record_date, cost)

    async def create(self, equipment_id: str, form: Form) -> ActionState:
        """The record is attributed to the caller; a ``performed_by`` field is ignored."""

        async def step(user: User) -> Result[Outcome, DomainException]:
            match await self._managed_equipment(user, equipment_id):
                case Err() as failed:
                    return failed

            match self._build(self.context.new_id(), equipment_id, form, user.id):
                case Err() as failed:
                    return failed
                case Ok(record):
                    return await self.persist(
                        self.repositories.maintenance,
                        record,
                        Outcome(
                            EntityKind.MAINTENANCE_RECORD,
                            record.id,
                            equipment_id=equipment_id,
                            data=record,
                        ),
                    )

        return await self.gate.execute("create_maintenance_record", step)

    async def update(self, record_id: str, form: Form) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            match await require_existing(self.repositories.maintenance, record_id, "Maintenance record"):
                case Err() as failed:
                    return failed
                case Ok(existing):
                    pass

            match await self._managed_equipment(user, existing.equipment_id):
                case Err() as failed:
                    return failed

            performed_by = optional_text(form, "performed_by") or existing.performed_by
            match self._build(record_id, existing.equipment_id, form, performed_by):
                case Err() as failed:
                    return failed
                case Ok(record):
                    return await self.persist(
                        self.repositories.maintenance,
                        record,
                        Outcome(
                            EntityKind.MAINTENANCE_RECORD,
                            record.id,
                            equipment_id=record.equipment_id,
                            data=record,
                        ),
                    )

        return await self.gate.execute("update_maintenance_record", step)

    async def delete(self, record_id: str) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            match await require_existing(self.repositories.maintenance, record_id, "Maintenance record"):
                case Err() as failed:
                    return failed
                case Ok(existing):
                    pass

            match await self._managed_equipment(user, existing.equipment_id):
                case Err() as failed:
                    return failed

            return await self.remove(
                self.repositories.maintenance,
                record_id,
                "Maintenance record",
                Outcome(EntityKind.MAINTENANCE_RECORD, record_id, equipment_id=existing.equipment_id),
            )

        return await self.gate.execute("delete_maintenance_record", step)
