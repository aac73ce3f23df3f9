"""
User Actions

Profile edits are self-service; creating and listing users, changing roles
and deleting accounts require ``MANAGE_USERS``. Deletion is soft and never
applies to the caller's own account.
"""

from services.facility_service.actions.base import ActionGroup
from services.facility_service.forms import Form, optional_text, text
from services.facility_service.gate import ActionState, Outcome, require_existing
from services.facility_service.views import EntityKind
from shared.domain.exceptions import DomainException, RuleViolationError
from shared.domain.result import Err, Ok, Result
from shared.domain.users import User, create_user
from shared.security.rbac import Action

PROFILE_FIELDS = ("name", "display_name", "avatar_url", "phone_number", "department")


def _replace(existing: User, **changes) -> Result[User, DomainException]:
    fields = existing.model_dump()
    fields.update(changes)
    return create_user(**fields)


class UserActions(ActionGroup):
    async def current_user(self) -> Result[User, DomainException]:
        return await self.gate.authenticate()

    async def list_users(self) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            return (await self.repositories.users.find_all()).map(lambda users: Outcome(data=users))

        return await self.gate.execute("list_users", step, Action.MANAGE_USERS)

    async def create(self, form: Form) -> ActionState:
        """
        Create an account record. Credentials are issued by the identity
        provider, not here.
        """

        async def step(user: User) -> Result[Outcome, DomainException]:
            built = create_user(
                self.context.new_id(),
                text(form, "email"),
                optional_text(form, "role"),
                name=optional_text(form, "name"),
                department=optional_text(form, "department"),
            )
            match built:
                case Err() as failed:
                    return failed
                case Ok(created):
                    saved = await self.repositories.users.save(created)
                    return saved.map(lambda _: Outcome(EntityKind.USER, created.id, data=created))

        return await self.gate.execute("create_user", step, Action.MANAGE_USERS)

    async def update_profile(self, form: Form) -> ActionState:
        """Only fields present in ``form`` change; empty values clear them."""

        async def step(user: User) -> Result[Outcome, DomainException]:
            changes = {key: optional_text(form, key) for key in PROFILE_FIELDS if key in form}
            match _replace(user, **changes):
                case Err() as failed:
                    return failed
                case Ok(updated):
                    saved = await self.repositories.users.save(updated)
                    return saved.map(lambda _: Outcome(EntityKind.USER, updated.id, data=updated))

        return await self.gate.execute("update_profile", step)

    async def update_role(self, user_id: str, form: Form) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            match await require_existing(self.repositories.users, user_id, "User"):
                case Err() as failed:
                    return failed
                case Ok(target):
                    pass

            match _replace(target, role=text(form, "role")):
                case Err() as failed:
                    return failed
                case Ok(updated):
                    saved = await self.repositories.users.save(updated)
                    return saved.map(lambda _: Outcome(EntityKind.USER, updated.id, data=updated))

        return await self.gate.execute("update_user_role", step, Action.MANAGE_USERS)

    async def delete(self, user_id: str) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            if user_id == user.id:
                return Err(RuleViolationError("You cannot delete your own account", rule="no_self_delete"))
            match await require_existing(self.repositories.users, user_id, "User"):
                case Err() as failed:
                    return failed

            deleted = await self.repositories.users.soft_delete(user_id)
            return deleted.map(lambda _: Outcome(EntityKind.USER, user_id))

        return await self.gate.execute("delete_user", step, Action.MANAGE_USERS)
