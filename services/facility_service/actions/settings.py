"""System timezone setting."""

import structlog

from services.facility_service.actions.base import ActionGroup
from services.facility_service.context import ActionContext
from services.facility_service.forms import Form, text
from services.facility_service.gate import ActionState, Outcome
from services.facility_service.views import EntityKind
from shared.domain.exceptions import DomainException
from shared.domain.result import Err, Ok, Result
from shared.domain.system_settings import TIMEZONE_KEY, create_system_setting
from shared.domain.users import User
from shared.security.rbac import Action

logger = structlog.get_logger(__name__)


async def resolve_timezone(context: ActionContext) -> str:
    """Stored timezone, or the configured default when absent or unreadable."""
    match await context.repositories.settings.find_by_key(TIMEZONE_KEY):
        case Ok(None):
            return context.settings.default_timezone
        case Ok(setting):
            return setting.value
        case Err(error):
            logger.warning("Falling back to default timezone", error=error.message)
            return context.settings.default_timezone


class SettingsActions(ActionGroup):
    async def get_timezone(self) -> str:
        return await resolve_timezone(self.context)

    async def update_timezone(self, form: Form) -> ActionState:
        async def step(user: User) -> Result[Outcome, DomainException]:
            match await self.repositories.settings.find_by_key(TIMEZONE_KEY):
                case Err() as failed:
                    return failed
                case Ok(existing):
                    setting_id = existing.id if existing else self.context.new_id()

            built = create_system_setting(
                setting_id,
                TIMEZONE_KEY,
                text(form, "timezone"),
                self.context.clock(),
                user.id,
            )
            match built:
                case Err() as failed:
                    return failed
                case Ok(setting):
                    saved = await self.repositories.settings.save(setting)
                    return saved.map(
                        lambda _: Outcome(EntityKind.SYSTEM_SETTING, setting.id, data=setting)
                    )

        return await self.gate.execute("update_timezone", step, Action.MANAGE_SETTINGS)
