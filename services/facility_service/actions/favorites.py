"""Per-user equipment favorites."""

from services.facility_service.actions.base import ActionGroup
from services.facility_service.favorites import FavoritesService
from services.facility_service.gate import ActionState, Outcome, require_existing
from services.facility_service.views import EntityKind
from shared.domain.exceptions import DomainException
from shared.domain.result import Err, Ok, Result
from shared.domain.users import User


class FavoriteActions(ActionGroup):
    @property
    def service(self) -> FavoritesService:
        return FavoritesService(self.repositories.users)

    async def favorite_ids(self) -> Result[set[str], DomainException]:
        """Equipment ids the signed-in user has marked."""
        match await self.gate.authenticate():
            case Err() as failed:
                return failed
            case Ok(user):
                return await self.repositories.users.get_favorites(user.id)

    async def toggle(self, equipment_id: str) -> ActionState:
        """``data`` is ``{"is_favorite": bool}`` after the toggle."""

        async def step(user: User) -> Result[Outcome, DomainException]:
            match await require_existing(self.repositories.equipment, equipment_id, "Equipment"):
                case Err() as failed:
                    return failed

            toggled = await self.service.toggle(user.id, equipment_id)
            return toggled.map(
                lambda is_favorite: Outcome(
                    EntityKind.FAVORITE,
                    equipment_id,
                    equipment_id=equipment_id,
                    data={"is_favorite": is_favorite},
                )
            )

        return await self.gate.execute("toggle_favorite", step)
