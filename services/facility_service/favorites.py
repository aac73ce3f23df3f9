"""
Favorites Toggle

Check-then-act over the user's favorite set. Two concurrent toggles by the
same user on the same equipment can interleave; because ``add_favorite`` and
``remove_favorite`` are idempotent the set never holds duplicates and the next
read shows the settled state.
"""

import structlog

from shared.domain.exceptions import PersistenceError
from shared.domain.repositories import UserRepository
from shared.domain.result import Err, Ok, Result

logger = structlog.get_logger(__name__)


class FavoritesService:
    def __init__(self, users: UserRepository):
        self.users = users

    async def toggle(self, user_id: str, equipment_id: str) -> Result[bool, PersistenceError]:
        """
        Flip membership of ``equipment_id`` in the user's favorites.

        Returns:
            Ok(True) if the equipment is now a favorite, Ok(False) if it was removed
        """
        match await self.users.get_favorites(user_id):
            case Err() as failed:
                return failed
            case Ok(favorites):
                pass

        if equipment_id in favorites:
            result = await self.users.remove_favorite(user_id, equipment_id)
            is_favorite = False
        else:
            result = await self.users.add_favorite(user_id, equipment_id)
            is_favorite = True

        if result.is_ok():
            logger.debug("Favorite toggled", user_id=user_id, equipment_id=equipment_id, is_favorite=is_favorite)
        return result.map(lambda _: is_favorite)
