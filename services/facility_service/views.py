"""
View Invalidation

Every successful mutation declares which rendered views it made stale. The
mapping from entity kind to view paths lives here and nowhere else; actions
only name the kind and ids involved.
"""

from abc import ABC, abstractmethod
from enum import Enum

import redis.asyncio as aioredis
import structlog

logger = structlog.get_logger(__name__)


class EntityKind(str, Enum):
    BUILDING = "building"
    FLOOR = "floor"
    ROOM = "room"
    EQUIPMENT = "equipment"
    EQUIPMENT_CATEGORY = "equipment_category"
    EQUIPMENT_COMMENT = "equipment_comment"
    MAINTENANCE_RECORD = "maintenance_record"
    RESERVATION = "reservation"
    FAVORITE = "favorite"
    SYSTEM_SETTING = "system_setting"
    USER = "user"


def affected_views(
    kind: EntityKind,
    entity_id: str | None = None,
    equipment_id: str | None = None,
) -> tuple[str, ...]:
    """
    View paths made stale by a mutation.

    Args:
        kind: Kind of entity that changed
        entity_id: Id of the changed entity (equipment pages are per id)
        equipment_id: Owning equipment for comments, maintenance and favorites

    Returns:
        Paths in invalidation order, without duplicates
    """
    if kind in (EntityKind.BUILDING, EntityKind.FLOOR, EntityKind.ROOM):
        paths = ["/buildings"]
    elif kind is EntityKind.EQUIPMENT:
        paths = ["/reservations", "/equipments"]
        if entity_id:
            paths.append(f"/equipments/{entity_id}")
    elif kind is EntityKind.EQUIPMENT_CATEGORY:
        paths = ["/equipments"]
    elif kind in (EntityKind.EQUIPMENT_COMMENT, EntityKind.MAINTENANCE_RECORD):
        paths = [f"/equipments/{equipment_id}"] if equipment_id else ["/equipments"]
    elif kind is EntityKind.RESERVATION:
        paths = ["/reservations"]
        if equipment_id:
            paths.append(f"/equipments/{equipment_id}")
    elif kind is EntityKind.FAVORITE:
        paths = ["/dashboard", "/equipments"]
        if equipment_id:
            paths.append(f"/equipments/{equipment_id}")
    elif kind is EntityKind.SYSTEM_SETTING:
        paths = ["/"]
    elif kind is EntityKind.USER:
        paths = ["/users", "/equipments"]
    else:
        paths = []
    return tuple(dict.fromkeys(paths))


class ViewInvalidator(ABC):
    @abstractmethod
    async def invalidate(self, path: str) -> None:
        """Mark the rendered view at ``path`` stale."""


class RecordingViewInvalidator(ViewInvalidator):
    """Keeps invalidated paths in memory, in call order."""

    def __init__(self):
        self.paths: list[str] = []

    async def invalidate(self, path: str) -> None:
        self.paths.append(path)

    def clear(self) -> None:
        self.paths.clear()


class RedisViewInvalidator(ViewInvalidator):
    """
    Drops the cached render of ``path`` and publishes the path so other
    processes holding in-memory renders can drop theirs.
    """

    def __init__(self, client: aioredis.Redis, prefix: str = "view:", channel: str = "views:invalidate"):
        self.client = client
        self.prefix = prefix
        self.channel = channel

    async def invalidate(self, path: str) -> None:
        await self.client.delete(f"{self.prefix}{path}")
        await self.client.publish(self.channel, path)
        logger.debug("View invalidated", path=path, channel=self.channel)
