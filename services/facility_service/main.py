"""
Facility Service - Dashboard Core

Composition root: wires repositories, the session provider and the view
invalidator into one ``ActionContext`` and exposes every action group.
Transports (HTTP form handlers, RPC, CLI) call into ``FacilityActions``.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import structlog

from services.facility_service.actions.dashboard import DashboardActions
from services.facility_service.actions.equipment import (
    CategoryActions,
    CommentActions,
    EquipmentActions,
    MaintenanceActions,
)
from services.facility_service.actions.facilities import BuildingActions, FloorActions, RoomActions
from services.facility_service.actions.favorites import FavoriteActions
from services.facility_service.actions.reservations import ReservationActions
from services.facility_service.actions.settings import SettingsActions
from services.facility_service.actions.users import UserActions
from services.facility_service.context import ActionContext, Repositories
from services.facility_service.views import RedisViewInvalidator, ViewInvalidator
from shared.cache.redis import close_redis, init_redis
from shared.config import Settings, get_settings
from shared.logging_config import configure_logging
from shared.security.identity import SessionProvider

logger = structlog.get_logger(__name__)


@dataclass
class FacilityActions:
    buildings: BuildingActions
    floors: FloorActions
    rooms: RoomActions
    categories: CategoryActions
    equipment: EquipmentActions
    comments: CommentActions
    maintenance: MaintenanceActions
    reservations: ReservationActions
    settings: SettingsActions
    favorites: FavoriteActions
    users: UserActions
    dashboard: DashboardActions


def build_actions(context: ActionContext) -> FacilityActions:
    return FacilityActions(
        buildings=BuildingActions(context),
        floors=FloorActions(context),
        rooms=RoomActions(context),
        categories=CategoryActions(context),
        equipment=EquipmentActions(context),
        comments=CommentActions(context),
        maintenance=MaintenanceActions(context),
        reservations=ReservationActions(context),
        settings=SettingsActions(context),
        favorites=FavoriteActions(context),
        users=UserActions(context),
        dashboard=DashboardActions(context),
    )


@asynccontextmanager
async def facility_service(
    repositories: Repositories,
    sessions: SessionProvider,
    views: ViewInvalidator | None = None,
    settings: Settings | None = None,
) -> AsyncGenerator[FacilityActions, None]:
    """
    Service lifespan.

    Without an explicit ``views`` invalidator a Redis connection is opened
    and closed with the service.
    """
    settings = settings or get_settings()
    configure_logging(settings)
    logger.info("Starting Facility Service", environment=settings.environment)

    owns_redis = views is None
    if owns_redis:
        client = await init_redis(settings)
        views = RedisViewInvalidator(
            client,
            prefix=settings.view_cache_prefix,
            channel=settings.view_invalidation_channel,
        )

    context = ActionContext(
        repositories=repositories,
        sessions=sessions,
        views=views,
        settings=settings,
    )
    try:
        yield build_actions(context)
    finally:
        if owns_redis:
            await close_redis()
        logger.info("Facility Service shutdown complete")
