from datetime import date, datetime, timezone

import pytest

from services.facility_service.context import ActionContext
from services.facility_service.main import build_actions
from services.facility_service.repositories.memory import (
    InMemoryDatabase,
    create_in_memory_repositories,
)
from services.facility_service.views import RecordingViewInvalidator
from shared.config import Settings
from shared.domain.equipment import create_equipment
from shared.domain.facilities import create_building, create_floor, create_room
from shared.domain.users import User, UserRole, create_user
from shared.security.identity import StaticSessionProvider

FIXED_NOW = datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)


class SequentialIds:
    """Deterministic id generator: id-1, id-2, ..."""

    def __init__(self):
        self.issued: list[str] = []

    def __call__(self) -> str:
        self.issued.append(f"id-{len(self.issued) + 1}")
        return self.issued[-1]


@pytest.fixture
def db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def repositories(db):
    return create_in_memory_repositories(db)


@pytest.fixture
def sessions() -> StaticSessionProvider:
    return StaticSessionProvider()


@pytest.fixture
def views() -> RecordingViewInvalidator:
    return RecordingViewInvalidator()


@pytest.fixture
def settings() -> Settings:
    return Settings(default_timezone="UTC", log_format="text")


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def context(repositories, sessions, views, settings, ids) -> ActionContext:
    return ActionContext(
        repositories=repositories,
        sessions=sessions,
        views=views,
        settings=settings,
        new_id=ids,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def actions(context):
    return build_actions(context)


def _seed_user(db: InMemoryDatabase, user_id: str, role: UserRole) -> User:
    user = create_user(user_id, f"{user_id}@campus.example", role, name=user_id.title()).unwrap()
    db.users[user.id] = user
    return user


@pytest.fixture
def admin(db) -> User:
    return _seed_user(db, "admin", UserRole.ADMIN)


@pytest.fixture
def editor(db) -> User:
    return _seed_user(db, "editor", UserRole.EDITOR)


@pytest.fixture
def general(db) -> User:
    return _seed_user(db, "general", UserRole.GENERAL)


@pytest.fixture
def other_general(db) -> User:
    return _seed_user(db, "other", UserRole.GENERAL)


@pytest.fixture
def sign_in(sessions):
    def _sign_in(user: User) -> None:
        sessions.sign_in(user.id, user.email, user.role.value)

    return _sign_in


@pytest.fixture
def building(db):
    item = create_building("b-1", "Main Hall", "1 Campus Road").unwrap()
    db.buildings[item.id] = item
    return item


@pytest.fixture
def floor(db, building):
    item = create_floor("f-1", "Ground", building.id, 0).unwrap()
    db.floors[item.id] = item
    return item


@pytest.fixture
def room(db, floor):
    item = create_room("r-1", "Lab 1", floor.id, 20).unwrap()
    db.rooms[item.id] = item
    return item


@pytest.fixture
def equipment(db, room, general):
    item = create_equipment(
        "e-1",
        "Microscope",
        description="Optical microscope",
        room_id=room.id,
        installation_date=date(2024, 4, 1),
        administrator_id=general.id,
    ).unwrap()
    db.equipment[item.id] = item
    return item
