from datetime import datetime, timedelta, timezone

from shared.domain.entities import Snapshot
from shared.domain.equipment import create_equipment_comment
from shared.domain.reservations import create_reservation
from shared.domain.result import Ok
from shared.domain.system_settings import create_system_setting
from shared.domain.users import create_user
from shared.security.identity import ContextSessionProvider, Session, SessionUser, StaticSessionProvider

START = datetime(2025, 5, 1, 9, tzinfo=timezone.utc)


async def test_save_is_an_upsert(repositories, db, building):
    renamed = building.model_copy(update={"name": "Renamed"})

    assert await repositories.buildings.save(renamed) == Ok(None)
    assert await repositories.buildings.save(renamed) == Ok(None)

    assert (await repositories.buildings.find_all()).unwrap() == [renamed]
    assert await repositories.buildings.find_by_id("missing") == Ok(None)


async def test_every_operation_fails_when_storage_is_unavailable(repositories, db, building):
    db.unavailable = True

    for call in (
        repositories.buildings.find_all(),
        repositories.buildings.find_by_id(building.id),
        repositories.buildings.save(building),
        repositories.buildings.delete(building.id),
        repositories.floors.find_by_building_id(building.id),
        repositories.settings.find_by_key("timezone"),
        repositories.users.get_favorites("u"),
        repositories.users.soft_delete("u"),
    ):
        result = await call
        assert result.is_err()
        assert result.error.message == "Database connection unavailable"
    assert db.writes == []


async def test_display_snapshots_are_not_persisted(repositories, db, equipment, general):
    comment = create_equipment_comment(
        "c-1", equipment.id, general.id, "Hi", START, author=Snapshot(id="x", name="Forged")
    ).unwrap()

    await repositories.comments.save(comment)

    assert db.comments["c-1"].author is None
    [read] = (await repositories.comments.find_by_equipment_id(equipment.id)).unwrap()
    assert read.author == Snapshot(id=general.id, name="General")


async def test_comments_are_oldest_first(repositories, equipment, general):
    for offset, comment_id in ((2, "late"), (0, "early"), (1, "middle")):
        comment = create_equipment_comment(
            comment_id, equipment.id, general.id, "x", START + timedelta(minutes=offset)
        ).unwrap()
        await repositories.comments.save(comment)

    comments = (await repositories.comments.find_by_equipment_id(equipment.id)).unwrap()
    assert [c.id for c in comments] == ["early", "middle", "late"]


async def test_date_range_query_uses_half_open_overlap(repositories, equipment, general):
    reservation = create_reservation("v-1", equipment.id, general.id, START, START + timedelta(hours=1)).unwrap()
    await repositories.reservations.save(reservation)

    def query(start, end):
        return repositories.reservations.find_by_equipment_and_date_range(equipment.id, start, end)

    assert len((await query(START + timedelta(minutes=30), START + timedelta(hours=2))).unwrap()) == 1
    assert (await query(START + timedelta(hours=1), START + timedelta(hours=2))).unwrap() == []
    assert (
        await repositories.reservations.find_by_equipment_and_date_range("other", START, START + timedelta(hours=1))
    ).unwrap() == []


async def test_settings_upsert_by_key(repositories, db):
    first = create_system_setting("s-1", "timezone", "UTC", START).unwrap()
    second = create_system_setting("s-2", "timezone", "Asia/Tokyo", START).unwrap()

    await repositories.settings.save(first)
    await repositories.settings.save(second)

    assert (await repositories.settings.find_by_key("timezone")).unwrap() == second
    assert len(db.settings) == 1


async def test_user_email_is_unique_among_live_users(repositories, general):
    clash = create_user("u-9", general.email.upper()).unwrap()

    assert (await repositories.users.save(clash)).unwrap_err().message == "Email already in use"
    assert (await repositories.users.find_by_email(general.email.upper())).unwrap() == general

    await repositories.users.soft_delete(general.id)
    assert (await repositories.users.save(clash)).is_ok()
    assert (await repositories.users.find_by_email(general.email)).unwrap() == clash


async def test_soft_deleted_users_are_hidden_and_detached(repositories, db, equipment, general, editor):
    db.equipment[equipment.id] = equipment.model_copy(update={"vice_administrator_ids": (editor.id,)})

    await repositories.users.soft_delete(editor.id)

    assert await repositories.users.find_by_id(editor.id) == Ok(None)
    assert [u.id for u in (await repositories.users.find_all()).unwrap()] == [general.id]
    assert db.equipment[equipment.id].vice_administrator_ids == ()
    assert db.equipment[equipment.id].administrator_id == general.id


async def test_favorites_require_existing_equipment(repositories, general):
    result = await repositories.users.add_favorite(general.id, "missing")
    assert result.unwrap_err().message == "Referenced equipment does not exist"


async def test_static_session_provider():
    sessions = StaticSessionProvider()
    assert await sessions.get_current_session() is None

    session = sessions.sign_in("u-1", "u@campus.example", "ADMIN")
    assert await sessions.get_current_session() == session

    sessions.sign_out()
    assert await sessions.get_current_session() is None


async def test_context_session_provider_binds_per_scope():
    sessions = ContextSessionProvider()
    session = Session(user=SessionUser(id="u-1", email="u@campus.example", role="EDITOR"))

    with sessions.bind(session):
        assert await sessions.get_current_session() == session
    assert await sessions.get_current_session() is None
