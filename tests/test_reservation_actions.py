from datetime import datetime, timezone

import pytest

from shared.domain.system_settings import create_system_setting

UPDATED = datetime(2025, 6, 1, tzinfo=timezone.utc)


@pytest.fixture
def tokyo(db):
    setting = create_system_setting("s-1", "timezone", "Asia/Tokyo", UPDATED).unwrap()
    db.settings[setting.key] = setting
    return setting


def booking(equipment_id, start, end, comment=""):
    return {"equipment_id": equipment_id, "start_time": start, "end_time": end, "comment": comment}


async def test_local_times_are_stored_in_utc(actions, db, equipment, general, sign_in, tokyo, views):
    sign_in(general)

    state = await actions.reservations.create(booking(equipment.id, "2025-11-21T14:00", "2025-11-21T15:30"))

    assert state.success, state.error
    stored = db.reservations[state.data.id]
    assert stored.start_time == datetime(2025, 11, 21, 5, 0, tzinfo=timezone.utc)
    assert stored.end_time == datetime(2025, 11, 21, 6, 30, tzinfo=timezone.utc)
    assert stored.user_id == general.id
    assert stored.comment is None
    assert views.paths == ["/reservations", f"/equipments/{equipment.id}"]


async def test_overlapping_reservation_is_rejected(actions, db, equipment, general, other_general, sign_in):
    sign_in(general)
    assert (await actions.reservations.create(booking(equipment.id, "2025-07-01T09:00", "2025-07-01T11:00"))).success

    sign_in(other_general)
    clash = await actions.reservations.create(booking(equipment.id, "2025-07-01T10:00", "2025-07-01T12:00"))
    back_to_back = await actions.reservations.create(booking(equipment.id, "2025-07-01T11:00", "2025-07-01T12:00"))

    assert clash.to_dict() == {"error": "Time slot already reserved"}
    assert back_to_back.success
    assert len(db.reservations) == 2


async def test_reversed_times_are_a_validation_error(actions, equipment, general, sign_in):
    sign_in(general)
    state = await actions.reservations.create(booking(equipment.id, "2025-07-01T11:00", "2025-07-01T09:00"))
    assert state.error == "Start time must be before end time"


async def test_unparseable_time(actions, equipment, general, sign_in):
    sign_in(general)
    state = await actions.reservations.create(booking(equipment.id, "tomorrow", "2025-07-01T09:00"))
    assert state.error == "start_time must be a valid date and time"


async def test_missing_times_are_required(actions, equipment, general, sign_in):
    sign_in(general)
    state = await actions.reservations.create({"equipment_id": equipment.id})
    assert state.error == "start_time is required"


async def test_owner_can_move_own_reservation_without_self_conflict(actions, db, equipment, general, sign_in):
    sign_in(general)
    reservation_id = (
        await actions.reservations.create(booking(equipment.id, "2025-07-01T09:00", "2025-07-01T10:00"))
    ).data.id

    moved = await actions.reservations.update(
        reservation_id, booking(equipment.id, "2025-07-01T09:30", "2025-07-01T10:30", "moved")
    )

    assert moved.success, moved.error
    assert db.reservations[reservation_id].comment == "moved"
    assert db.reservations[reservation_id].user_id == general.id


async def test_staff_can_manage_others_reservations(actions, db, equipment, general, editor, other_general, sign_in):
    sign_in(general)
    reservation_id = (
        await actions.reservations.create(booking(equipment.id, "2025-07-01T09:00", "2025-07-01T10:00"))
    ).data.id

    sign_in(other_general)
    assert (await actions.reservations.delete(reservation_id)).error == "Forbidden"
    assert (
        await actions.reservations.update(
            reservation_id, booking(equipment.id, "2025-07-01T12:00", "2025-07-01T13:00")
        )
    ).error == "Forbidden"

    sign_in(editor)
    updated = await actions.reservations.update(
        reservation_id, booking(equipment.id, "2025-07-01T12:00", "2025-07-01T13:00")
    )
    assert updated.success
    assert db.reservations[reservation_id].user_id == general.id
    assert (await actions.reservations.delete(reservation_id)).success
    assert db.reservations == {}


async def test_reservation_reads_carry_snapshots(actions, equipment, general, sign_in):
    sign_in(general)
    await actions.reservations.create(booking(equipment.id, "2025-07-01T09:00", "2025-07-01T10:00"))

    [reservation] = (await actions.reservations.list_by_equipment(equipment.id)).unwrap()
    assert reservation.booker.id == general.id
    assert reservation.equipment.name == "Microscope"
    assert (await actions.reservations.list_all()).unwrap() == [reservation]


async def test_missing_equipment_is_reported_before_bad_times(actions, db, general, sign_in):
    sign_in(general)
    state = await actions.reservations.create(booking("", "tomorrow", "2025-07-01T10:00"))
    assert state.error == "equipment_id is required"
    assert db.reservations == {}


async def test_get_reservation(actions, equipment, general, sign_in):
    sign_in(general)
    created = await actions.reservations.create(booking(equipment.id, "2025-07-01T09:00", "2025-07-01T10:00"))

    found = (await actions.reservations.get(created.data.id)).unwrap()

    assert found.id == created.data.id
    assert found.booker.id == general.id
    assert (await actions.reservations.get("missing")).unwrap() is None
