from datetime import date, datetime, timedelta, timezone

import pytest

from shared.domain.maintenance import create_maintenance_record
from shared.domain.reservations import create_reservation

START = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
END = START + timedelta(hours=2)


def test_reservation_round_trip():
    reservation = create_reservation("v-1", "e-1", "u-1", START, END, "calibration").unwrap()
    assert (
        reservation.id,
        reservation.equipment_id,
        reservation.user_id,
        reservation.start_time,
        reservation.end_time,
        reservation.comment,
    ) == ("v-1", "e-1", "u-1", START, END, "calibration")


@pytest.mark.parametrize("field", ["equipment_id", "user_id"])
def test_reservation_requires_references(field):
    fields = {"id": "v-1", "equipment_id": "e-1", "user_id": "u-1", "start_time": START, "end_time": END}
    result = create_reservation(**{**fields, field: ""})
    assert result.unwrap_err().message == f"{field} is required"


@pytest.mark.parametrize("end", [START, START - timedelta(minutes=1)])
def test_reservation_start_must_precede_end(end):
    result = create_reservation("v-1", "e-1", "u-1", START, end)
    assert result.unwrap_err().message == "Start time must be before end time"


@pytest.mark.parametrize(
    ("start", "end"),
    [
        (START, datetime(2025, 3, 1, 11, 0)),
        (datetime(2025, 3, 1, 9, 0), datetime(2025, 3, 1, 11, 0)),
    ],
)
def test_reservation_requires_timezone_aware_times(start, end):
    result = create_reservation("v-1", "e-1", "u-1", start, end)
    assert result.unwrap_err().message == "Start and end time must be timezone-aware"


def test_reservation_requires_times():
    result = create_reservation("v-1", "e-1", "u-1", None, END)
    assert result.unwrap_err().message == "start_time is required"


def test_overlap_is_half_open():
    reservation = create_reservation("v-1", "e-1", "u-1", START, END).unwrap()

    assert reservation.overlaps(START + timedelta(hours=1), END + timedelta(hours=1))
    assert reservation.overlaps(START - timedelta(hours=1), START + timedelta(minutes=1))
    assert not reservation.overlaps(END, END + timedelta(hours=1))
    assert not reservation.overlaps(START - timedelta(hours=1), START)


def test_maintenance_round_trip():
    record = create_maintenance_record("m-1", "e-1", date(2025, 2, 3), "Replaced lens", "u-1", 1200).unwrap()
    assert (record.equipment_id, record.record_date, record.description, record.performed_by, record.cost) == (
        "e-1",
        date(2025, 2, 3),
        "Replaced lens",
        "u-1",
        1200,
    )


@pytest.mark.parametrize("field", ["equipment_id", "description", "performed_by"])
def test_maintenance_required_text(field):
    fields = {
        "id": "m-1",
        "equipment_id": "e-1",
        "record_date": date(2025, 2, 3),
        "description": "Replaced lens",
        "performed_by": "u-1",
    }
    result = create_maintenance_record(**{**fields, field: " "})
    assert result.unwrap_err().message == f"{field} is required"


def test_maintenance_requires_date():
    result = create_maintenance_record("m-1", "e-1", None, "Replaced lens", "u-1")
    assert result.unwrap_err().message == "record_date is required"


@pytest.mark.parametrize("cost", [-1, 9.5, False])
def test_maintenance_cost_must_be_non_negative_integer(cost):
    result = create_maintenance_record("m-1", "e-1", date(2025, 2, 3), "Replaced lens", "u-1", cost)
    assert result.unwrap_err().message == "cost must be a non-negative integer"


def test_maintenance_cost_is_optional():
    record = create_maintenance_record("m-1", "e-1", date(2025, 2, 3), "Inspection", "u-1").unwrap()
    assert record.cost is None
