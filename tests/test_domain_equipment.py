from datetime import date, datetime, timezone

import pytest

from shared.domain.entities import Snapshot
from shared.domain.equipment import (
    RunningState,
    create_equipment,
    create_equipment_category,
    create_equipment_comment,
)
from shared.domain.result import Err

CREATED = datetime(2025, 1, 2, 3, 4, tzinfo=timezone.utc)


@pytest.mark.parametrize("field", ["category_major", "category_minor"])
@pytest.mark.parametrize("blank", ["", "  "])
def test_category_requires_both_levels(field, blank):
    fields = {"id": "c-1", "category_major": "Optics", "category_minor": "Microscopes"}
    result = create_equipment_category(**{**fields, field: blank})
    assert result.unwrap_err().message == f"{field} is required"


def test_category_round_trip():
    category = create_equipment_category("c-1", "Optics", "Microscopes").unwrap()
    assert (category.id, category.category_major, category.category_minor) == (
        "c-1",
        "Optics",
        "Microscopes",
    )


def test_equipment_round_trip_with_defaults():
    item = create_equipment(
        "e-1",
        "Centrifuge",
        description="Bench-top",
        category_major="Lab",
        category_minor="Separation",
        room_id="r-1",
        installation_date=date(2023, 9, 1),
        administrator_id="u-1",
        vice_administrator_ids=["u-2", "u-3"],
    ).unwrap()

    assert item.name == "Centrifuge"
    assert item.running_state is RunningState.OPERATIONAL
    assert item.installation_date == date(2023, 9, 1)
    assert item.vice_administrator_ids == ("u-2", "u-3")
    assert item.administrator is None and item.location is None


def test_equipment_requires_a_name():
    assert create_equipment("e-1", " ").unwrap_err().message == "name is required"


def test_equipment_accepts_running_state_strings():
    item = create_equipment("e-1", "Laser", running_state="MAINTENANCE").unwrap()
    assert item.running_state is RunningState.MAINTENANCE


def test_equipment_rejects_unknown_running_state():
    result = create_equipment("e-1", "Laser", running_state="BROKEN")
    assert isinstance(result, Err)
    assert result.error.message == "Invalid running state: BROKEN"


def test_present_references_must_not_be_blank():
    assert create_equipment("e-1", "Laser", room_id="").unwrap_err().message == "room_id is required"
    assert (
        create_equipment("e-1", "Laser", administrator_id=" ").unwrap_err().message
        == "administrator_id is required"
    )


def test_vice_administrators_are_deduplicated_in_order():
    item = create_equipment("e-1", "Laser", vice_administrator_ids=["u-2", "u-1", "u-2"]).unwrap()
    assert item.vice_administrator_ids == ("u-2", "u-1")


def test_blank_vice_administrator_is_rejected():
    result = create_equipment("e-1", "Laser", vice_administrator_ids=["u-1", ""])
    assert result.unwrap_err().message == "vice_administrator_ids is required"


def test_management_membership():
    item = create_equipment(
        "e-1", "Laser", administrator_id="u-1", vice_administrator_ids=["u-2"]
    ).unwrap()
    assert item.is_managed_by("u-1")
    assert item.is_managed_by("u-2")
    assert not item.is_managed_by("u-3")


@pytest.mark.parametrize("field", ["equipment_id", "user_id", "content"])
def test_comment_required_text(field):
    fields = {
        "id": "m-1",
        "equipment_id": "e-1",
        "user_id": "u-1",
        "content": "Needs new bulb",
        "created_at": CREATED,
    }
    result = create_equipment_comment(**{**fields, field: "   "})
    assert result.unwrap_err().message == f"{field} is required"


def test_comment_requires_timestamp():
    result = create_equipment_comment("m-1", "e-1", "u-1", "Hello", None)
    assert result.unwrap_err().message == "created_at is required"


def test_comment_author_is_display_only():
    comment = create_equipment_comment("m-1", "e-1", "u-1", "Hello", CREATED).unwrap()
    with_author = comment.with_author(Snapshot(id="u-1", name="Ada"))

    assert comment.author is None
    assert with_author.author == Snapshot(id="u-1", name="Ada")
    assert with_author.with_author(None) == comment
