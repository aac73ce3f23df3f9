from datetime import datetime, timezone

import pytest

from shared.domain.result import Err, Ok
from shared.domain.system_settings import TIMEZONE_KEY, create_system_setting
from shared.domain.users import UserRole, create_user

UPDATED = datetime(2025, 1, 1, tzinfo=timezone.utc)


def test_unknown_timezone_is_rejected():
    result = create_system_setting("s-1", "timezone", "Not/AZone", UPDATED)
    assert isinstance(result, Err)
    assert "Invalid timezone" in result.error.message
    assert result.error.message == "Invalid timezone: Not/AZone"


@pytest.mark.parametrize("zone", ["UTC", "Asia/Tokyo", "Europe/Berlin"])
def test_iana_timezones_are_accepted(zone):
    result = create_system_setting("s-1", TIMEZONE_KEY, zone, UPDATED, "admin")
    assert isinstance(result, Ok)
    assert result.value.value == zone
    assert result.value.updated_by == "admin"


def test_other_keys_accept_any_value():
    assert create_system_setting("s-2", "banner", "Not/AZone", UPDATED).is_ok()


@pytest.mark.parametrize("field", ["key", "value"])
def test_setting_required_text(field):
    fields = {"id": "s-1", "key": "banner", "value": "hello", "updated_at": UPDATED}
    result = create_system_setting(**{**fields, field: ""})
    assert result.unwrap_err().message == f"{field} is required"


def test_blank_timezone_reports_missing_value_first():
    result = create_system_setting("s-1", TIMEZONE_KEY, "  ", UPDATED)
    assert result.unwrap_err().message == "value is required"


def test_user_round_trip():
    user = create_user(
        "u-1",
        "ada@campus.example",
        "EDITOR",
        name="Ada",
        display_name="Ada L.",
        phone_number="555-0100",
        department="Physics",
    ).unwrap()

    assert user.role is UserRole.EDITOR
    assert (user.email, user.name, user.display_name, user.phone_number, user.department) == (
        "ada@campus.example",
        "Ada",
        "Ada L.",
        "555-0100",
        "Physics",
    )
    assert user.snapshot().name == "Ada L."


def test_user_role_defaults_to_general():
    assert create_user("u-1", "ada@campus.example").unwrap().role is UserRole.GENERAL


def test_unknown_role_is_rejected():
    result = create_user("u-1", "ada@campus.example", "ROOT")
    assert result.unwrap_err().message == "Invalid role: ROOT"


@pytest.mark.parametrize("email", ["ada", "ada@", "@campus.example", "ada@campus", "ada@campus."])
def test_malformed_email_is_rejected(email):
    result = create_user("u-1", email)
    assert result.unwrap_err().message == f"Invalid email: {email}"


def test_blank_email_is_required():
    assert create_user("u-1", " ").unwrap_err().message == "email is required"
