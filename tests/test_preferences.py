"""Tests for notification preferences and quiet hours."""

from __future__ import annotations

from datetime import datetime, time, timezone

import pytest

from dapdip.application.use_cases.preferences import (
    get_category_preference,
    get_group_preference,
    get_preferences,
    is_within_quiet_hours,
    list_category_preferences,
    update_category_preference,
    update_group_preference,
    update_preferences,
)
from dapdip.domain.entities import (
    GroupPreference,
    NotificationCategory,
    NotificationPreferences,
    NotificationType,
)
from dapdip.utils import is_time_in_window, parse_time_of_day, resolve_user_timezone
from dapdip.utils.datetime import get_app_timezone


def test_preferences_are_created_with_defaults(session, make_user) -> None:
    user = make_user()

    preferences = get_preferences(session, user.id)

    assert preferences.in_app_enabled is True
    assert preferences.email_enabled is False
    assert preferences.push_enabled is True
    assert preferences.quiet_hours_enabled is False
    assert preferences.quiet_hours_start is None
    assert get_preferences(session, user.id).id == preferences.id


def test_partial_update_keeps_other_fields(session, make_user) -> None:
    user = make_user()
    update_preferences(session, user.id, email_enabled=True)

    updated = update_preferences(session, user.id, push_enabled=False)

    assert updated.email_enabled is True
    assert updated.push_enabled is False
    assert updated.in_app_enabled is True


def test_enabling_quiet_hours_seeds_default_window(session, make_user) -> None:
    user = make_user()

    updated = update_preferences(session, user.id, quiet_hours_enabled=True)

    assert updated.quiet_hours_start == "22:00"
    assert updated.quiet_hours_end == "08:00"


def test_enabling_quiet_hours_keeps_an_existing_window(session, make_user) -> None:
    user = make_user()
    update_preferences(session, user.id, quiet_hours_start="23:30", quiet_hours_end="06:00")

    updated = update_preferences(session, user.id, quiet_hours_enabled=True)

    assert (updated.quiet_hours_start, updated.quiet_hours_end) == ("23:30", "06:00")


def test_category_defaults_enable_every_channel(session, make_user) -> None:
    user = make_user()

    preference = get_category_preference(session, user.id, NotificationCategory.GROUP)

    assert preference.id is None
    assert preference.allows_in_app() and preference.allows_email() and preference.allows_push()
    assert [p.category for p in list_category_preferences(session, user.id)] == list(
        NotificationCategory
    )


def test_partial_category_update(session, make_user) -> None:
    user = make_user()
    update_category_preference(session, user.id, NotificationCategory.SOCIAL, email_enabled=False)

    updated = update_category_preference(
        session, user.id, NotificationCategory.SOCIAL, push_enabled=False
    )

    assert updated.email_enabled is False
    assert updated.push_enabled is False
    assert updated.in_app_enabled is True
    assert get_category_preference(session, user.id, NotificationCategory.SOCIAL).id == updated.id


def test_mute_all_silences_every_channel(session, make_user) -> None:
    user = make_user()

    muted = update_category_preference(session, user.id, NotificationCategory.PAGE, mute_all=True)

    assert not muted.allows_in_app()
    assert not muted.allows_email()
    assert not muted.allows_push()


def test_group_defaults_let_everything_through(session, make_user) -> None:
    user = make_user()

    preference = get_group_preference(session, user.id, 42)

    assert preference.id is None
    assert preference.group_id == 42
    assert all(preference.allows(kind) for kind in NotificationType)


def test_group_update_is_partial_and_per_group(session, make_user) -> None:
    user = make_user()
    update_group_preference(session, user.id, 42, polls_enabled=False)

    updated = update_group_preference(session, user.id, 42, announcements_only=True)

    assert updated.polls_enabled is False
    assert updated.announcements_only is True
    assert get_group_preference(session, user.id, 42).id == updated.id
    assert get_group_preference(session, user.id, 7).id is None


def test_group_update_rejects_unknown_switches(session, make_user) -> None:
    user = make_user()

    with pytest.raises(ValueError):
        update_group_preference(session, user.id, 42, reactions_enabled=False)


@pytest.mark.parametrize(
    ("switches", "kind", "expected"),
    [
        ({"mute_all": True}, NotificationType.GROUP_ANNOUNCEMENT, False),
        ({"posts_enabled": False}, NotificationType.GROUP_POST, False),
        ({"posts_enabled": False}, NotificationType.GROUP_COMMENT, True),
        ({"comments_enabled": False}, NotificationType.GROUP_COMMENT, False),
        ({"events_enabled": False}, NotificationType.GROUP_EVENT, False),
        ({"polls_enabled": False}, NotificationType.GROUP_POLL, False),
        ({"mentions_enabled": False}, NotificationType.GROUP_MENTION, False),
        ({"announcements_only": True}, NotificationType.GROUP_ANNOUNCEMENT, True),
        ({"announcements_only": True}, NotificationType.GROUP_REACTION, False),
    ],
)
def test_group_switches(switches, kind, expected) -> None:
    preference = GroupPreference(id=None, user_id=1, group_id=42, **switches)

    assert preference.allows(kind) is expected


@pytest.mark.parametrize(
    ("moment", "start", "end", "expected"),
    [
        ("23:30", "22:00", "08:00", True),
        ("07:59", "22:00", "08:00", True),
        ("08:00", "22:00", "08:00", False),
        ("12:00", "22:00", "08:00", False),
        ("22:00", "22:00", "08:00", True),
        ("13:00", "12:00", "14:00", True),
        ("14:00", "12:00", "14:00", False),
        ("10:00", "10:00", "10:00", False),
    ],
)
def test_quiet_hours_window(moment, start, end, expected) -> None:
    assert (
        is_time_in_window(parse_time_of_day(moment), parse_time_of_day(start), parse_time_of_day(end))
        is expected
    )


def test_time_of_day_must_be_hh_mm() -> None:
    assert parse_time_of_day("07:05") == time(7, 5)
    with pytest.raises(ValueError):
        parse_time_of_day("7pm")


def test_quiet_hours_use_the_preference_timezone() -> None:
    preferences = NotificationPreferences(
        id=None,
        user_id=1,
        quiet_hours_enabled=True,
        quiet_hours_start="22:00",
        quiet_hours_end="08:00",
        timezone="America/New_York",
    )
    # 03:00 UTC is 22:00 of the previous day in New York
    moment = datetime(2026, 1, 15, 3, 0, tzinfo=timezone.utc)

    assert is_within_quiet_hours(preferences, moment) is True
    assert is_within_quiet_hours(preferences, datetime(2026, 1, 15, 15, 0, tzinfo=timezone.utc)) is False


def test_disabled_quiet_hours_are_advisory() -> None:
    preferences = NotificationPreferences(
        id=None,
        user_id=1,
        quiet_hours_enabled=False,
        quiet_hours_start="00:00",
        quiet_hours_end="23:59",
    )

    assert is_within_quiet_hours(preferences, datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)) is False


def test_unknown_user_timezone_falls_back_to_the_app_timezone(caplog) -> None:
    with caplog.at_level("WARNING"):
        resolved = resolve_user_timezone("Mars/Olympus")

    assert resolved is get_app_timezone()
    assert "Mars/Olympus" in caplog.text
    assert resolve_user_timezone("  ") is get_app_timezone()
    assert str(resolve_user_timezone("Asia/Tokyo")) == "Asia/Tokyo"
