"""Evaluate a user's quiet hours against the current time."""

from __future__ import annotations

from datetime import datetime

from dapdip.domain.entities import NotificationPreferences
from dapdip.utils import now_in_app_timezone, resolve_user_timezone
from dapdip.utils import is_within_quiet_hours as _is_within_window


def is_within_quiet_hours(
    preferences: NotificationPreferences, now: datetime | None = None
) -> bool:
    """Return whether ``now`` falls inside the user's quiet hours.

    ``now`` is converted to the timezone stored in the preferences, or the
    application timezone when none is set. Naive values are taken as already
    expressed in that local time.
    """

    moment = now or now_in_app_timezone()
    if moment.tzinfo is not None:
        moment = moment.astimezone(resolve_user_timezone(preferences.timezone))
    return _is_within_window(
        enabled=preferences.quiet_hours_enabled,
        start=preferences.quiet_hours_start,
        end=preferences.quiet_hours_end,
        local_now=moment,
    )


__all__ = ["is_within_quiet_hours"]
