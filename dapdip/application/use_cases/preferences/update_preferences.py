"""Use case for partially updating notification preferences."""

from __future__ import annotations

import logging
from dataclasses import replace

from sqlalchemy.orm import Session

from dapdip.domain.entities import NotificationPreferences
from dapdip.infrastructure.repositories import NotificationPreferencesRepository
from dapdip.utils import DEFAULT_QUIET_HOURS_END, DEFAULT_QUIET_HOURS_START

logger = logging.getLogger(__name__)


def update_preferences(
    session: Session,
    user_id: int,
    *,
    in_app_enabled: bool | None = None,
    email_enabled: bool | None = None,
    push_enabled: bool | None = None,
    quiet_hours_enabled: bool | None = None,
    quiet_hours_start: str | None = None,
    quiet_hours_end: str | None = None,
    timezone: str | None = None,
) -> NotificationPreferences:
    """Merge the provided values into the stored preferences.

    Arguments left as ``None`` keep their stored value. Turning quiet hours on
    without a stored window seeds the default ``22:00``-``08:00`` window.
    """

    repository = NotificationPreferencesRepository(session)
    current = repository.get_or_create(user_id)

    updated = replace(
        current,
        in_app_enabled=_pick(in_app_enabled, current.in_app_enabled),
        email_enabled=_pick(email_enabled, current.email_enabled),
        push_enabled=_pick(push_enabled, current.push_enabled),
        quiet_hours_enabled=_pick(quiet_hours_enabled, current.quiet_hours_enabled),
        quiet_hours_start=_pick(quiet_hours_start, current.quiet_hours_start),
        quiet_hours_end=_pick(quiet_hours_end, current.quiet_hours_end),
        timezone=_pick(timezone, current.timezone),
    )

    if updated.quiet_hours_enabled:
        if not updated.quiet_hours_start:
            updated = replace(updated, quiet_hours_start=DEFAULT_QUIET_HOURS_START)
        if not updated.quiet_hours_end:
            updated = replace(updated, quiet_hours_end=DEFAULT_QUIET_HOURS_END)

    saved = repository.update(updated)
    logger.debug("Notification preferences updated for user %s", user_id)
    return saved


def _pick(value, fallback):
    return fallback if value is None else value


__all__ = ["update_preferences"]
