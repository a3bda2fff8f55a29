"""Use cases for per-group notification switches."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy.orm import Session

from dapdip.domain.entities import GroupPreference
from dapdip.infrastructure.repositories import GroupPreferenceRepository

_SWITCHES = (
    "mute_all",
    "posts_enabled",
    "comments_enabled",
    "events_enabled",
    "polls_enabled",
    "mentions_enabled",
    "announcements_only",
)


def get_group_preference(
    session: Session, user_id: int, group_id: int
) -> GroupPreference:
    """Return the stored row, or a default that lets every group type through."""

    stored = GroupPreferenceRepository(session).get(user_id, group_id)
    return stored or GroupPreference(id=None, user_id=user_id, group_id=group_id)


def update_group_preference(
    session: Session, user_id: int, group_id: int, **switches: bool | None
) -> GroupPreference:
    unknown = set(switches) - set(_SWITCHES)
    if unknown:
        raise ValueError(f"Unknown group preference fields: {', '.join(sorted(unknown))}")

    current = get_group_preference(session, user_id, group_id)
    updated = replace(
        current,
        **{name: value for name, value in switches.items() if value is not None},
    )
    return GroupPreferenceRepository(session).save(updated)


__all__ = ["get_group_preference", "update_group_preference"]
