"""Use cases for per-category notification opt-outs."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy.orm import Session

from dapdip.domain.entities import CategoryPreference, NotificationCategory
from dapdip.infrastructure.repositories import CategoryPreferenceRepository


def get_category_preference(
    session: Session, user_id: int, category: NotificationCategory
) -> CategoryPreference:
    """Return the stored row, or an everything-enabled default when absent."""

    stored = CategoryPreferenceRepository(session).get(user_id, category)
    return stored or CategoryPreference(id=None, user_id=user_id, category=category)


def list_category_preferences(
    session: Session, user_id: int
) -> list[CategoryPreference]:
    """Return one entry per category, filling the gaps with defaults."""

    stored = {
        preference.category: preference
        for preference in CategoryPreferenceRepository(session).list_for_user(user_id)
    }
    return [
        stored.get(category)
        or CategoryPreference(id=None, user_id=user_id, category=category)
        for category in NotificationCategory
    ]


def update_category_preference(
    session: Session,
    user_id: int,
    category: NotificationCategory,
    *,
    in_app_enabled: bool | None = None,
    email_enabled: bool | None = None,
    push_enabled: bool | None = None,
    mute_all: bool | None = None,
) -> CategoryPreference:
    """Merge the provided switches into the category row."""

    current = get_category_preference(session, user_id, category)
    updated = replace(
        current,
        in_app_enabled=current.in_app_enabled if in_app_enabled is None else in_app_enabled,
        email_enabled=current.email_enabled if email_enabled is None else email_enabled,
        push_enabled=current.push_enabled if push_enabled is None else push_enabled,
        mute_all=current.mute_all if mute_all is None else mute_all,
    )
    return CategoryPreferenceRepository(session).save(updated)


__all__ = [
    "get_category_preference",
    "list_category_preferences",
    "update_category_preference",
]
