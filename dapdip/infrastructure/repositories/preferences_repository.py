"""Persistence helpers for notification preferences."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dapdip.domain.entities import (
    CategoryPreference,
    GroupPreference,
    NotificationCategory,
    NotificationPreferences,
)
from dapdip.infrastructure.models import (
    CategoryPreferenceModel,
    GroupPreferenceModel,
    NotificationPreferencesModel,
)
from dapdip.utils import ensure_app_timezone


class NotificationPreferencesRepository:
    """Load and store the per-user channel preferences."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_user(self, user_id: int) -> NotificationPreferences | None:
        model = self._get_model(user_id)
        return self._to_entity(model) if model else None

    def get_or_create(self, user_id: int) -> NotificationPreferences:
        """Return the stored preferences, creating the defaults on first access."""

        model = self._get_model(user_id)
        if model is not None:
            return self._to_entity(model)

        model = NotificationPreferencesModel(user_id=user_id)
        self._apply_entity_to_model(model, NotificationPreferences(id=None, user_id=user_id))
        self.session.add(model)
        try:
            self.session.commit()
        except IntegrityError:
            # Another request created the row first.
            self.session.rollback()
            model = self._get_model(user_id)
            if model is None:
                raise
            return self._to_entity(model)
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, preferences: NotificationPreferences) -> NotificationPreferences:
        model = self._get_model(preferences.user_id)
        if model is None:
            msg = f"Preferences for user {preferences.user_id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, preferences)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def _get_model(self, user_id: int) -> NotificationPreferencesModel | None:
        return (
            self.session.query(NotificationPreferencesModel)
            .filter(NotificationPreferencesModel.user_id == user_id)
            .first()
        )

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationPreferencesModel, preferences: NotificationPreferences
    ) -> None:
        model.user_id = preferences.user_id
        model.in_app_enabled = preferences.in_app_enabled
        model.email_enabled = preferences.email_enabled
        model.push_enabled = preferences.push_enabled
        model.quiet_hours_enabled = preferences.quiet_hours_enabled
        model.quiet_hours_start = preferences.quiet_hours_start
        model.quiet_hours_end = preferences.quiet_hours_end
        model.timezone = preferences.timezone

    @staticmethod
    def _to_entity(model: NotificationPreferencesModel) -> NotificationPreferences:
        return NotificationPreferences(
            id=model.id,
            user_id=model.user_id,
            in_app_enabled=model.in_app_enabled,
            email_enabled=model.email_enabled,
            push_enabled=model.push_enabled,
            quiet_hours_enabled=model.quiet_hours_enabled,
            quiet_hours_start=model.quiet_hours_start,
            quiet_hours_end=model.quiet_hours_end,
            timezone=model.timezone,
            updated_at=ensure_app_timezone(model.updated_at),
        )


class CategoryPreferenceRepository:
    """Load and store per-category opt-outs."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(self, user_id: int) -> Sequence[CategoryPreference]:
        query = (
            self.session.query(CategoryPreferenceModel)
            .filter(CategoryPreferenceModel.user_id == user_id)
            .order_by(CategoryPreferenceModel.category)
        )
        return [self._to_entity(model) for model in query.all()]

    def get(
        self, user_id: int, category: NotificationCategory
    ) -> CategoryPreference | None:
        model = self._get_model(user_id, category)
        return self._to_entity(model) if model else None

    def save(self, preference: CategoryPreference) -> CategoryPreference:
        """Insert or update the row for ``preference.category``."""

        model = self._get_model(preference.user_id, preference.category)
        if model is None:
            model = CategoryPreferenceModel()
        model.user_id = preference.user_id
        model.category = preference.category.value
        model.in_app_enabled = preference.in_app_enabled
        model.email_enabled = preference.email_enabled
        model.push_enabled = preference.push_enabled
        model.mute_all = preference.mute_all
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def _get_model(
        self, user_id: int, category: NotificationCategory
    ) -> CategoryPreferenceModel | None:
        return (
            self.session.query(CategoryPreferenceModel)
            .filter(CategoryPreferenceModel.user_id == user_id)
            .filter(CategoryPreferenceModel.category == category.value)
            .first()
        )

    @staticmethod
    def _to_entity(model: CategoryPreferenceModel) -> CategoryPreference:
        return CategoryPreference(
            id=model.id,
            user_id=model.user_id,
            category=NotificationCategory(model.category),
            in_app_enabled=model.in_app_enabled,
            email_enabled=model.email_enabled,
            push_enabled=model.push_enabled,
            mute_all=model.mute_all,
        )


class GroupPreferenceRepository:
    """Load and store per-group notification switches."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int, group_id: int) -> GroupPreference | None:
        model = self._get_model(user_id, group_id)
        return self._to_entity(model) if model else None

    def save(self, preference: GroupPreference) -> GroupPreference:
        model = self._get_model(preference.user_id, preference.group_id)
        if model is None:
            model = GroupPreferenceModel(
                user_id=preference.user_id, group_id=preference.group_id
            )
        model.mute_all = preference.mute_all
        model.posts_enabled = preference.posts_enabled
        model.comments_enabled = preference.comments_enabled
        model.events_enabled = preference.events_enabled
        model.polls_enabled = preference.polls_enabled
        model.mentions_enabled = preference.mentions_enabled
        model.announcements_only = preference.announcements_only
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def _get_model(self, user_id: int, group_id: int) -> GroupPreferenceModel | None:
        return (
            self.session.query(GroupPreferenceModel)
            .filter(GroupPreferenceModel.user_id == user_id)
            .filter(GroupPreferenceModel.group_id == group_id)
            .first()
        )

    @staticmethod
    def _to_entity(model: GroupPreferenceModel) -> GroupPreference:
        return GroupPreference(
            id=model.id,
            user_id=model.user_id,
            group_id=model.group_id,
            mute_all=model.mute_all,
            posts_enabled=model.posts_enabled,
            comments_enabled=model.comments_enabled,
            events_enabled=model.events_enabled,
            polls_enabled=model.polls_enabled,
            mentions_enabled=model.mentions_enabled,
            announcements_only=model.announcements_only,
        )


__all__ = [
    "CategoryPreferenceRepository",
    "GroupPreferenceRepository",
    "NotificationPreferencesRepository",
]
