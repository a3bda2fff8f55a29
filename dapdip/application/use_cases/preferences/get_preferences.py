"""Use case for reading a user's notification preferences."""

from sqlalchemy.orm import Session

from dapdip.domain.entities import NotificationPreferences
from dapdip.infrastructure.repositories import NotificationPreferencesRepository


def get_preferences(session: Session, user_id: int) -> NotificationPreferences:
    """Return the preferences of ``user_id``, creating the defaults if needed."""

    return NotificationPreferencesRepository(session).get_or_create(user_id)
