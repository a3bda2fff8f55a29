"""Persist read state and tell the caller's other sessions about it."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from dapdip.domain.entities import MarkedAll, MarkedOne
from dapdip.domain.errors import NotificationNotFoundError
from dapdip.infrastructure.notifications import RelayPublisher, relay_publisher
from dapdip.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)


def mark_read(
    session: Session,
    user_id: int,
    notification_id: int | None = None,
    *,
    publisher: RelayPublisher | None = None,
) -> int:
    """Mark one notification, or all of them when no id is given, as read.

    Only notifications owned by ``user_id`` are touched; an id belonging to
    somebody else is reported as not found. Returns the number of rows that
    changed state. A single id that was already read publishes nothing.
    """

    repository = NotificationRepository(session)
    if notification_id is None:
        changed = repository.mark_all_read(user_id)
        event = MarkedAll()
    else:
        if repository.get_for_recipient(notification_id, recipient_id=user_id) is None:
            raise NotificationNotFoundError(
                f"Notification {notification_id} not found"
            )
        changed = repository.mark_read(notification_id, recipient_id=user_id)
        # sessions decrement on every MarkedOne they receive
        event = MarkedOne(notification_id=notification_id) if changed else None

    logger.debug("User %s marked %s notifications read", user_id, changed)
    if event is not None:
        (publisher or relay_publisher).dispatch(user_id, event)
    return changed


__all__ = ["mark_read"]
