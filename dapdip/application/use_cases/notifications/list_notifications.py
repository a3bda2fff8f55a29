"""Queries over a user's notifications."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from dapdip.infrastructure.repositories import NotificationRepository

from .senders import SenderDirectory, get_sender_directory

MAX_PAGE_SIZE = 100


def list_notifications(
    session: Session,
    user_id: int,
    *,
    limit: int = 20,
    cursor: int | None = None,
    unread_only: bool = False,
    senders: SenderDirectory | None = None,
) -> dict[str, Any]:
    """Return one page of notifications, newest first.

    ``cursor`` is the ``next_cursor`` of the previous page. The unread count
    always covers every notification of the user.
    """

    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValueError(f"limit must be between 1 and {MAX_PAGE_SIZE}")

    repository = NotificationRepository(session)
    rows = list(
        repository.list_for_recipient(
            user_id, limit=limit + 1, before_id=cursor, unread_only=unread_only
        )
    )
    next_cursor = None
    if len(rows) > limit:
        rows = rows[:limit]
        next_cursor = rows[-1].id

    (senders or get_sender_directory()).attach(session, rows)
    return {
        "notifications": rows,
        "unread_count": repository.count_unread(user_id),
        "next_cursor": next_cursor,
    }


def get_unread_count(session: Session, user_id: int) -> int:
    return NotificationRepository(session).count_unread(user_id)


__all__ = ["MAX_PAGE_SIZE", "get_unread_count", "list_notifications"]
