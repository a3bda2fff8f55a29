"""Wire representation of notifications sent over the relay."""

from __future__ import annotations

from typing import Any

from dapdip.domain.entities import Notification

from .templates import render_notification_text


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return a JSON-serializable representation of ``notification``.

    ``text`` is the display string resolved from the type template, so
    every client renders the same wording.
    """

    sender = notification.sender
    return {
        "id": notification.id,
        "recipient_id": notification.recipient_id,
        "type": notification.type.value,
        "category": notification.category.value,
        "content": notification.content,
        "text": render_notification_text(
            notification.type, notification.content, sender.name if sender else None
        ),
        "is_read": notification.is_read,
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
        "priority": notification.priority.value,
        "is_actionable": notification.is_actionable,
        "action_label": notification.action_label,
        "action_url": notification.action_url,
        "image_url": notification.image_url,
        "url": notification.url,
        "group_id": notification.group_id,
        "page_id": notification.page_id,
        "metadata": dict(notification.metadata or {}),
        "sender": {
            "id": sender.id,
            "name": sender.name,
            "image_url": sender.image_url,
        }
        if sender
        else None,
    }


__all__ = ["serialize_notification"]
