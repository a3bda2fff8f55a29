"""Notification writer, read-state and query use cases."""

from .devices import list_push_devices, register_push_device, unregister_push_device
from .list_notifications import MAX_PAGE_SIZE, get_unread_count, list_notifications
from .mark_read import mark_read
from .notify import (
    SKIP_CATEGORY_MUTED,
    SKIP_GROUP_MUTED,
    SKIP_IN_APP_DISABLED,
    SKIP_SELF,
    NotificationResult,
    notify,
)
from .senders import SenderDirectory, get_sender_directory
from .serialization import serialize_notification
from .templates import NOTIFICATION_TEMPLATES, render_notification_text

__all__ = [
    "MAX_PAGE_SIZE",
    "NOTIFICATION_TEMPLATES",
    "NotificationResult",
    "SKIP_CATEGORY_MUTED",
    "SKIP_GROUP_MUTED",
    "SKIP_IN_APP_DISABLED",
    "SKIP_SELF",
    "SenderDirectory",
    "get_sender_directory",
    "get_unread_count",
    "list_notifications",
    "list_push_devices",
    "mark_read",
    "notify",
    "register_push_device",
    "render_notification_text",
    "serialize_notification",
    "unregister_push_device",
]
