"""Notification center used by connected client sessions."""

from .backend import HttpNotificationBackend, NotificationBackend
from .notification_center import (
    CenterFilter,
    CenterState,
    DateBucket,
    NotificationCenter,
    date_bucket,
    item_category,
)

__all__ = [
    "CenterFilter",
    "CenterState",
    "DateBucket",
    "HttpNotificationBackend",
    "NotificationBackend",
    "NotificationCenter",
    "date_bucket",
    "item_category",
]
