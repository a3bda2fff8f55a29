"""Realtime notification helpers for the infrastructure layer."""

from .publisher import RelayPublisher, relay_publisher
from .relay import NotificationRelay, RelaySubscription, notification_relay

__all__ = [
    "NotificationRelay",
    "RelayPublisher",
    "RelaySubscription",
    "notification_relay",
    "relay_publisher",
]
