"""Domain entities exposed by the application."""

from .delivery_log import (
    DELIVERY_EVENT_DELIVERED,
    DELIVERY_EVENT_FAILED,
    DELIVERY_EVENT_SUPPRESSED,
    DeliveryChannel,
    DeliveryLogEntry,
)
from .notification import (
    Notification,
    NotificationCategory,
    NotificationPriority,
    NotificationType,
    SenderSummary,
    category_for,
)
from .preferences import CategoryPreference, GroupPreference, NotificationPreferences
from .push_device import DevicePlatform, PushDevice
from .relay_event import (
    MarkedAll,
    MarkedOne,
    NewNotification,
    RelayEvent,
    parse_relay_event,
)
from .token_limit import (
    DAILY_LIMITS,
    MONTHLY_ALLOCATIONS,
    SubscriptionPeriod,
    TokenAvailability,
    TokenLimit,
    TokenTier,
    TokenUsageRecord,
)
from .user import User

__all__ = [
    "CategoryPreference",
    "DAILY_LIMITS",
    "DELIVERY_EVENT_DELIVERED",
    "DELIVERY_EVENT_FAILED",
    "DELIVERY_EVENT_SUPPRESSED",
    "DeliveryChannel",
    "DeliveryLogEntry",
    "DevicePlatform",
    "GroupPreference",
    "MONTHLY_ALLOCATIONS",
    "MarkedAll",
    "MarkedOne",
    "NewNotification",
    "Notification",
    "NotificationCategory",
    "NotificationPreferences",
    "NotificationPriority",
    "NotificationType",
    "PushDevice",
    "RelayEvent",
    "SenderSummary",
    "SubscriptionPeriod",
    "TokenAvailability",
    "TokenLimit",
    "TokenTier",
    "TokenUsageRecord",
    "User",
    "category_for",
    "parse_relay_event",
]
