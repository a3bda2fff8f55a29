"""Repository implementations for infrastructure layer."""

from .delivery_log_repository import DeliveryLogRepository
from .notification_repository import NotificationRepository
from .preferences_repository import (
    CategoryPreferenceRepository,
    GroupPreferenceRepository,
    NotificationPreferencesRepository,
)
from .push_device_repository import PushDeviceRepository
from .token_limit_repository import TokenLimitRepository
from .user_repository import UserRepository

__all__ = [
    "CategoryPreferenceRepository",
    "DeliveryLogRepository",
    "GroupPreferenceRepository",
    "NotificationPreferencesRepository",
    "NotificationRepository",
    "PushDeviceRepository",
    "TokenLimitRepository",
    "UserRepository",
]
