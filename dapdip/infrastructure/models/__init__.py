"""ORM models used by the application infrastructure."""

from .delivery_log import DeliveryLogModel
from .notification import NotificationModel
from .preferences import (
    CategoryPreferenceModel,
    GroupPreferenceModel,
    NotificationPreferencesModel,
)
from .push_device import PushDeviceModel
from .token_limit import TokenLimitModel, TokenUsageRecordModel
from .user import UserModel

__all__ = [
    "CategoryPreferenceModel",
    "DeliveryLogModel",
    "GroupPreferenceModel",
    "NotificationModel",
    "NotificationPreferencesModel",
    "PushDeviceModel",
    "TokenLimitModel",
    "TokenUsageRecordModel",
    "UserModel",
]
