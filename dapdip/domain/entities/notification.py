"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationCategory(str, Enum):
    """Closed set of categories used for filtering and opt-outs."""

    SOCIAL = "SOCIAL"
    GROUP = "GROUP"
    PAGE = "PAGE"
    SYSTEM = "SYSTEM"
    SECURITY = "SECURITY"


class NotificationPriority(str, Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    URGENT = "URGENT"


class NotificationType(str, Enum):
    """Every kind of notification the writer accepts."""

    FOLLOW = "FOLLOW"
    LIKE = "LIKE"
    COMMENT = "COMMENT"
    MENTION = "MENTION"
    FRIEND_REQUEST = "FRIEND_REQUEST"
    MESSAGE = "MESSAGE"
    POST_TRENDING = "POST_TRENDING"

    GROUP_INVITE = "GROUP_INVITE"
    GROUP_JOIN_REQUEST = "GROUP_JOIN_REQUEST"
    GROUP_JOIN_APPROVED = "GROUP_JOIN_APPROVED"
    GROUP_JOIN_REJECTED = "GROUP_JOIN_REJECTED"
    GROUP_ROLE_CHANGE = "GROUP_ROLE_CHANGE"
    GROUP_POST = "GROUP_POST"
    GROUP_COMMENT = "GROUP_COMMENT"
    GROUP_REACTION = "GROUP_REACTION"
    GROUP_EVENT = "GROUP_EVENT"
    GROUP_POLL = "GROUP_POLL"
    GROUP_ANNOUNCEMENT = "GROUP_ANNOUNCEMENT"
    GROUP_MENTION = "GROUP_MENTION"

    PAGE_INVITE = "PAGE_INVITE"
    PAGE_POST = "PAGE_POST"
    PAGE_EVENT = "PAGE_EVENT"

    SYSTEM = "SYSTEM"
    CONTENT_REMOVED = "CONTENT_REMOVED"
    AI_RECOMMENDATION = "AI_RECOMMENDATION"
    HEALTH_REMINDER = "HEALTH_REMINDER"
    HEALTH_GOAL_ACHIEVED = "HEALTH_GOAL_ACHIEVED"
    ACCOUNT_UPDATE = "ACCOUNT_UPDATE"
    TOKEN_BONUS = "TOKEN_BONUS"

    SECURITY_ALERT = "SECURITY_ALERT"


_SOCIAL_TYPES = frozenset(
    {
        NotificationType.FOLLOW,
        NotificationType.LIKE,
        NotificationType.COMMENT,
        NotificationType.MENTION,
        NotificationType.FRIEND_REQUEST,
        NotificationType.MESSAGE,
        NotificationType.POST_TRENDING,
    }
)


def category_for(notification_type: NotificationType) -> NotificationCategory:
    """Return the category a notification type belongs to."""

    if notification_type in _SOCIAL_TYPES:
        return NotificationCategory.SOCIAL
    if notification_type.value.startswith("GROUP_"):
        return NotificationCategory.GROUP
    if notification_type.value.startswith("PAGE_"):
        return NotificationCategory.PAGE
    if notification_type is NotificationType.SECURITY_ALERT:
        return NotificationCategory.SECURITY
    return NotificationCategory.SYSTEM


@dataclass
class SenderSummary:
    """Public details about the user that triggered a notification."""

    id: int
    name: str | None
    image_url: str | None = None


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: int | None
    recipient_id: int
    type: NotificationType
    content: str | None = None
    is_read: bool = False
    created_at: datetime | None = None
    priority: NotificationPriority = NotificationPriority.NORMAL
    is_actionable: bool = False
    action_label: str | None = None
    action_url: str | None = None
    image_url: str | None = None
    sender_id: int | None = None
    url: str | None = None
    group_id: int | None = None
    page_id: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    sender: SenderSummary | None = None

    @property
    def category(self) -> NotificationCategory:
        return category_for(self.type)


__all__ = [
    "Notification",
    "NotificationCategory",
    "NotificationPriority",
    "NotificationType",
    "SenderSummary",
    "category_for",
]
