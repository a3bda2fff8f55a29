"""Domain entities describing how a user wants to be notified."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .notification import NotificationCategory, NotificationType


@dataclass
class NotificationPreferences:
    """Per-user channel toggles and quiet hours window.

    ``quiet_hours_start`` and ``quiet_hours_end`` are only enforced while
    ``quiet_hours_enabled`` is set.
    """

    id: int | None
    user_id: int
    in_app_enabled: bool = True
    email_enabled: bool = False
    push_enabled: bool = True
    quiet_hours_enabled: bool = False
    quiet_hours_start: str | None = None
    quiet_hours_end: str | None = None
    timezone: str | None = None
    updated_at: datetime | None = None


@dataclass
class CategoryPreference:
    """Opt-out switches for one notification category."""

    id: int | None
    user_id: int
    category: NotificationCategory
    in_app_enabled: bool = True
    email_enabled: bool = True
    push_enabled: bool = True
    mute_all: bool = False

    def allows_in_app(self) -> bool:
        return self.in_app_enabled and not self.mute_all

    def allows_email(self) -> bool:
        return self.email_enabled and not self.mute_all

    def allows_push(self) -> bool:
        return self.push_enabled and not self.mute_all


_GROUP_TYPE_SWITCHES = {
    NotificationType.GROUP_POST: "posts_enabled",
    NotificationType.GROUP_COMMENT: "comments_enabled",
    NotificationType.GROUP_EVENT: "events_enabled",
    NotificationType.GROUP_POLL: "polls_enabled",
    NotificationType.GROUP_MENTION: "mentions_enabled",
}


@dataclass
class GroupPreference:
    """What a user still wants to hear from one group.

    ``announcements_only`` lets nothing but ``GROUP_ANNOUNCEMENT`` through.
    """

    id: int | None
    user_id: int
    group_id: int
    mute_all: bool = False
    posts_enabled: bool = True
    comments_enabled: bool = True
    events_enabled: bool = True
    polls_enabled: bool = True
    mentions_enabled: bool = True
    announcements_only: bool = False

    def allows(self, notification_type: NotificationType) -> bool:
        if self.mute_all:
            return False
        switch = _GROUP_TYPE_SWITCHES.get(notification_type)
        if switch is not None and not getattr(self, switch):
            return False
        if self.announcements_only:
            return notification_type is NotificationType.GROUP_ANNOUNCEMENT
        return True


__all__ = ["CategoryPreference", "GroupPreference", "NotificationPreferences"]
