"""Display text of every notification type.

The table is checked when the module is imported: adding a member to
:class:`NotificationType` without a template makes the import fail.
"""

from __future__ import annotations

from typing import Callable

from dapdip.domain.entities import NotificationType

DEFAULT_TEXT = "New notification"
UNKNOWN_SENDER = "Someone"

Template = Callable[[str, str | None], str]


def _actor(action: str) -> Template:
    """Sentence led by the sender's name; explicit content is ignored."""

    def render(sender: str, content: str | None) -> str:
        return f"{sender} {action}"

    return render


def _content_or(fallback: str) -> Template:
    """Explicit content when present, ``fallback`` otherwise."""

    def render(sender: str, content: str | None) -> str:
        return content or fallback

    return render


def _content_or_actor(action: str) -> Template:
    def render(sender: str, content: str | None) -> str:
        return content or f"{sender} {action}"

    return render


NOTIFICATION_TEMPLATES: dict[NotificationType, Template] = {
    NotificationType.FOLLOW: _actor("started following you"),
    NotificationType.LIKE: _actor("liked your post"),
    NotificationType.COMMENT: _actor("commented on your post"),
    NotificationType.MENTION: _actor("mentioned you in a post"),
    NotificationType.FRIEND_REQUEST: _actor("sent you a friend request"),
    NotificationType.MESSAGE: _actor("sent you a message"),
    NotificationType.POST_TRENDING: _content_or("Your post is trending"),
    NotificationType.GROUP_INVITE: _actor("invited you to join a group"),
    NotificationType.GROUP_JOIN_REQUEST: _actor("requested to join your group"),
    NotificationType.GROUP_JOIN_APPROVED: _content_or(
        "Your request to join the group was approved"
    ),
    NotificationType.GROUP_JOIN_REJECTED: _content_or(
        "Your request to join the group was declined"
    ),
    NotificationType.GROUP_ROLE_CHANGE: _content_or("Your role in a group was updated"),
    NotificationType.GROUP_POST: _actor("posted in your group"),
    NotificationType.GROUP_COMMENT: _actor("commented on a group post"),
    NotificationType.GROUP_REACTION: _actor("reacted to your group post"),
    NotificationType.GROUP_EVENT: _content_or_actor("created a group event"),
    NotificationType.GROUP_POLL: _actor("started a poll in your group"),
    NotificationType.GROUP_ANNOUNCEMENT: _content_or("New group announcement"),
    NotificationType.GROUP_MENTION: _actor("mentioned you in a group"),
    NotificationType.PAGE_INVITE: _actor("invited you to like a page"),
    NotificationType.PAGE_POST: _content_or_actor("published a new post"),
    NotificationType.PAGE_EVENT: _content_or("A page you follow created an event"),
    NotificationType.SYSTEM: _content_or("System notification"),
    NotificationType.CONTENT_REMOVED: _content_or("Some of your content was removed"),
    NotificationType.AI_RECOMMENDATION: _content_or("You have a new recommendation"),
    NotificationType.HEALTH_REMINDER: _content_or("Health reminder"),
    NotificationType.HEALTH_GOAL_ACHIEVED: _content_or("You reached a health goal"),
    NotificationType.ACCOUNT_UPDATE: _content_or("Your account was updated"),
    NotificationType.TOKEN_BONUS: _content_or("You received bonus tokens"),
    NotificationType.SECURITY_ALERT: _content_or("Security alert on your account"),
}

_missing = [member.value for member in NotificationType if member not in NOTIFICATION_TEMPLATES]
if _missing:  # pragma: no cover - guarded by tests
    raise RuntimeError(f"Notification types without a template: {', '.join(_missing)}")


def render_notification_text(
    notification_type: NotificationType | str,
    content: str | None = None,
    sender_name: str | None = None,
) -> str:
    """Return the text shown to the recipient of a notification."""

    try:
        resolved = NotificationType(notification_type)
    except ValueError:
        return content or DEFAULT_TEXT
    sender = (sender_name or "").strip() or UNKNOWN_SENDER
    return NOTIFICATION_TEMPLATES[resolved](sender, content)


__all__ = [
    "DEFAULT_TEXT",
    "NOTIFICATION_TEMPLATES",
    "UNKNOWN_SENDER",
    "render_notification_text",
]
