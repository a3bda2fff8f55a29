"""Tests for the notification writer and its channel fan-out."""

from __future__ import annotations

import importlib
from datetime import datetime, timezone

import pytest

from dapdip.application.use_cases.notifications import (
    SKIP_CATEGORY_MUTED,
    SKIP_GROUP_MUTED,
    SKIP_IN_APP_DISABLED,
    SKIP_SELF,
    notify,
    register_push_device,
)
from dapdip.application.use_cases.preferences import (
    update_category_preference,
    update_group_preference,
    update_preferences,
)
from dapdip.domain.entities import (
    DevicePlatform,
    NewNotification,
    NotificationCategory,
    NotificationPriority,
    NotificationType,
)
from dapdip.infrastructure.push import PushDeliveryResult
from dapdip.infrastructure.repositories import (
    DeliveryLogRepository,
    NotificationRepository,
    PushDeviceRepository,
)

notify_module = importlib.import_module("dapdip.application.use_cases.notifications.notify")

NIGHT = datetime(2026, 3, 10, 23, 15, tzinfo=timezone.utc)
NOON = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def outbox(monkeypatch: pytest.MonkeyPatch):
    """Capture email and push sends made by the writer."""

    sent = {"email": [], "push": []}

    def fake_email(recipient, *, recipient_name, subject, text, link=None):
        sent["email"].append({"to": recipient, "subject": subject, "text": text, "link": link})
        return True

    def fake_push(tokens, *, title, body, data=None, transport=None):
        sent["push"].append({"tokens": list(tokens), "body": body, "data": data})
        return PushDeliveryResult(delivered=len(tokens))

    monkeypatch.setattr(notify_module, "send_notification_email", fake_email)
    monkeypatch.setattr(notify_module, "send_push", fake_push)
    return sent


def test_notification_is_stored_logged_and_published(session, make_user, publisher, outbox) -> None:
    alice = make_user("Alice")
    bob = make_user("Bob")

    result = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.FOLLOW,
        sender_id=alice.id,
        url=f"/profile/{alice.id}",
        publisher=publisher,
        now=NOON,
    )

    assert result.created is True
    stored = NotificationRepository(session).get(result.notification.id)
    assert stored.recipient_id == bob.id
    assert stored.is_read is False
    assert stored.priority is NotificationPriority.NORMAL
    assert stored.category is NotificationCategory.SOCIAL

    (event,) = publisher.for_user(bob.id)
    assert isinstance(event, NewNotification)
    assert event.silent is False
    assert event.notification["text"] == "Alice started following you"
    assert event.notification["sender"]["name"] == "Alice"

    logs = DeliveryLogRepository(session).list_for_notification(stored.id)
    assert [(log.channel.value, log.event) for log in logs] == [("IN_APP", "delivered")]
    assert outbox == {"email": [], "push": []}


def test_self_notifications_are_skipped(session, make_user, publisher, outbox) -> None:
    alice = make_user()

    result = notify(
        session,
        recipient_id=alice.id,
        notification_type=NotificationType.LIKE,
        sender_id=alice.id,
        publisher=publisher,
    )

    assert result.created is False
    assert result.skipped_reason == SKIP_SELF
    assert NotificationRepository(session).count_unread(alice.id) == 0
    assert publisher.events == []


def test_disabled_in_app_skips_persistence(session, make_user, publisher, outbox) -> None:
    bob = make_user()
    update_preferences(session, bob.id, in_app_enabled=False)

    result = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.SYSTEM,
        content="Maintenance tonight",
        publisher=publisher,
    )

    assert result.skipped_reason == SKIP_IN_APP_DISABLED
    assert publisher.events == []


def test_muted_category_is_skipped(session, make_user, publisher, outbox) -> None:
    bob = make_user()
    update_category_preference(session, bob.id, NotificationCategory.GROUP, mute_all=True)

    result = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.GROUP_INVITE,
        publisher=publisher,
    )

    assert result.skipped_reason == SKIP_CATEGORY_MUTED
    assert NotificationRepository(session).count_unread(bob.id) == 0


def test_group_preferences_filter_by_group_and_type(session, make_user, publisher, outbox) -> None:
    bob = make_user()
    update_group_preference(session, bob.id, 42, posts_enabled=False)

    muted = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.GROUP_POST,
        group_id=42,
        publisher=publisher,
    )
    comment = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.GROUP_COMMENT,
        group_id=42,
        publisher=publisher,
    )
    other_group = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.GROUP_POST,
        group_id=7,
        publisher=publisher,
    )

    assert muted.skipped_reason == SKIP_GROUP_MUTED
    assert comment.created is True
    assert other_group.created is True
    assert NotificationRepository(session).count_unread(bob.id) == 2


def test_announcements_only_group(session, make_user, publisher, outbox) -> None:
    bob = make_user()
    update_group_preference(session, bob.id, 42, announcements_only=True)

    event = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.GROUP_EVENT,
        group_id=42,
        publisher=publisher,
    )
    announcement = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.GROUP_ANNOUNCEMENT,
        group_id=42,
        publisher=publisher,
    )

    assert event.skipped_reason == SKIP_GROUP_MUTED
    assert announcement.created is True
    assert len(publisher.for_user(bob.id)) == 1


def test_muted_group_can_be_overridden(session, make_user, publisher, outbox) -> None:
    bob = make_user()
    update_group_preference(session, bob.id, 42, mute_all=True)

    result = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.GROUP_ANNOUNCEMENT,
        group_id=42,
        override_preferences=True,
        publisher=publisher,
    )

    assert result.created is True


def test_security_alerts_ignore_opt_outs(session, make_user, publisher, outbox) -> None:
    bob = make_user()
    update_preferences(session, bob.id, in_app_enabled=False)
    update_category_preference(session, bob.id, NotificationCategory.SECURITY, mute_all=True)

    result = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.SECURITY_ALERT,
        content="New sign-in from Lisbon",
        priority=NotificationPriority.URGENT,
        publisher=publisher,
    )

    assert result.created is True
    assert NotificationRepository(session).count_unread(bob.id) == 1


def test_override_preferences_forces_delivery(session, make_user, publisher, outbox) -> None:
    bob = make_user()
    update_preferences(session, bob.id, in_app_enabled=False)

    result = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.SYSTEM,
        content="Terms updated",
        override_preferences=True,
        publisher=publisher,
    )

    assert result.created is True


def test_join_requests_are_actionable(session, make_user, publisher, outbox) -> None:
    owner = make_user("Owner")
    applicant = make_user("Applicant")

    result = notify(
        session,
        recipient_id=owner.id,
        notification_type=NotificationType.GROUP_JOIN_REQUEST,
        sender_id=applicant.id,
        action_url="/groups/7/requests",
        group_id=7,
        publisher=publisher,
    )

    notification = result.notification
    assert notification.is_actionable is True
    assert notification.action_label == "Review request"
    assert notification.action_url == "/groups/7/requests"
    assert notification.group_id == 7
    assert notification.category is NotificationCategory.GROUP


def test_non_actionable_notifications_drop_action_fields(session, make_user, publisher, outbox) -> None:
    bob = make_user()

    result = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.SYSTEM,
        action_label="Open",
        action_url="/somewhere",
        publisher=publisher,
    )

    assert result.notification.action_label is None
    assert result.notification.action_url is None


def test_email_is_sent_when_enabled(session, make_user, publisher, outbox) -> None:
    alice = make_user("Alice")
    bob = make_user("Bob", email="bob@example.com")
    update_preferences(session, bob.id, email_enabled=True)

    result = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.COMMENT,
        sender_id=alice.id,
        url="/posts/3",
        publisher=publisher,
        now=NOON,
    )

    assert result.channels["EMAIL"] == "delivered"
    (email,) = outbox["email"]
    assert email["to"] == "bob@example.com"
    assert email["text"] == "Alice commented on your post"
    assert email["link"] == "/posts/3"


def test_failed_email_is_logged(session, make_user, publisher, monkeypatch) -> None:
    bob = make_user()
    update_preferences(session, bob.id, email_enabled=True)
    monkeypatch.setattr(notify_module, "send_notification_email", lambda *args, **kwargs: False)

    result = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.SYSTEM,
        content="Hello",
        publisher=publisher,
        now=NOON,
    )

    assert result.created is True
    assert result.channels["EMAIL"] == "failed"


def test_category_opt_out_blocks_email_only(session, make_user, publisher, outbox) -> None:
    bob = make_user()
    update_preferences(session, bob.id, email_enabled=True)
    update_category_preference(session, bob.id, NotificationCategory.SYSTEM, email_enabled=False)

    result = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.SYSTEM,
        content="Hello",
        publisher=publisher,
    )

    assert result.created is True
    assert "EMAIL" not in result.channels
    assert outbox["email"] == []


def test_push_prunes_invalid_tokens(session, make_user, publisher, monkeypatch) -> None:
    bob = make_user()
    register_push_device(session, bob.id, token="token-valid-1", platform=DevicePlatform.WEB)
    register_push_device(session, bob.id, token="token-stale-2", platform=DevicePlatform.ANDROID)
    monkeypatch.setattr(
        notify_module,
        "send_push",
        lambda tokens, **kwargs: PushDeliveryResult(delivered=1, invalid_tokens=["token-stale-2"]),
    )

    result = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.SYSTEM,
        content="Hello",
        publisher=publisher,
        now=NOON,
    )

    assert result.channels["PUSH"] == "delivered"
    remaining = PushDeviceRepository(session).list_for_user(bob.id)
    assert [device.token for device in remaining] == ["token-valid-1"]
    logs = DeliveryLogRepository(session).list_for_notification(result.notification.id)
    assert any(log.detail == "1/2 devices" for log in logs)


def test_quiet_hours_suppress_email_and_push_only(session, make_user, publisher, outbox) -> None:
    bob = make_user()
    update_preferences(session, bob.id, email_enabled=True, quiet_hours_enabled=True)
    register_push_device(session, bob.id, token="token-quiet-1", platform=DevicePlatform.IOS)

    result = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.LIKE,
        publisher=publisher,
        now=NIGHT,
    )

    assert result.created is True
    assert result.silent is True
    assert result.channels == {"IN_APP": "delivered", "EMAIL": "suppressed", "PUSH": "suppressed"}
    assert outbox == {"email": [], "push": []}
    (event,) = publisher.for_user(bob.id)
    assert event.silent is True


def test_urgent_notifications_bypass_quiet_hours(session, make_user, publisher, outbox) -> None:
    bob = make_user()
    update_preferences(session, bob.id, email_enabled=True, quiet_hours_enabled=True)

    result = notify(
        session,
        recipient_id=bob.id,
        notification_type=NotificationType.SYSTEM,
        content="Payment failed",
        priority=NotificationPriority.HIGH,
        publisher=publisher,
        now=NIGHT,
    )

    assert result.silent is False
    assert result.channels["EMAIL"] == "delivered"
    assert len(outbox["email"]) == 1
