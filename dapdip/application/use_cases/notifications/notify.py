"""Create notifications and fan them out to the recipient's channels."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from dapdip.application.use_cases.preferences import (
    get_category_preference,
    get_group_preference,
    get_preferences,
    is_within_quiet_hours,
)
from dapdip.domain.entities import (
    DELIVERY_EVENT_DELIVERED,
    DELIVERY_EVENT_FAILED,
    DELIVERY_EVENT_SUPPRESSED,
    CategoryPreference,
    DeliveryChannel,
    DeliveryLogEntry,
    NewNotification,
    Notification,
    NotificationCategory,
    NotificationPreferences,
    NotificationPriority,
    NotificationType,
    category_for,
)
from dapdip.infrastructure.email import send_notification_email
from dapdip.infrastructure.notifications import RelayPublisher, relay_publisher
from dapdip.infrastructure.push import send_push
from dapdip.infrastructure.repositories import (
    DeliveryLogRepository,
    NotificationRepository,
    PushDeviceRepository,
    UserRepository,
)
from dapdip.utils import now_in_app_timezone

from .senders import SenderDirectory, get_sender_directory
from .serialization import serialize_notification
from .templates import render_notification_text

logger = logging.getLogger(__name__)

SKIP_SELF = "self_notification"
SKIP_IN_APP_DISABLED = "in_app_disabled"
SKIP_CATEGORY_MUTED = "category_muted"
SKIP_GROUP_MUTED = "group_muted"

_JOIN_REQUEST_ACTION_LABEL = "Review request"
_URGENT_PRIORITIES = frozenset({NotificationPriority.HIGH, NotificationPriority.URGENT})


@dataclass
class NotificationResult:
    """Outcome of :func:`notify`."""

    notification: Notification | None
    skipped_reason: str | None = None
    silent: bool = False
    channels: dict[str, str] = field(default_factory=dict)

    @property
    def created(self) -> bool:
        return self.notification is not None


def notify(
    session: Session,
    *,
    recipient_id: int,
    notification_type: NotificationType,
    sender_id: int | None = None,
    content: str | None = None,
    priority: NotificationPriority = NotificationPriority.NORMAL,
    is_actionable: bool = False,
    action_label: str | None = None,
    action_url: str | None = None,
    url: str | None = None,
    image_url: str | None = None,
    group_id: int | None = None,
    page_id: int | None = None,
    metadata: dict[str, Any] | None = None,
    override_preferences: bool = False,
    publisher: RelayPublisher | None = None,
    senders: SenderDirectory | None = None,
    now: datetime | None = None,
) -> NotificationResult:
    """Persist a notification for ``recipient_id`` and deliver it.

    The row is written before anything is published. Relay, email and push
    failures are logged and never undo the stored notification.
    """

    if sender_id is not None and sender_id == recipient_id:
        logger.debug("Skipping self notification %s for user %s", notification_type, recipient_id)
        return NotificationResult(notification=None, skipped_reason=SKIP_SELF)

    category = category_for(notification_type)
    preferences = get_preferences(session, recipient_id)
    category_preference = get_category_preference(session, recipient_id, category)

    skipped_reason = None
    if not override_preferences and category is not NotificationCategory.SECURITY:
        if not preferences.in_app_enabled:
            skipped_reason = SKIP_IN_APP_DISABLED
        elif not category_preference.allows_in_app():
            skipped_reason = SKIP_CATEGORY_MUTED
        elif group_id is not None and not get_group_preference(
            session, recipient_id, group_id
        ).allows(notification_type):
            skipped_reason = SKIP_GROUP_MUTED
    if skipped_reason:
        logger.info(
            "Notification %s for user %s not stored: %s",
            notification_type.value,
            recipient_id,
            skipped_reason,
        )
        return NotificationResult(notification=None, skipped_reason=skipped_reason)

    if notification_type is NotificationType.GROUP_JOIN_REQUEST:
        is_actionable = True
        action_label = action_label or _JOIN_REQUEST_ACTION_LABEL

    current_time = now or now_in_app_timezone()
    notification = NotificationRepository(session).create(
        Notification(
            id=None,
            recipient_id=recipient_id,
            type=notification_type,
            content=content,
            is_read=False,
            created_at=current_time,
            priority=priority,
            is_actionable=is_actionable,
            action_label=action_label if is_actionable else None,
            action_url=action_url if is_actionable else None,
            image_url=image_url,
            sender_id=sender_id,
            url=url,
            group_id=group_id,
            page_id=page_id,
            metadata=dict(metadata or {}),
        )
    )
    (senders or get_sender_directory()).attach(session, [notification])

    quiet = is_within_quiet_hours(preferences, current_time)
    bypass_quiet_hours = (
        priority in _URGENT_PRIORITIES
        or notification_type is NotificationType.SECURITY_ALERT
    )
    silent = quiet and not bypass_quiet_hours

    result = NotificationResult(notification=notification, silent=silent)
    log_repository = DeliveryLogRepository(session)
    _log_delivery(
        log_repository,
        notification,
        DeliveryChannel.IN_APP,
        DELIVERY_EVENT_DELIVERED,
        success=True,
        result=result,
    )

    (publisher or relay_publisher).dispatch(
        recipient_id,
        NewNotification(notification=serialize_notification(notification), silent=silent),
    )

    _dispatch_email(
        session,
        notification,
        preferences=preferences,
        category_preference=category_preference,
        override_preferences=override_preferences,
        suppressed=silent,
        log_repository=log_repository,
        result=result,
    )
    _dispatch_push(
        session,
        notification,
        preferences=preferences,
        category_preference=category_preference,
        override_preferences=override_preferences,
        suppressed=silent,
        log_repository=log_repository,
        result=result,
    )
    return result


def _dispatch_email(
    session: Session,
    notification: Notification,
    *,
    preferences: NotificationPreferences,
    category_preference: CategoryPreference,
    override_preferences: bool,
    suppressed: bool,
    log_repository: DeliveryLogRepository,
    result: NotificationResult,
) -> None:
    if not preferences.email_enabled:
        return
    if not (override_preferences or category_preference.allows_email()):
        return
    if suppressed:
        _log_delivery(
            log_repository,
            notification,
            DeliveryChannel.EMAIL,
            DELIVERY_EVENT_SUPPRESSED,
            success=True,
            detail="quiet_hours",
            result=result,
        )
        return

    recipient = UserRepository(session).get(notification.recipient_id)
    if recipient is None or not recipient.email:
        _log_delivery(
            log_repository,
            notification,
            DeliveryChannel.EMAIL,
            DELIVERY_EVENT_FAILED,
            success=False,
            detail="missing_email",
            result=result,
        )
        return

    text = _render(notification)
    sent = send_notification_email(
        recipient.email,
        recipient_name=recipient.name,
        subject=_email_subject(notification),
        text=text,
        link=notification.action_url or notification.url,
    )
    _log_delivery(
        log_repository,
        notification,
        DeliveryChannel.EMAIL,
        DELIVERY_EVENT_DELIVERED if sent else DELIVERY_EVENT_FAILED,
        success=sent,
        result=result,
    )


def _dispatch_push(
    session: Session,
    notification: Notification,
    *,
    preferences: NotificationPreferences,
    category_preference: CategoryPreference,
    override_preferences: bool,
    suppressed: bool,
    log_repository: DeliveryLogRepository,
    result: NotificationResult,
) -> None:
    if not preferences.push_enabled:
        return
    if not (override_preferences or category_preference.allows_push()):
        return

    device_repository = PushDeviceRepository(session)
    devices = device_repository.list_for_user(notification.recipient_id)
    if not devices:
        return
    if suppressed:
        _log_delivery(
            log_repository,
            notification,
            DeliveryChannel.PUSH,
            DELIVERY_EVENT_SUPPRESSED,
            success=True,
            detail="quiet_hours",
            result=result,
        )
        return

    delivery = send_push(
        [device.token for device in devices],
        title="DapDip",
        body=_render(notification),
        data={
            "notification_id": notification.id,
            "type": notification.type.value,
            "url": notification.action_url or notification.url,
        },
    )
    if delivery is None:
        _log_delivery(
            log_repository,
            notification,
            DeliveryChannel.PUSH,
            DELIVERY_EVENT_FAILED,
            success=False,
            result=result,
        )
        return

    for token in delivery.invalid_tokens:
        device_repository.delete_by_token(token)
    if delivery.invalid_tokens:
        logger.info(
            "Removed %s stale push tokens for user %s",
            len(delivery.invalid_tokens),
            notification.recipient_id,
        )
    _log_delivery(
        log_repository,
        notification,
        DeliveryChannel.PUSH,
        DELIVERY_EVENT_DELIVERED,
        success=delivery.delivered > 0,
        detail=f"{delivery.delivered}/{len(devices)} devices",
        result=result,
    )


def _log_delivery(
    repository: DeliveryLogRepository,
    notification: Notification,
    channel: DeliveryChannel,
    event: str,
    *,
    success: bool,
    result: NotificationResult,
    detail: str | None = None,
) -> None:
    result.channels[channel.value] = event
    logger.info(
        "Notification %s for user %s: %s %s",
        notification.id,
        notification.recipient_id,
        channel.value,
        event,
    )
    repository.create(
        DeliveryLogEntry(
            id=None,
            notification_id=notification.id,
            user_id=notification.recipient_id,
            channel=channel,
            event=event,
            success=success,
            detail=detail,
        )
    )


def _render(notification: Notification) -> str:
    sender_name = notification.sender.name if notification.sender else None
    return render_notification_text(notification.type, notification.content, sender_name)


def _email_subject(notification: Notification) -> str:
    if notification.type is NotificationType.SECURITY_ALERT:
        return "Security alert on your DapDip account"
    return "You have a new notification on DapDip"


__all__ = [
    "NotificationResult",
    "SKIP_CATEGORY_MUTED",
    "SKIP_GROUP_MUTED",
    "SKIP_IN_APP_DISABLED",
    "SKIP_SELF",
    "notify",
]
