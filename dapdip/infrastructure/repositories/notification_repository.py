"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from dapdip.domain.entities import (
    Notification,
    NotificationPriority,
    NotificationType,
)
from dapdip.infrastructure.models import NotificationModel
from dapdip.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide persistence operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def get_for_recipient(
        self, notification_id: int, *, recipient_id: int
    ) -> Notification | None:
        model = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(NotificationModel.recipient_id == recipient_id)
            .first()
        )
        return self._to_entity(model) if model else None

    def list_for_recipient(
        self,
        recipient_id: int,
        *,
        limit: int | None = 20,
        before_id: int | None = None,
        unread_only: bool = False,
    ) -> Sequence[Notification]:
        """Return notifications newest first, optionally older than ``before_id``."""

        query = self.session.query(NotificationModel).filter(
            NotificationModel.recipient_id == recipient_id
        )
        if before_id is not None:
            query = query.filter(NotificationModel.id < before_id)
        if unread_only:
            query = query.filter(NotificationModel.is_read.is_(False))
        query = query.order_by(NotificationModel.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_unread(self, recipient_id: int) -> int:
        count = (
            self.session.query(func.count(NotificationModel.id))
            .filter(NotificationModel.recipient_id == recipient_id)
            .filter(NotificationModel.is_read.is_(False))
            .scalar()
        )
        return int(count or 0)

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_read(self, notification_id: int, *, recipient_id: int) -> int:
        """Flip a single notification owned by ``recipient_id`` to read."""

        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id == notification_id,
                NotificationModel.recipient_id == recipient_id,
                NotificationModel.is_read.is_(False),
            )
            .update({NotificationModel.is_read: True}, synchronize_session=False)
        )
        self.session.commit()
        return int(updated or 0)

    def mark_all_read(self, recipient_id: int) -> int:
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.recipient_id == recipient_id,
                NotificationModel.is_read.is_(False),
            )
            .update({NotificationModel.is_read: True}, synchronize_session=False)
        )
        self.session.commit()
        return int(updated or 0)

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel, notification: Notification
    ) -> None:
        model.created_at = ensure_app_naive_datetime(
            notification.created_at or now_in_app_timezone()
        )
        model.recipient_id = notification.recipient_id
        model.sender_id = notification.sender_id
        model.type = notification.type.value
        model.content = notification.content
        model.is_read = notification.is_read
        model.priority = notification.priority.value
        model.is_actionable = notification.is_actionable
        model.action_label = notification.action_label
        model.action_url = notification.action_url
        model.image_url = notification.image_url
        model.url = notification.url
        model.group_id = notification.group_id
        model.page_id = notification.page_id
        model.extra_data = dict(notification.metadata or {})

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            type=NotificationType(model.type),
            content=model.content,
            is_read=bool(model.is_read),
            created_at=ensure_app_timezone(model.created_at),
            priority=NotificationPriority(model.priority or "NORMAL"),
            is_actionable=bool(model.is_actionable),
            action_label=model.action_label,
            action_url=model.action_url,
            image_url=model.image_url,
            sender_id=model.sender_id,
            url=model.url,
            group_id=model.group_id,
            page_id=model.page_id,
            metadata=dict(model.extra_data or {}),
        )


__all__ = ["NotificationRepository"]
