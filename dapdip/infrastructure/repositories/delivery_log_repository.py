"""Persistence helpers for the notification delivery log."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from dapdip.domain.entities import DeliveryChannel, DeliveryLogEntry
from dapdip.infrastructure.models import DeliveryLogModel
from dapdip.utils import ensure_app_timezone


class DeliveryLogRepository:
    """Append and query delivery traces."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, entry: DeliveryLogEntry) -> DeliveryLogEntry:
        model = DeliveryLogModel(
            notification_id=entry.notification_id,
            user_id=entry.user_id,
            channel=entry.channel.value,
            event=entry.event,
            success=entry.success,
            detail=entry.detail,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_for_notification(self, notification_id: int) -> Sequence[DeliveryLogEntry]:
        query = (
            self.session.query(DeliveryLogModel)
            .filter(DeliveryLogModel.notification_id == notification_id)
            .order_by(DeliveryLogModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: DeliveryLogModel) -> DeliveryLogEntry:
        return DeliveryLogEntry(
            id=model.id,
            notification_id=model.notification_id,
            user_id=model.user_id,
            channel=DeliveryChannel(model.channel),
            event=model.event,
            success=model.success,
            detail=model.detail,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["DeliveryLogRepository"]
