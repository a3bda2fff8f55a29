"""Persistence helpers for push devices."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from dapdip.domain.entities import DevicePlatform, PushDevice
from dapdip.infrastructure.models import PushDeviceModel
from dapdip.utils import ensure_app_naive_datetime, ensure_app_timezone


class PushDeviceRepository:
    """Provide CRUD operations for :class:`PushDevice` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(self, user_id: int) -> Sequence[PushDevice]:
        query = (
            self.session.query(PushDeviceModel)
            .filter(PushDeviceModel.user_id == user_id)
            .order_by(PushDeviceModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def get_by_token(self, user_id: int, token: str) -> PushDevice | None:
        model = (
            self.session.query(PushDeviceModel)
            .filter(PushDeviceModel.user_id == user_id)
            .filter(PushDeviceModel.token == token)
            .first()
        )
        return self._to_entity(model) if model else None

    def save(self, device: PushDevice) -> PushDevice:
        model = None
        if device.id is not None:
            model = self.session.get(PushDeviceModel, device.id)
        if model is None:
            model = PushDeviceModel()
            if device.created_at is not None:
                model.created_at = ensure_app_naive_datetime(device.created_at)
        model.user_id = device.user_id
        model.token = device.token
        model.platform = device.platform.value
        model.name = device.name
        model.last_active_at = ensure_app_naive_datetime(device.last_active_at)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, device_id: int, *, user_id: int) -> bool:
        deleted = (
            self.session.query(PushDeviceModel)
            .filter(PushDeviceModel.id == device_id)
            .filter(PushDeviceModel.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return bool(deleted)

    def delete_by_token(self, token: str) -> int:
        deleted = (
            self.session.query(PushDeviceModel)
            .filter(PushDeviceModel.token == token)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return int(deleted or 0)

    @staticmethod
    def _to_entity(model: PushDeviceModel) -> PushDevice:
        return PushDevice(
            id=model.id,
            user_id=model.user_id,
            token=model.token,
            platform=DevicePlatform(model.platform),
            name=model.name,
            created_at=ensure_app_timezone(model.created_at),
            last_active_at=ensure_app_timezone(model.last_active_at),
        )


__all__ = ["PushDeviceRepository"]
