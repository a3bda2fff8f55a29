"""Use cases managing push notification devices."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy.orm import Session

from dapdip.domain.entities import DevicePlatform, PushDevice
from dapdip.infrastructure.repositories import PushDeviceRepository
from dapdip.utils import now_in_app_timezone


def register_push_device(
    session: Session,
    user_id: int,
    *,
    token: str,
    platform: DevicePlatform,
    name: str | None = None,
) -> PushDevice:
    """Register ``token`` for ``user_id`` or refresh the existing registration."""

    token = token.strip()
    if not token:
        raise ValueError("Device token is required")

    repository = PushDeviceRepository(session)
    now = now_in_app_timezone()
    existing = repository.get_by_token(user_id, token)
    if existing is not None:
        return repository.save(
            replace(existing, platform=platform, name=name or existing.name, last_active_at=now)
        )
    return repository.save(
        PushDevice(
            id=None,
            user_id=user_id,
            token=token,
            platform=platform,
            name=name,
            created_at=now,
            last_active_at=now,
        )
    )


def unregister_push_device(session: Session, user_id: int, device_id: int) -> None:
    if not PushDeviceRepository(session).delete(device_id, user_id=user_id):
        raise ValueError("Device not found")


def list_push_devices(session: Session, user_id: int) -> list[PushDevice]:
    return list(PushDeviceRepository(session).list_for_user(user_id))


__all__ = ["list_push_devices", "register_push_device", "unregister_push_device"]
