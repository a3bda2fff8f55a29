"""Domain entity for a registered push notification target."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class DevicePlatform(str, Enum):
    WEB = "WEB"
    ANDROID = "ANDROID"
    IOS = "IOS"


@dataclass
class PushDevice:
    """Device token registered by a user to receive push messages."""

    id: int | None
    user_id: int
    token: str
    platform: DevicePlatform
    name: str | None = None
    created_at: datetime | None = None
    last_active_at: datetime | None = None


__all__ = ["DevicePlatform", "PushDevice"]
