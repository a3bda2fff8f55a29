"""Domain entity recording the outcome of one delivery channel."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class DeliveryChannel(str, Enum):
    IN_APP = "IN_APP"
    EMAIL = "EMAIL"
    PUSH = "PUSH"


DELIVERY_EVENT_DELIVERED = "delivered"
DELIVERY_EVENT_SUPPRESSED = "suppressed"
DELIVERY_EVENT_FAILED = "failed"


@dataclass
class DeliveryLogEntry:
    """Append-only trace of a notification going through a channel."""

    id: int | None
    notification_id: int
    user_id: int
    channel: DeliveryChannel
    event: str
    success: bool
    detail: str | None = None
    created_at: datetime | None = None


__all__ = [
    "DELIVERY_EVENT_DELIVERED",
    "DELIVERY_EVENT_FAILED",
    "DELIVERY_EVENT_SUPPRESSED",
    "DeliveryChannel",
    "DeliveryLogEntry",
]
