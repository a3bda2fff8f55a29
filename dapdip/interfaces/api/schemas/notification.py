"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from dapdip.domain.entities import NotificationPriority, NotificationType


class SenderRead(BaseModel):
    id: int
    name: str
    image_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    recipient_id: int
    type: str
    category: str
    content: str | None = None
    text: str
    is_read: bool
    created_at: datetime | None = None
    priority: NotificationPriority
    is_actionable: bool = False
    action_label: str | None = None
    action_url: str | None = None
    image_url: str | None = None
    url: str | None = None
    group_id: int | None = None
    page_id: int | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    sender: SenderRead | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationRead]
    unread_count: int
    next_cursor: int | None = None


class UnreadCountResponse(BaseModel):
    unread_count: int


class NotificationCreate(BaseModel):
    """Payload used by an authenticated user to notify another user."""

    recipient_id: int = Field(..., ge=1)
    type: NotificationType
    content: str | None = Field(default=None, max_length=1000)
    priority: NotificationPriority = NotificationPriority.NORMAL
    url: str | None = Field(default=None, max_length=500)
    image_url: str | None = Field(default=None, max_length=500)
    action_label: str | None = Field(default=None, max_length=100)
    action_url: str | None = Field(default=None, max_length=500)
    is_actionable: bool = False
    group_id: int | None = None
    page_id: int | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class NotificationCreateResponse(BaseModel):
    created: bool
    skipped_reason: str | None = None
    silent: bool = False
    notification: NotificationRead | None = None


class NotificationMarkReadRequest(BaseModel):
    """Mark one notification, or every unread one when ``notification_id`` is absent."""

    notification_id: int | None = Field(default=None, ge=1)


class NotificationMarkReadResponse(BaseModel):
    updated: int
    unread_count: int


__all__ = [
    "NotificationCreate",
    "NotificationCreateResponse",
    "NotificationListResponse",
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
    "SenderRead",
    "UnreadCountResponse",
]
