"""Backends the notification center uses to talk to the REST API."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)


class NotificationBackend(Protocol):
    async def fetch(self, limit: int) -> dict[str, Any]:
        """Return ``{"notifications": [...], "unread_count": n}``."""

    async def mark_read(self, notification_id: int | None = None) -> None:
        """Mark one notification, or all of them, as read."""


class HttpNotificationBackend:
    """Call the notification endpoints with a bearer token.

    Usage:
        async with HttpNotificationBackend("https://api.example", token) as backend:
            page = await backend.fetch(10)
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            transport=transport,
        )

    async def fetch(self, limit: int) -> dict[str, Any]:
        response = await self._client.get("/notifications/", params={"limit": limit})
        response.raise_for_status()
        return response.json()

    async def mark_read(self, notification_id: int | None = None) -> None:
        response = await self._client.post(
            "/notifications/read", json={"notification_id": notification_id}
        )
        response.raise_for_status()
        logger.debug("Marked %s read", notification_id or "all notifications")

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpNotificationBackend":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["HttpNotificationBackend", "NotificationBackend"]
