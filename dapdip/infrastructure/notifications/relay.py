"""Per-user realtime channels shared by websockets and in-process subscribers."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, DefaultDict, Set

from fastapi import WebSocket

from dapdip.config import get_settings
from dapdip.domain.entities import RelayEvent

logger = logging.getLogger(__name__)

_CLOSED = object()


class RelaySubscription:
    """Async iterator over the events published on one channel.

    Events published while the subscription is not attached are never
    replayed. A subscriber that falls more than ``max_pending`` events behind
    loses the newest ones.
    """

    def __init__(
        self, relay: "NotificationRelay", channel: str, *, max_pending: int = 100
    ) -> None:
        self.channel = channel
        self._relay = relay
        self._queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=max_pending)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def offer(self, event: RelayEvent) -> None:
        if self._closed:
            return
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning(
                "Dropping %s for slow subscriber on %s", type(event).__name__, self.channel
            )

    def pending(self) -> int:
        return self._queue.qsize()

    async def get(self) -> RelayEvent:
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        return item

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._relay.unsubscribe(self)
        try:
            self._queue.put_nowait(_CLOSED)
        except asyncio.QueueFull:
            pass

    def __aiter__(self) -> "RelaySubscription":
        return self

    async def __anext__(self) -> RelayEvent:
        return await self.get()

    def __enter__(self) -> "RelaySubscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class NotificationRelay:
    """Fan out relay events to every session attached to a user's channel."""

    def __init__(self, channel_prefix: str | None = None) -> None:
        self._channel_prefix = channel_prefix or get_settings().relay_channel_prefix
        self._connections: DefaultDict[str, Set[WebSocket]] = defaultdict(set)
        self._subscriptions: DefaultDict[str, Set[RelaySubscription]] = defaultdict(set)

    def channel_for(self, user_id: int) -> str:
        """Return the channel name every session of ``user_id`` listens on."""

        return f"{self._channel_prefix}-{user_id}"

    async def connect(self, user_id: int, websocket: WebSocket) -> str:
        """Accept the websocket connection and attach it to the user's channel."""

        await websocket.accept()
        channel = self.channel_for(user_id)
        self._connections[channel].add(websocket)
        return channel

    def disconnect(self, user_id: int, websocket: WebSocket) -> None:
        """Remove ``websocket`` from the channel of ``user_id``."""

        self._discard_connection(self.channel_for(user_id), websocket)

    def subscribe(self, channel: str, *, max_pending: int = 100) -> RelaySubscription:
        subscription = RelaySubscription(self, channel, max_pending=max_pending)
        self._subscriptions[channel].add(subscription)
        return subscription

    def unsubscribe(self, subscription: RelaySubscription) -> None:
        subscriptions = self._subscriptions.get(subscription.channel)
        if subscriptions is None:
            return
        subscriptions.discard(subscription)
        if not subscriptions:
            self._subscriptions.pop(subscription.channel, None)

    def listener_count(self, channel: str) -> int:
        return len(self._connections.get(channel, ())) + len(
            self._subscriptions.get(channel, ())
        )

    async def publish(self, channel: str, event: RelayEvent) -> int:
        """Deliver ``event`` to every listener of ``channel``.

        Returns the number of listeners reached. Websockets failing to receive
        the message are detached.
        """

        delivered = 0
        for subscription in list(self._subscriptions.get(channel, ())):
            subscription.offer(event)
            delivered += 1

        message = event.to_message()
        for connection in list(self._connections.get(channel, ())):
            try:
                await connection.send_json(message)
            except Exception:
                logger.warning("Detaching websocket on %s after a failed send", channel)
                self._discard_connection(channel, connection)
            else:
                delivered += 1
        return delivered

    def _discard_connection(self, channel: str, websocket: WebSocket) -> None:
        connections = self._connections.get(channel)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            self._connections.pop(channel, None)


notification_relay = NotificationRelay()


__all__ = ["NotificationRelay", "RelaySubscription", "notification_relay"]
