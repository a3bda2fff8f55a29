"""Schedule relay deliveries from synchronous request handlers."""

from __future__ import annotations

import asyncio
import logging

from anyio import from_thread

from dapdip.domain.entities import RelayEvent

from .relay import NotificationRelay, notification_relay

logger = logging.getLogger(__name__)


class RelayPublisher:
    """Publish relay events without blocking or failing the caller.

    The persisted notification table stays authoritative, so a failed publish
    is logged and otherwise ignored.
    """

    def __init__(self, relay: NotificationRelay) -> None:
        self._relay = relay
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def relay(self) -> NotificationRelay:
        return self._relay

    def dispatch(self, user_id: int, event: RelayEvent) -> None:
        """Schedule ``event`` on the channel of ``user_id``."""

        channel = self._relay.channel_for(user_id)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self._deliver, channel, event)
            except RuntimeError:
                logger.warning(
                    "No event loop available; %s on %s was not published",
                    type(event).__name__,
                    channel,
                )
        else:
            task = loop.create_task(self._deliver(channel, event))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def flush(self) -> None:
        """Wait until every scheduled delivery has finished."""

        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _deliver(self, channel: str, event: RelayEvent) -> None:
        try:
            await self._relay.publish(channel, event)
        except Exception:
            logger.exception(
                "Failed to publish %s on %s", type(event).__name__, channel
            )


relay_publisher = RelayPublisher(notification_relay)


__all__ = ["RelayPublisher", "relay_publisher"]
