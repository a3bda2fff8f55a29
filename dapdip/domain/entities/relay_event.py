"""Events exchanged over a user's real-time relay channel.

Only two event names travel on the wire: ``NEW_NOTIFICATION`` and
``READ_NOTIFICATION``. The read event is modelled as two explicit variants,
:class:`MarkedOne` and :class:`MarkedAll`, and its payload carries a ``kind``
discriminator instead of an optional notification id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

NEW_NOTIFICATION = "NEW_NOTIFICATION"
READ_NOTIFICATION = "READ_NOTIFICATION"


@dataclass(frozen=True)
class NewNotification:
    """A notification was created for the channel owner."""

    notification: dict[str, Any] = field(hash=False)
    silent: bool = False

    def to_message(self) -> dict[str, Any]:
        return {
            "type": NEW_NOTIFICATION,
            "data": {"notification": dict(self.notification), "silent": self.silent},
        }


@dataclass(frozen=True)
class MarkedOne:
    """A single notification was marked read."""

    notification_id: int

    def to_message(self) -> dict[str, Any]:
        return {
            "type": READ_NOTIFICATION,
            "data": {"kind": "one", "notification_id": self.notification_id},
        }


@dataclass(frozen=True)
class MarkedAll:
    """Every notification of the channel owner was marked read."""

    def to_message(self) -> dict[str, Any]:
        return {"type": READ_NOTIFICATION, "data": {"kind": "all"}}


RelayEvent = Union[NewNotification, MarkedOne, MarkedAll]


def parse_relay_event(message: dict[str, Any]) -> RelayEvent:
    """Rebuild a relay event from its wire ``message``.

    Raises :class:`ValueError` when the message does not describe a known event.
    """

    event_type = message.get("type")
    data = message.get("data") or {}
    if event_type == NEW_NOTIFICATION:
        notification = data.get("notification")
        if not isinstance(notification, dict):
            raise ValueError("NEW_NOTIFICATION requires a notification payload")
        return NewNotification(notification=notification, silent=bool(data.get("silent")))
    if event_type == READ_NOTIFICATION:
        kind = data.get("kind")
        if kind == "all":
            return MarkedAll()
        if kind == "one":
            notification_id = data.get("notification_id")
            if notification_id is None:
                raise ValueError("READ_NOTIFICATION of kind 'one' requires an id")
            return MarkedOne(notification_id=int(notification_id))
        raise ValueError(f"Unknown READ_NOTIFICATION kind: {kind!r}")
    raise ValueError(f"Unknown relay event type: {event_type!r}")


__all__ = [
    "MarkedAll",
    "MarkedOne",
    "NEW_NOTIFICATION",
    "NewNotification",
    "READ_NOTIFICATION",
    "RelayEvent",
    "parse_relay_event",
]
