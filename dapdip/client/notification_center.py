"""In-memory notification center kept in sync by relay events.

The center holds one page of notifications and the unread counter of a
signed-in user. Relay events update it in place; filters and date groups
are derived views computed on demand.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import AsyncIterable
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from dapdip.domain.entities import (
    MarkedAll,
    MarkedOne,
    NewNotification,
    NotificationCategory,
    NotificationType,
    RelayEvent,
    category_for,
    parse_relay_event,
)

from .backend import NotificationBackend

logger = logging.getLogger(__name__)

Item = dict[str, Any]


class CenterState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"


class CenterFilter(str, Enum):
    ALL = "all"
    UNREAD = "unread"
    SOCIAL = "social"
    GROUPS = "groups"
    PAGES = "pages"
    SYSTEM = "system"


class DateBucket(str, Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_WEEK = "this_week"
    OLDER = "older"


_FILTER_CATEGORIES: dict[CenterFilter, frozenset[NotificationCategory]] = {
    CenterFilter.SOCIAL: frozenset({NotificationCategory.SOCIAL}),
    CenterFilter.GROUPS: frozenset({NotificationCategory.GROUP}),
    CenterFilter.PAGES: frozenset({NotificationCategory.PAGE}),
    CenterFilter.SYSTEM: frozenset(
        {NotificationCategory.SYSTEM, NotificationCategory.SECURITY}
    ),
}


def item_category(item: Item) -> NotificationCategory:
    """Return the category of a wire notification."""

    try:
        return NotificationCategory(item["category"])
    except (KeyError, ValueError):
        pass
    try:
        return category_for(NotificationType(item.get("type")))
    except ValueError:
        return NotificationCategory.SYSTEM


def date_bucket(created_at: datetime, now: datetime) -> DateBucket:
    """Place ``created_at`` relative to the calendar day of ``now``."""

    if created_at.tzinfo is not None and now.tzinfo is not None:
        created_at = created_at.astimezone(now.tzinfo)
    age_in_days = (now.date() - created_at.date()).days
    if age_in_days <= 0:
        return DateBucket.TODAY
    if age_in_days == 1:
        return DateBucket.YESTERDAY
    if age_in_days < 7:
        return DateBucket.THIS_WEEK
    return DateBucket.OLDER


def _parse_created_at(item: Item) -> datetime | None:
    value = item.get("created_at")
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


class NotificationCenter:
    """Client-side state of a user's notifications.

    ``popup`` is called for every new notification while
    ``popups_permitted`` is true, unless the event arrived during the
    recipient's quiet hours.
    """

    def __init__(
        self,
        backend: NotificationBackend,
        *,
        page_size: int = 10,
        popup: Callable[[Item], None] | None = None,
        popups_permitted: bool = False,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._backend = backend
        self._page_size = page_size
        self._popup = popup
        self.popups_permitted = popups_permitted
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._state = CenterState.IDLE
        self._items: list[Item] = []
        self._unread_count = 0
        self._is_open = False
        self.filter = CenterFilter.ALL

    @property
    def state(self) -> CenterState:
        return self._state

    @property
    def unread_count(self) -> int:
        return self._unread_count

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def notifications(self) -> list[Item]:
        return list(self._items)

    async def load(self) -> None:
        """Fetch the first page and move to ``ready``."""

        self._state = CenterState.LOADING
        try:
            page = await self._backend.fetch(self._page_size)
        except Exception:
            self._state = CenterState.IDLE
            raise
        self._items = [dict(item) for item in page.get("notifications", [])]
        self._unread_count = max(int(page.get("unread_count", 0)), 0)
        self._state = CenterState.READY

    def apply(self, event: RelayEvent | dict[str, Any]) -> None:
        """Fold one relay event, or its wire message, into local state."""

        if isinstance(event, dict):
            event = parse_relay_event(event)

        if isinstance(event, NewNotification):
            self._add(event)
        elif isinstance(event, MarkedOne):
            self._mark_one(event.notification_id)
        elif isinstance(event, MarkedAll):
            self._mark_all()

    async def listen(self, events: AsyncIterable[RelayEvent | dict[str, Any]]) -> None:
        """Apply every event of ``events`` until the stream ends."""

        async for event in events:
            try:
                self.apply(event)
            except ValueError:
                logger.warning("Ignoring malformed relay message: %s", event)

    async def toggle(self) -> None:
        """Open or close the panel; opening with unread items reads them all."""

        self._is_open = not self._is_open
        if self._is_open and self._unread_count > 0:
            try:
                await self._backend.mark_read(None)
            except Exception:
                self._is_open = False
                raise
            self._mark_all()

    async def click(self, notification_id: int) -> Item | None:
        """Open one notification, marking it read when it was unread."""

        item = self._find(notification_id)
        if item is None or item.get("is_read"):
            return item

        self._mark_one(notification_id)
        try:
            await self._backend.mark_read(notification_id)
        except Exception:
            item["is_read"] = False
            self._unread_count += 1
            raise
        return item

    def visible(self, view: CenterFilter | None = None) -> list[Item]:
        """Return the notifications selected by ``view``, or by the current filter."""

        selected = CenterFilter(view or self.filter)
        if selected is CenterFilter.ALL:
            return list(self._items)
        if selected is CenterFilter.UNREAD:
            return [item for item in self._items if not item.get("is_read")]
        categories = _FILTER_CATEGORIES[selected]
        return [item for item in self._items if item_category(item) in categories]

    def grouped(
        self, view: CenterFilter | None = None
    ) -> "OrderedDict[DateBucket, list[Item]]":
        """Group the visible notifications by age, newest bucket first."""

        now = self._clock()
        groups: OrderedDict[DateBucket, list[Item]] = OrderedDict(
            (bucket, []) for bucket in DateBucket
        )
        for item in self.visible(view):
            created_at = _parse_created_at(item)
            bucket = date_bucket(created_at, now) if created_at else DateBucket.OLDER
            groups[bucket].append(item)
        return groups

    def _find(self, notification_id: int) -> Item | None:
        for item in self._items:
            if item.get("id") == notification_id:
                return item
        return None

    def _add(self, event: NewNotification) -> None:
        item = dict(event.notification)
        if item.get("id") is not None and self._find(item["id"]) is not None:
            return
        self._items.insert(0, item)
        if not item.get("is_read"):
            self._unread_count += 1
        if self._popup is not None and self.popups_permitted and not event.silent:
            try:
                self._popup(item)
            except Exception:
                logger.exception("Notification popup failed for %s", item.get("id"))

    def _mark_one(self, notification_id: int) -> None:
        item = self._find(notification_id)
        if item is None:
            # not on the loaded page, the server count still dropped
            self._unread_count = max(self._unread_count - 1, 0)
            return
        if item.get("is_read"):
            return
        item["is_read"] = True
        self._unread_count = max(self._unread_count - 1, 0)

    def _mark_all(self) -> None:
        for item in self._items:
            item["is_read"] = True
        self._unread_count = 0


__all__ = [
    "CenterFilter",
    "CenterState",
    "DateBucket",
    "NotificationCenter",
    "date_bucket",
    "item_category",
]
