"""Resolve public sender details through the process-local cache."""

from __future__ import annotations

from functools import lru_cache
from typing import Iterable

from sqlalchemy.orm import Session

from dapdip.config import get_settings
from dapdip.domain.entities import Notification, SenderSummary
from dapdip.infrastructure.cache import TTLCache
from dapdip.infrastructure.repositories import UserRepository


class SenderDirectory:
    """Look up :class:`SenderSummary` objects, caching them per process."""

    def __init__(self, cache: TTLCache[int, SenderSummary]) -> None:
        self._cache = cache

    @property
    def cache(self) -> TTLCache[int, SenderSummary]:
        return self._cache

    def resolve(self, session: Session, user_ids: Iterable[int]) -> dict[int, SenderSummary]:
        ids = sorted({user_id for user_id in user_ids if user_id is not None})
        if not ids:
            return {}

        found, missing = self._cache.get_many(ids)
        if missing:
            users = UserRepository(session).get_map_by_ids(missing)
            for user_id, user in users.items():
                summary = SenderSummary(id=user_id, name=user.name, image_url=user.image_url)
                self._cache.set(user_id, summary)
                found[user_id] = summary
        return found

    def attach(self, session: Session, notifications: list[Notification]) -> list[Notification]:
        """Set ``sender`` on every notification that has a sender id."""

        summaries = self.resolve(
            session, (notification.sender_id for notification in notifications)
        )
        for notification in notifications:
            if notification.sender_id is not None:
                notification.sender = summaries.get(notification.sender_id)
        return notifications


@lru_cache(maxsize=1)
def get_sender_directory() -> SenderDirectory:
    """Return the directory configured from the application settings."""

    settings = get_settings()
    return SenderDirectory(
        TTLCache(
            capacity=settings.user_cache_capacity,
            ttl_seconds=settings.user_cache_ttl_seconds,
        )
    )


__all__ = ["SenderDirectory", "get_sender_directory"]
