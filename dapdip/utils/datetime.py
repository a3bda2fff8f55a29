"""Timezone helpers.

Columns store naive local times of the application timezone; everything
above the repositories works with aware datetimes.
"""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dapdip.config import get_settings

logger = logging.getLogger(__name__)

UTC = ZoneInfo("UTC")


def _zone(name: str | None, fallback: tzinfo) -> tzinfo:
    name = (name or "").strip()
    if not name:
        return fallback
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using %s", name, fallback)
        return fallback


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Timezone named by ``APP_TIMEZONE``, UTC when unset or unknown."""

    return _zone(get_settings().app_timezone, UTC)


def resolve_user_timezone(tz_name: str | None) -> tzinfo:
    return _zone(tz_name, get_app_timezone())


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def now_in_app_naive_datetime() -> datetime:
    return datetime.now(tz=get_app_timezone()).replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Express ``value`` in the app timezone; naive values are taken as local."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=get_app_timezone())
    return value.astimezone(get_app_timezone())


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Convert ``value`` to the naive local form stored in the database."""

    if value is None:
        return None
    return ensure_app_timezone(value).replace(tzinfo=None)
