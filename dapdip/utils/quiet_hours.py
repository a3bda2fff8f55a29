"""Time-of-day arithmetic for the quiet hours window."""

from __future__ import annotations

import re
from datetime import datetime, time
from typing import Final

DEFAULT_QUIET_HOURS_START: Final[str] = "22:00"
DEFAULT_QUIET_HOURS_END: Final[str] = "08:00"

_TIME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(?P<h>[01]\d|2[0-3]):(?P<m>[0-5]\d)$")


def parse_time_of_day(value: str) -> time:
    """Parse an ``HH:MM`` string into a :class:`~datetime.time`."""

    match = _TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid time of day '{value}', expected HH:MM")
    return time(hour=int(match.group("h")), minute=int(match.group("m")))


def is_valid_time_of_day(value: str) -> bool:
    return bool(_TIME_PATTERN.match(value.strip()))


def is_time_in_window(moment: time, start: time, end: time) -> bool:
    """Return ``True`` when ``moment`` falls inside ``[start, end)``.

    Windows whose start is after their end wrap past midnight, so
    ``22:00-08:00`` contains ``23:30`` and ``07:59`` but not ``08:00``.
    A window whose start equals its end is empty.
    """

    moment = moment.replace(second=0, microsecond=0, tzinfo=None)
    if start == end:
        return False
    if start < end:
        return start <= moment < end
    return moment >= start or moment < end


def is_within_quiet_hours(
    *,
    enabled: bool,
    start: str | None,
    end: str | None,
    local_now: datetime,
) -> bool:
    """Return whether ``local_now`` falls inside an enabled quiet hours window."""

    if not enabled or not start or not end:
        return False
    try:
        start_time = parse_time_of_day(start)
        end_time = parse_time_of_day(end)
    except ValueError:
        return False
    return is_time_in_window(local_now.time(), start_time, end_time)


__all__ = [
    "DEFAULT_QUIET_HOURS_END",
    "DEFAULT_QUIET_HOURS_START",
    "is_time_in_window",
    "is_valid_time_of_day",
    "is_within_quiet_hours",
    "parse_time_of_day",
]
