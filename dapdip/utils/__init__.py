"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_naive_datetime,
    now_in_app_timezone,
    resolve_user_timezone,
)
from .quiet_hours import (
    DEFAULT_QUIET_HOURS_END,
    DEFAULT_QUIET_HOURS_START,
    is_time_in_window,
    is_valid_time_of_day,
    is_within_quiet_hours,
    parse_time_of_day,
)

__all__ = [
    "ensure_app_naive_datetime",
    "ensure_app_timezone",
    "now_in_app_naive_datetime",
    "now_in_app_timezone",
    "resolve_user_timezone",
    "DEFAULT_QUIET_HOURS_END",
    "DEFAULT_QUIET_HOURS_START",
    "is_time_in_window",
    "is_valid_time_of_day",
    "is_within_quiet_hours",
    "parse_time_of_day",
]
