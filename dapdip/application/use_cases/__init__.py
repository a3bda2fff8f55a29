"""Aggregate application use cases."""

from .notifications import mark_read, notify
from .tokens import check_availability, record_usage
from .users import create_user

__all__ = [
    "check_availability",
    "create_user",
    "mark_read",
    "notify",
    "record_usage",
]
