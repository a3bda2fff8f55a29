"""Notification preference use cases."""

from .category_preferences import (
    get_category_preference,
    list_category_preferences,
    update_category_preference,
)
from .get_preferences import get_preferences
from .group_preferences import get_group_preference, update_group_preference
from .quiet_hours import is_within_quiet_hours
from .update_preferences import update_preferences

__all__ = [
    "get_category_preference",
    "get_group_preference",
    "get_preferences",
    "is_within_quiet_hours",
    "list_category_preferences",
    "update_category_preference",
    "update_group_preference",
    "update_preferences",
]
