"""Schemas for notification preferences."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, field_validator

from dapdip.domain.entities import NotificationCategory
from dapdip.utils import is_valid_time_of_day


class PreferencesRead(BaseModel):
    in_app_enabled: bool
    email_enabled: bool
    push_enabled: bool
    quiet_hours_enabled: bool
    quiet_hours_start: str | None = None
    quiet_hours_end: str | None = None
    timezone: str | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class PreferencesUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    in_app_enabled: bool | None = None
    email_enabled: bool | None = None
    push_enabled: bool | None = None
    quiet_hours_enabled: bool | None = None
    quiet_hours_start: str | None = None
    quiet_hours_end: str | None = None
    timezone: str | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("quiet_hours_start", "quiet_hours_end")
    @classmethod
    def _validate_clock(cls, value: str | None) -> str | None:
        if value is None:
            return value
        value = value.strip()
        if not is_valid_time_of_day(value):
            raise ValueError("Times must use the HH:MM 24-hour format")
        return value

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value


class CategoryPreferenceRead(BaseModel):
    category: NotificationCategory
    in_app_enabled: bool
    email_enabled: bool
    push_enabled: bool
    mute_all: bool

    model_config = ConfigDict(from_attributes=True)


class CategoryPreferenceUpdate(BaseModel):
    in_app_enabled: bool | None = None
    email_enabled: bool | None = None
    push_enabled: bool | None = None
    mute_all: bool | None = None

    model_config = ConfigDict(extra="forbid")


class GroupPreferenceRead(BaseModel):
    group_id: int
    mute_all: bool
    posts_enabled: bool
    comments_enabled: bool
    events_enabled: bool
    polls_enabled: bool
    mentions_enabled: bool
    announcements_only: bool

    model_config = ConfigDict(from_attributes=True)


class GroupPreferenceUpdate(BaseModel):
    mute_all: bool | None = None
    posts_enabled: bool | None = None
    comments_enabled: bool | None = None
    events_enabled: bool | None = None
    polls_enabled: bool | None = None
    mentions_enabled: bool | None = None
    announcements_only: bool | None = None

    model_config = ConfigDict(extra="forbid")


__all__ = [
    "CategoryPreferenceRead",
    "CategoryPreferenceUpdate",
    "GroupPreferenceRead",
    "GroupPreferenceUpdate",
    "PreferencesRead",
    "PreferencesUpdate",
]
