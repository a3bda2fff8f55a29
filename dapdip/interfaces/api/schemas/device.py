"""Schemas for push device registration."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from dapdip.domain.entities import DevicePlatform


class PushDeviceCreate(BaseModel):
    token: str = Field(..., min_length=8, max_length=512)
    platform: DevicePlatform
    name: str | None = Field(default=None, max_length=100)


class PushDeviceRead(BaseModel):
    id: int
    token: str
    platform: DevicePlatform
    name: str | None = None
    created_at: datetime | None = None
    last_active_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


__all__ = ["PushDeviceCreate", "PushDeviceRead"]
