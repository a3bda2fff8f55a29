"""Domain entity representing a user."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Core attributes describing an application user."""

    id: int | None
    name: str
    email: str
    image_url: str | None
    is_active: bool
    is_admin: bool
    created_at: datetime | None
