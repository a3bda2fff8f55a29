"""Shared fixtures: an in-memory database, users and a recording publisher."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
for _variable in ("SENDGRID_API_KEY", "SENDGRID_SENDER", "PUSH_GATEWAY_URL", "OPENAI_API_KEY"):
    os.environ.pop(_variable, None)

from dapdip.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from dapdip.application.use_cases.notifications import get_sender_directory  # noqa: E402
from dapdip.application.use_cases.users import create_user  # noqa: E402
from dapdip.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)


class RecordingPublisher:
    """Collect relay events instead of publishing them."""

    def __init__(self) -> None:
        self.events: list[tuple[int, object]] = []

    def dispatch(self, user_id, event) -> None:
        self.events.append((user_id, event))

    def for_user(self, user_id: int) -> list[object]:
        return [event for recipient, event in self.events if recipient == user_id]


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure every test starts from empty tables and an empty sender cache."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    get_sender_directory.cache_clear()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def make_user(session):
    counter = {"value": 0}

    def factory(name: str | None = None, *, is_admin: bool = False, email: str | None = None):
        counter["value"] += 1
        number = counter["value"]
        return create_user(
            session,
            name=name or f"User {number}",
            email=email or f"user{number}@example.com",
            is_admin=is_admin,
        )

    return factory


@pytest.fixture()
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"
