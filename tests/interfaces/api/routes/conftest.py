"""Fixtures for exercising the HTTP API through FastAPI's test client."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from dapdip.infrastructure.security import create_user_token
from dapdip.interfaces.api.dependencies import get_relay_publisher
from main import create_app


@pytest.fixture()
def api(publisher):
    app = create_app()
    app.dependency_overrides[get_relay_publisher] = lambda: publisher
    # No lifespan: the tables are managed by the database fixtures.
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture()
def auth():
    def headers(user) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_user_token(user.id)}"}

    return headers
