# web_api/tests/conftest.py
"""Pytest fixtures for web API tests.

Requests go through httpx's ASGITransport against the real app, with the
in-memory database and the recording object store from the root conftest
placed on app.state (the lifespan does not run under ASGITransport).
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from web_api.auth import SESSION_COOKIE, create_jwt


@pytest_asyncio.fixture
async def app(database, fake_store):
    from main import app

    app.state.database = database
    app.state.object_store = fake_store
    yield app
    app.dependency_overrides.clear()
    app.state.database = None
    app.state.object_store = None


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client


@pytest.fixture
def login(client):
    """Set the session cookie for a user id on the test client."""

    def _login(user_id: str = "user-1"):
        client.headers["Cookie"] = f"{SESSION_COOKIE}={create_jwt(user_id)}"

    return _login
