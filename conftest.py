from unittest.mock import AsyncMock

import pytest
from rest_framework.test import APIClient

from synergysphere.realtime.socketio import RealtimeServer
from synergysphere.users.models import User
from tests.factories import create_user


@pytest.fixture
def user(db) -> User:
    return create_user("owner@example.com", name="Olive Owner")


@pytest.fixture
def other_user(db) -> User:
    return create_user("other@example.com", name="Oscar Other")


@pytest.fixture
def api_client(user) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def realtime_server() -> RealtimeServer:
    """An isolated server whose socket emits are recorded instead of sent."""

    server = RealtimeServer(require_auth=False, relay_client_events=True)
    server.sio.emit = AsyncMock()
    return server
