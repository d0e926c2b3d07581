"""Test fixtures — a fresh app (and registry) per test.

HTTP tests go through httpx's ASGITransport. Registry and fan-out tests
use FakeWebSocket, which records what the server sends instead of
talking to a real socket. Tests of the real WebSocket protocol use
Starlette's TestClient (see test_websocket.py).
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from orderrelay.config import Settings
from orderrelay.main import create_app


class FakeWebSocket:
    """Stands in for fastapi.WebSocket on the server side."""

    def __init__(self):
        self.accepted = False
        self.sent: list[dict] = []
        self.closed_with: int | None = None
        self.fail_with: BaseException | None = None

    async def accept(self):
        self.accepted = True

    async def send_json(self, data):
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(data)

    async def close(self, code: int = 1000, reason: str | None = None):
        self.closed_with = code

    def events(self, event_type: str | None = None) -> list[dict]:
        """Messages after the connection_established ack."""
        msgs = [m for m in self.sent if m["type"] != "connection_established"]
        if event_type is not None:
            msgs = [m for m in msgs if m["type"] == event_type]
        return msgs


@pytest.fixture()
def test_settings():
    return Settings(
        cors_origins="http://localhost:3000, http://127.0.0.1:3000",
        environment="test",
    )


@pytest.fixture()
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture()
def registry(app):
    return app.state.registry


@pytest.fixture()
def fanout(app):
    return app.state.fanout


@pytest.fixture()
def fake_socket():
    return FakeWebSocket()


@pytest.fixture()
def connect(registry):
    """Admit a FakeWebSocket into the registry, return (connection, socket)."""

    async def _connect():
        ws = FakeWebSocket()
        connection = await registry.connect(ws)
        return connection, ws

    return _connect


@pytest_asyncio.fixture()
async def client(app):
    """HTTP client bound to this test's app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
