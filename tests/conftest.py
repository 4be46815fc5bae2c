"""
tests.conftest

Shared fixtures: an app bound to a throwaway SQLite file, an in-process HTTP
client, and a recording stand-in for the Socket.IO server.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio
import structlog

from postchat.api.app import create_app
from postchat.settings import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-secret",
        static_dir=str(tmp_path / "public"),
    )


@pytest_asyncio.fixture
async def app(settings: Settings):
    app = create_app(settings=settings)
    # httpx ASGITransport does not run lifespan; enter it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def register(
    client: httpx.AsyncClient,
    *,
    name: str = "Ada Lovelace",
    email: str = "ada@example.com",
    password: str = "secret123",
) -> dict[str, Any]:
    r = await client.post(
        "/api/auth/register", json={"name": name, "email": email, "password": password}
    )
    assert r.status_code == 201, r.text
    return r.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@dataclass
class Emitted:
    event: str
    data: Any
    to: Any
    skip_sid: Any


class FakeSocketServer:
    """Records handler registration, emits, rooms and sessions like AsyncServer."""

    def __init__(self) -> None:
        self.handlers: dict[str, Any] = {}
        self.emitted: list[Emitted] = []
        self.rooms: dict[str, set[str]] = defaultdict(set)
        self.sessions: dict[str, dict[str, Any]] = {}
        # structlog contextvars seen by each enter_room call.
        self.join_contexts: list[dict[str, Any]] = []

    def on(self, event: str, handler=None, namespace=None):
        def set_handler(h):
            self.handlers[event] = h
            return h

        if handler is not None:
            return set_handler(handler)
        return set_handler

    async def emit(self, event, data=None, to=None, room=None, skip_sid=None, **_: Any) -> None:
        self.emitted.append(Emitted(event=event, data=data, to=to or room, skip_sid=skip_sid))

    async def enter_room(self, sid: str, room: str, namespace=None) -> None:
        self.rooms[room].add(sid)
        self.join_contexts.append(structlog.contextvars.get_contextvars())

    async def get_session(self, sid: str, namespace=None) -> dict[str, Any]:
        return self.sessions[sid]

    async def save_session(self, sid: str, session: dict[str, Any], namespace=None) -> None:
        self.sessions[sid] = session

    def events(self, name: str) -> list[Emitted]:
        return [e for e in self.emitted if e.event == name]
