"""
postchat.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for DB sessions and the Socket.IO server.
- Encapsulate app.state access patterns (sessionmaker/sio).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import socketio
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created in the app lifespan (see `postchat.api.app.create_app`).
    return request.app.state.sessionmaker  # type: ignore[attr-defined]

def socket_server(request: Request) -> socketio.AsyncServer:
    return request.app.state.sio  # type: ignore[attr-defined]

async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Routers commit explicitly.
    async with session_factory() as session:
        yield session
