"""
postchat.realtime.server

Socket.IO server factory.

Responsibilities:
- Create the ASGI-mode AsyncServer with CORS derived from settings.
"""

from __future__ import annotations

import socketio

from postchat.settings import Settings


def create_socket_server(settings: Settings) -> socketio.AsyncServer:
    origins: str | list[str] = "*" if "*" in settings.cors_origins else settings.cors_origins
    return socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=origins,
        logger=False,
        engineio_logger=False,
    )
