"""
postchat.api.app

FastAPI app factory for the PostChat service.

Responsibilities:
- Build the FastAPI application and register routers, middleware and error handlers.
- Attach the Socket.IO server and its handlers.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from postchat import __version__
from postchat.api.errors import UnhandledErrorMiddleware, register_error_handlers
from postchat.api.routers.auth import router as auth_router
from postchat.api.routers.health import router as health_router
from postchat.api.routers.posts import router as posts_router
from postchat.db.init_db import init_db
from postchat.db.session import create_engine, create_sessionmaker
from postchat.observability.logging import configure_logging, get_logger
from postchat.observability.middleware import RequestContextMiddleware
from postchat.realtime.handlers import register_chat_handlers
from postchat.realtime.server import create_socket_server
from postchat.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Prod runs Alembic migrations instead.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="PostChat",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Added innermost-first: errors -> request context -> CORS (outermost), so
    # 500s and request ids both carry CORS headers.
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(posts_router)

    sio = create_socket_server(settings)
    register_chat_handlers(sio, settings=settings, get_sessionmaker=lambda: app.state.sessionmaker)
    app.state.sio = sio

    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        # Mounted last so API routes win over files with the same path.
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


def create_asgi_app(*, settings: Settings) -> socketio.ASGIApp:
    # Socket.IO answers under /socket.io/; everything else (and lifespan) goes to FastAPI.
    app = create_app(settings=settings)
    return socketio.ASGIApp(app.state.sio, other_asgi_app=app)


# --- Module Notes -----------------------------------------------------------
# Routers reach the Socket.IO server through `api.deps.socket_server`, so HTTP
# writes can notify realtime clients.
