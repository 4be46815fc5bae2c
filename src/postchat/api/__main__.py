"""
postchat.api.__main__

Entrypoint for running the service via `python -m postchat.api`.

Responsibilities:
- Load settings.
- Create the combined FastAPI + Socket.IO ASGI app.
- Start uvicorn with structlog-compatible logging config.
"""

from __future__ import annotations

import uvicorn

from postchat.api.app import create_asgi_app
from postchat.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_asgi_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
