"""
postchat.observability.middleware

Request id propagation and per-request access logging.
"""

from __future__ import annotations

import re
import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from postchat.observability.logging import get_logger

log = get_logger(__name__)

# Caller ids are echoed back in a response header and written to logs.
_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def request_id_from(request: Request) -> str:
    supplied = request.headers.get("x-request-id", "")
    return supplied if _REQUEST_ID.match(supplied) else str(uuid.uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an id (the caller's `x-request-id` when usable),
    binds it with the method and path into structlog contextvars, and logs one
    `http_request` line with status and duration when the response is ready.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request_id_from(request)
        started = time.perf_counter()
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        try:
            response: Response = await call_next(request)
            log.info(
                "http_request",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers["x-request-id"] = request_id
        return response
