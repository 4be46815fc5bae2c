"""
postchat.api.errors

Error mapping for the HTTP API.

Responsibilities:
- Render every error as JSON under `error` (or `errors` for validation failures).
- Map known failure classes to status codes:
  - request validation          -> 400 {"errors": [...]}
  - malformed resource id       -> 404 "Resource not found"
  - unique constraint violation -> 400 "Duplicate field value entered"
  - anything unhandled          -> 500 "Server error"
"""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from postchat.observability.logging import get_logger

log = get_logger(__name__)


class ResourceIdError(ValueError):
    """Raised when a path id cannot be parsed into a resource id."""


def parse_resource_id(raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError as e:
        raise ResourceIdError(raw) from e


def _validation_item(err: dict[str, Any]) -> dict[str, Any]:
    loc = [str(p) for p in err.get("loc", ())]
    location = loc[0] if loc else "body"
    return {
        "type": "field",
        "msg": err.get("msg", "Invalid value"),
        "path": ".".join(loc[1:]) if len(loc) > 1 else location,
        "location": location,
    }


async def _http_exception(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _request_validation(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={"errors": [_validation_item(e) for e in exc.errors()]},
    )


async def _resource_id(_: Request, exc: ResourceIdError) -> JSONResponse:
    return JSONResponse(status_code=HTTP_404_NOT_FOUND, content={"error": "Resource not found"})


async def _integrity(_: Request, exc: IntegrityError) -> JSONResponse:
    log.info("integrity_error", error=str(exc.orig))
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST, content={"error": "Duplicate field value entered"}
    )


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """
    Renders unhandled exceptions as the JSON 500.

    Installed inside the CORS and request-context middleware so the 500 carries
    their headers, unlike a Starlette `Exception` handler, which runs outermost.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            log.error("unhandled_error", exc_info=exc)
            return JSONResponse(
                status_code=HTTP_500_INTERNAL_SERVER_ERROR, content={"error": "Server error"}
            )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception)
    app.add_exception_handler(RequestValidationError, _request_validation)
    app.add_exception_handler(ResourceIdError, _resource_id)
    app.add_exception_handler(IntegrityError, _integrity)


# --- Module Notes -----------------------------------------------------------
# Middleware order is set in `postchat.api.app.create_app`: UnhandledErrorMiddleware
# must be added before RequestContextMiddleware and CORSMiddleware.
