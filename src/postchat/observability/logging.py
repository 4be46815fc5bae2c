"""
postchat.observability.logging

Structured logging for the API and the Socket.IO relay.

Responsibilities:
- Render every log record as one JSON object per line on stdout, including
  records from stdlib loggers (uvicorn, sqlalchemy) that never touch structlog.
- Scope per-event socket metadata (`sid`, event name) through contextvars.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

# uvicorn's access log duplicates the `http_request` line emitted by
# RequestContextMiddleware.
_QUIET_LOGGERS = ("uvicorn.access",)
_HANDLER_NAME = "postchat-json"


def configure_logging(*, service_name: str, level: str) -> None:
    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service_name(service_name),
    ]

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(),
            ],
        )
    )

    root = logging.getLogger()
    # Only our handler is swapped; handlers installed by others stay.
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


@contextmanager
def socket_event_context(*, sid: str, event: str) -> Iterator[None]:
    """Bind the socket id and event name for log lines emitted while handling one event."""
    with structlog.contextvars.bound_contextvars(sid=sid, socket_event=event):
        yield


# --- Module Notes -----------------------------------------------------------
# HTTP requests get their context from `observability.middleware`; socket events
# have no middleware, so `realtime.handlers` wraps each one in `socket_event_context`.
