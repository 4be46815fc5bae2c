"""
postchat.auth.deps

FastAPI dependency functions for authentication.

Responsibilities:
- Resolve the app-bound Settings for request handlers.
- Convert a bearer token into a typed `Principal`.
- Reject missing/invalid tokens with 401.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.status import HTTP_401_UNAUTHORIZED

from postchat.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from postchat.auth.models import Principal, principal_from_claims
from postchat.observability.logging import get_logger
from postchat.settings import Settings

log = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)


def settings_dep(request: Request) -> Settings:
    # Settings the running app was built with (bound in `postchat.api.app.create_app`).
    return request.app.state.settings  # type: ignore[attr-defined]


def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
) -> Principal:
    if creds is None or not creds.credentials:
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED, detail="No token, authorization denied"
        )

    try:
        payload = decode_and_validate(cfg=JwtConfig.from_settings(settings), token=creds.credentials)
        return principal_from_claims(payload)
    except (JwtValidationError, ValueError) as e:
        log.info("token_rejected", reason=str(e))
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Token is not valid") from e


# --- Module Notes -----------------------------------------------------------
# The Socket.IO connect handler performs the same validation against the
# handshake `auth.token` (see `realtime.handlers`).
