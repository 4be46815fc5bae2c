"""
tests.test_errors

Error mapping for failures that don't come from HTTPException.
"""

from __future__ import annotations

import httpx
import pytest
from sqlalchemy.exc import IntegrityError

from postchat.api.errors import ResourceIdError, parse_resource_id


@pytest.mark.asyncio
async def test_integrity_error_maps_to_400(app) -> None:
    @app.get("/boom/duplicate")
    async def _duplicate() -> None:
        raise IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed: users.email"))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.get("/boom/duplicate")
    assert r.status_code == 400
    assert r.json() == {"error": "Duplicate field value entered"}


@pytest.mark.asyncio
async def test_unhandled_error_maps_to_500_with_cors_and_request_id(app) -> None:
    @app.get("/boom/crash")
    async def _crash() -> None:
        raise RuntimeError("kaboom")

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.get(
            "/boom/crash", headers={"Origin": "http://example.org", "x-request-id": "req-500"}
        )
    assert r.status_code == 500
    assert r.json() == {"error": "Server error"}
    assert r.headers["access-control-allow-origin"] == "*"
    assert r.headers["x-request-id"] == "req-500"


def test_parse_resource_id() -> None:
    with pytest.raises(ResourceIdError):
        parse_resource_id("123")
