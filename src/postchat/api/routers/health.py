"""
postchat.api.routers.health

Root banner, health and readiness endpoints.

Responsibilities:
- Provide a banner at `/` for quick manual checks.
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) with DB connectivity validation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from postchat.api.deps import db_session

router = APIRouter()


@router.get("/")
async def index() -> dict[str, str]:
    return {"message": "Server is running!"}


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(session: AsyncSession = Depends(db_session)) -> dict[str, str]:
    await session.execute(text("SELECT 1"))
    return {"status": "ready"}
