"""
postchat.schemas

Public representations shared by the REST API and the realtime channel.

Responsibilities:
- Shape users and posts for clients (author always populated as {id, name, email}).
- Render timestamps as UTC-aware ISO-8601, like the realtime event timestamps.
- Never expose password hashes.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict

from postchat.db.models import Post


def _as_utc(value: datetime) -> datetime:
    # Columns hold naive UTC (see `db.models.utcnow`).
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class UserPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    email: str


class PostPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    content: str
    author: UserPublic
    created_at: UtcDatetime
    updated_at: UtcDatetime


def post_payload(post: Post) -> dict[str, Any]:
    # JSON-safe dict for Socket.IO emits (uuid/datetime rendered as strings).
    return PostPublic.model_validate(post).model_dump(mode="json")
