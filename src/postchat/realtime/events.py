"""
postchat.realtime.events

Inbound Socket.IO payload models.

Field names follow the wire format used by browser clients (camelCase).
Every field that addresses a room goes through `room_name`, so `join 5` and
`sendNotification {"userId": 5}` target the same room.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field
from pydantic_core import PydanticCustomError


def room_name(value: Any) -> str | None:
    # Room ids are non-empty strings or ints (ints are stringified).
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value:
        return value
    return None


def _room_id(value: Any) -> str:
    room = room_name(value)
    if room is None:
        raise PydanticCustomError("room_id", "Room id must be a non-empty string or integer")
    return room


RoomId = Annotated[str, BeforeValidator(_room_id)]


class ChatMessage(BaseModel):
    message: Any
    room: RoomId
    sender: Any = None


class TypingSignal(BaseModel):
    room: RoomId
    user: Any = None


class Notification(BaseModel):
    userId: RoomId
    notification: Any = None


class NewPost(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)


class Comment(BaseModel):
    postId: RoomId
    comment: Any
    userId: Any = None
