"""
postchat.realtime.handlers

Socket.IO event handlers (default namespace).

Responsibilities:
- Authenticate connections with the handshake `auth.token` (same JWT as the REST API).
- Relay chat, typing and notification events to rooms.
- Persist posts created over the socket and broadcast them.
- Broadcast presence changes (online/offline).

Handlers relay events as-is; ordering and delivery are whatever Socket.IO provides.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import socketio
from pydantic import ValidationError
from socketio.exceptions import ConnectionRefusedError as SocketConnectionRefused
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from postchat.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from postchat.auth.models import principal_from_claims
from postchat.observability.logging import get_logger, socket_event_context
from postchat.realtime.events import (
    ChatMessage,
    Comment,
    NewPost,
    Notification,
    TypingSignal,
    room_name,
)
from postchat.schemas import post_payload
from postchat.services.posts import AuthorNotFoundError, PostService
from postchat.settings import Settings

log = get_logger(__name__)


def _now() -> str:
    return datetime.now(tz=UTC).isoformat()


def register_chat_handlers(
    sio: socketio.AsyncServer,
    *,
    settings: Settings,
    get_sessionmaker: Callable[[], async_sessionmaker[AsyncSession]],
) -> None:
    jwt_cfg = JwtConfig.from_settings(settings)

    def on(event: str):
        # Registers `handler` for `event`; each call runs with `sid` and the event
        # name bound into structlog contextvars.
        def decorator(handler):
            async def bound(sid: str, *args: Any) -> Any:
                with socket_event_context(sid=sid, event=event):
                    return await handler(sid, *args)

            sio.on(event)(bound)
            return handler

        return decorator

    async def invalid_payload(sid: str, error: Exception) -> None:
        log.info("socket_invalid_payload", error=str(error))
        await sio.emit("error", {"message": "Invalid payload"}, to=sid)

    @on("connect")
    async def connect(sid: str, environ: dict[str, Any], auth: Any = None) -> None:
        token = auth.get("token") if isinstance(auth, dict) else None
        if not token:
            log.info("socket_auth_rejected", reason="missing_token")
            raise SocketConnectionRefused("Authentication error")
        try:
            principal = principal_from_claims(decode_and_validate(cfg=jwt_cfg, token=token))
        except (JwtValidationError, ValueError) as e:
            log.info("socket_auth_rejected", reason=str(e))
            raise SocketConnectionRefused("Authentication error") from e

        user_id = str(principal.user_id)
        await sio.save_session(sid, {"user_id": user_id, "presence_id": user_id})
        log.info("socket_connected", user_id=user_id)

    @on("join")
    async def join(sid: str, user_id: Any) -> None:
        room = room_name(user_id)
        if room is None:
            await invalid_payload(sid, ValueError("room id must be a string or int"))
            return
        # Each user gets a private room named after their id.
        await sio.enter_room(sid, room)
        log.info("socket_joined_room", room=room)

    @on("sendMessage")
    async def send_message(sid: str, data: Any) -> None:
        try:
            msg = ChatMessage.model_validate(data)
        except ValidationError as e:
            await invalid_payload(sid, e)
            return
        await sio.emit(
            "message",
            {"message": msg.message, "sender": msg.sender, "timestamp": _now()},
            to=msg.room,
        )

    async def relay_typing(sid: str, data: Any, *, is_typing: bool) -> None:
        try:
            signal = TypingSignal.model_validate(data)
        except ValidationError as e:
            await invalid_payload(sid, e)
            return
        await sio.emit(
            "userTyping",
            {"user": signal.user, "isTyping": is_typing},
            to=signal.room,
            skip_sid=sid,
        )

    @on("typing")
    async def typing(sid: str, data: Any) -> None:
        await relay_typing(sid, data, is_typing=True)

    @on("stopTyping")
    async def stop_typing(sid: str, data: Any) -> None:
        await relay_typing(sid, data, is_typing=False)

    @on("sendNotification")
    async def send_notification(sid: str, data: Any) -> None:
        try:
            note = Notification.model_validate(data)
        except ValidationError as e:
            await invalid_payload(sid, e)
            return
        await sio.emit("notification", note.notification, to=note.userId)

    @on("newPost")
    async def new_post(sid: str, data: Any) -> None:
        session = await sio.get_session(sid)
        try:
            body = NewPost.model_validate(data)
            async with get_sessionmaker()() as db:
                post = await PostService(session=db).create(
                    author_id=uuid.UUID(session["user_id"]),
                    title=body.title,
                    content=body.content,
                )
                await db.commit()
                payload = post_payload(post)
        except (ValidationError, AuthorNotFoundError, SQLAlchemyError) as e:
            log.warning("socket_new_post_failed", error=str(e))
            await sio.emit("error", {"message": "Failed to create post"}, to=sid)
            return
        await sio.emit("postCreated", payload, skip_sid=sid)

    @on("addComment")
    async def add_comment(sid: str, data: Any) -> None:
        try:
            comment = Comment.model_validate(data)
        except ValidationError as e:
            log.info("socket_invalid_payload", error=str(e))
            await sio.emit("error", {"message": "Failed to add comment"}, to=sid)
            return
        # Comments are relayed, not stored.
        await sio.emit(
            "commentAdded",
            {
                "postId": comment.postId,
                "comment": comment.comment,
                "userId": comment.userId,
                "timestamp": _now(),
            },
            to=comment.postId,
            skip_sid=sid,
        )

    @on("userOnline")
    async def user_online(sid: str, user_id: Any) -> None:
        uid = room_name(user_id)
        if uid is None:
            await invalid_payload(sid, ValueError("user id must be a string or int"))
            return
        session = await sio.get_session(sid)
        session["presence_id"] = uid
        await sio.save_session(sid, session)
        await sio.emit("userStatusChanged", {"userId": uid, "status": "online"}, skip_sid=sid)

    @on("disconnect")
    async def disconnect(sid: str, reason: Any = None) -> None:
        session = await sio.get_session(sid)
        uid = session.get("presence_id")
        if uid:
            await sio.emit("userStatusChanged", {"userId": uid, "status": "offline"}, skip_sid=sid)
        log.info("socket_disconnected", user_id=uid, reason=str(reason) if reason else None)


# --- Module Notes -----------------------------------------------------------
# `userOnline` only changes the id announced in presence events; the
# authenticated id from `connect` still owns posts created via `newPost`.
