"""
postchat.api.routers.posts

Post endpoints.

Responsibilities:
- Public reads (list, single post) with the author populated.
- Authenticated create; author-only update/delete.
- Push `postCreated` to realtime clients when a post is created over HTTP.
"""

from __future__ import annotations

import socketio
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import (
    HTTP_201_CREATED,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
)

from postchat.api.deps import db_session, socket_server
from postchat.api.errors import parse_resource_id
from postchat.auth.deps import get_principal
from postchat.auth.models import Principal
from postchat.db.models import Post
from postchat.db.repositories.posts import PostRepo
from postchat.schemas import PostPublic, post_payload
from postchat.services.posts import AuthorNotFoundError, PostPermissionError, PostService

router = APIRouter(prefix="/api/posts", tags=["posts"])


class PostCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)


class PostUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = Field(default=None, min_length=1)


async def _load_post(session: AsyncSession, raw_id: str) -> Post:
    post = await PostRepo(session).get(parse_resource_id(raw_id))
    if post is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Post not found")
    return post


@router.get("", response_model=list[PostPublic])
async def list_posts(session: AsyncSession = Depends(db_session)) -> list[Post]:
    return await PostRepo(session).list_all()


@router.post("", response_model=PostPublic, status_code=HTTP_201_CREATED)
async def create_post(
    body: PostCreateRequest,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
    sio: socketio.AsyncServer = Depends(socket_server),
) -> Post:
    try:
        post = await PostService(session=session).create(
            author_id=principal.user_id, title=body.title, content=body.content
        )
    except AuthorNotFoundError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Token is not valid") from e
    await session.commit()

    await sio.emit("postCreated", post_payload(post))
    return post


@router.get("/{post_id}", response_model=PostPublic)
async def get_post(post_id: str, session: AsyncSession = Depends(db_session)) -> Post:
    return await _load_post(session, post_id)


@router.put("/{post_id}", response_model=PostPublic)
async def update_post(
    post_id: str,
    body: PostUpdateRequest,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> Post:
    post = await _load_post(session, post_id)
    try:
        post = await PostService(session=session).update(
            post=post, actor_id=principal.user_id, title=body.title, content=body.content
        )
    except PostPermissionError as e:
        raise HTTPException(
            status_code=HTTP_403_FORBIDDEN, detail="Not authorized to modify this post"
        ) from e
    await session.commit()
    return post


@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> dict[str, str]:
    post = await _load_post(session, post_id)
    try:
        await PostService(session=session).delete(post=post, actor_id=principal.user_id)
    except PostPermissionError as e:
        raise HTTPException(
            status_code=HTTP_403_FORBIDDEN, detail="Not authorized to modify this post"
        ) from e
    await session.commit()
    return {"message": "Post removed"}
