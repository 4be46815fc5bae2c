"""
postchat.db.repositories.posts

Repository for `Post` entities.

Responsibilities:
- Create, fetch, update and delete posts.
- Always load the author alongside the post (the API never returns a bare author id).
"""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from postchat.db.models import Post, User, utcnow


class PostRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, author: User, title: str, content: str) -> Post:
        post = Post(author=author, title=title, content=content)
        self._session.add(post)
        await self._session.flush()
        return post

    async def get(self, post_id: uuid.UUID) -> Post | None:
        stmt = select(Post).options(selectinload(Post.author)).where(Post.id == post_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_all(self) -> list[Post]:
        stmt = select(Post).options(selectinload(Post.author)).order_by(Post.created_at)
        return list((await self._session.execute(stmt)).scalars().all())

    async def update(
        self,
        post: Post,
        *,
        title: str | None = None,
        content: str | None = None,
    ) -> Post:
        if title is not None:
            post.title = title
        if content is not None:
            post.content = content
        post.updated_at = utcnow()
        await self._session.flush()
        return post

    async def delete(self, post: Post) -> None:
        await self._session.delete(post)
        await self._session.flush()
