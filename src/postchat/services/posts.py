"""
postchat.services.posts

Post lifecycle service.

Responsibilities:
- Create posts on behalf of an existing author.
- Enforce author-only update/delete.

Callers own the transaction: the service flushes, the caller commits.
"""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from postchat.db.models import Post
from postchat.db.repositories.posts import PostRepo
from postchat.db.repositories.users import UserRepo
from postchat.observability.logging import get_logger

log = get_logger(__name__)


class AuthorNotFoundError(LookupError):
    pass


class PostPermissionError(PermissionError):
    pass


class PostService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._users = UserRepo(session)
        self._posts = PostRepo(session)

    async def create(self, *, author_id: uuid.UUID, title: str, content: str) -> Post:
        author = await self._users.get(author_id)
        if author is None:
            # Token outlived its user.
            raise AuthorNotFoundError(str(author_id))
        post = await self._posts.create(author=author, title=title, content=content)
        log.info("post_created", post_id=str(post.id), author_id=str(author_id))
        return post

    async def update(
        self,
        *,
        post: Post,
        actor_id: uuid.UUID,
        title: str | None = None,
        content: str | None = None,
    ) -> Post:
        self._check_owner(post, actor_id)
        post = await self._posts.update(post, title=title, content=content)
        log.info("post_updated", post_id=str(post.id))
        return post

    async def delete(self, *, post: Post, actor_id: uuid.UUID) -> None:
        self._check_owner(post, actor_id)
        await self._posts.delete(post)
        log.info("post_deleted", post_id=str(post.id))

    @staticmethod
    def _check_owner(post: Post, actor_id: uuid.UUID) -> None:
        if post.author_id != actor_id:
            raise PostPermissionError(str(post.id))
