"""
tests.test_posts

Post endpoints: public reads, authenticated create, author-only edits.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta

import httpx
import pytest
from conftest import FakeSocketServer, bearer, register


async def _create(client: httpx.AsyncClient, token: str, **fields) -> dict:
    body = {"title": "Hello", "content": "First post"} | fields
    r = await client.post("/api/posts", json=body, headers=bearer(token))
    assert r.status_code == 201, r.text
    return r.json()


@pytest.mark.asyncio
async def test_create_requires_auth(client: httpx.AsyncClient) -> None:
    r = await client.post("/api/posts", json={"title": "t", "content": "c"})
    assert r.status_code == 401
    assert r.json() == {"error": "No token, authorization denied"}


@pytest.mark.asyncio
async def test_create_list_and_get_populate_author(client: httpx.AsyncClient) -> None:
    ada = await register(client)
    post = await _create(client, ada["token"])

    assert post["title"] == "Hello"
    assert post["content"] == "First post"
    assert post["author"] == ada["user"]
    created = datetime.fromisoformat(post["created_at"])
    assert created.utcoffset() == timedelta(0)
    assert datetime.fromisoformat(post["updated_at"]).utcoffset() == timedelta(0)

    r = await client.get("/api/posts")
    assert r.status_code == 200
    assert [p["id"] for p in r.json()] == [post["id"]]
    assert r.json()[0]["author"] == ada["user"]

    r = await client.get(f"/api/posts/{post['id']}")
    assert r.status_code == 200
    assert r.json() == post


@pytest.mark.asyncio
async def test_list_includes_posts_from_all_authors(client: httpx.AsyncClient) -> None:
    ada = await register(client)
    bob = await register(client, name="Bob", email="bob@example.com")
    a = await _create(client, ada["token"], title="From Ada")
    b = await _create(client, bob["token"], title="From Bob")

    r = await client.get("/api/posts")
    by_id = {p["id"]: p for p in r.json()}
    assert set(by_id) == {a["id"], b["id"]}
    assert by_id[b["id"]]["author"]["name"] == "Bob"


@pytest.mark.asyncio
async def test_get_unknown_and_malformed_ids(client: httpx.AsyncClient) -> None:
    r = await client.get(f"/api/posts/{uuid.uuid4()}")
    assert r.status_code == 404
    assert r.json() == {"error": "Post not found"}

    r = await client.get("/api/posts/not-an-id")
    assert r.status_code == 404
    assert r.json() == {"error": "Resource not found"}


@pytest.mark.asyncio
async def test_create_validation(client: httpx.AsyncClient) -> None:
    ada = await register(client)
    r = await client.post("/api/posts", json={"title": ""}, headers=bearer(ada["token"]))
    assert r.status_code == 400
    assert {e["path"] for e in r.json()["errors"]} == {"title", "content"}


@pytest.mark.asyncio
async def test_create_broadcasts_post_created(app, client: httpx.AsyncClient) -> None:
    fake = FakeSocketServer()
    app.state.sio = fake
    ada = await register(client)

    post = await _create(client, ada["token"])

    [emitted] = fake.events("postCreated")
    assert emitted.data == post
    assert emitted.to is None


@pytest.mark.asyncio
async def test_update_by_author(client: httpx.AsyncClient) -> None:
    ada = await register(client)
    post = await _create(client, ada["token"])

    r = await client.put(
        f"/api/posts/{post['id']}", json={"content": "Edited"}, headers=bearer(ada["token"])
    )
    assert r.status_code == 200
    assert r.json()["title"] == "Hello"
    assert r.json()["content"] == "Edited"
    assert r.json()["updated_at"] >= post["updated_at"]


@pytest.mark.asyncio
async def test_update_and_delete_forbidden_for_other_users(client: httpx.AsyncClient) -> None:
    ada = await register(client)
    bob = await register(client, name="Bob", email="bob@example.com")
    post = await _create(client, ada["token"])

    r = await client.put(
        f"/api/posts/{post['id']}", json={"title": "Mine now"}, headers=bearer(bob["token"])
    )
    assert r.status_code == 403
    assert r.json() == {"error": "Not authorized to modify this post"}

    r = await client.delete(f"/api/posts/{post['id']}", headers=bearer(bob["token"]))
    assert r.status_code == 403

    r = await client.get(f"/api/posts/{post['id']}")
    assert r.json()["title"] == "Hello"


@pytest.mark.asyncio
async def test_delete_by_author(client: httpx.AsyncClient) -> None:
    ada = await register(client)
    post = await _create(client, ada["token"])

    r = await client.delete(f"/api/posts/{post['id']}", headers=bearer(ada["token"]))
    assert r.status_code == 200
    assert r.json() == {"message": "Post removed"}

    r = await client.get(f"/api/posts/{post['id']}")
    assert r.status_code == 404
