"""Integration tests for chats and messages."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from tests.factories import UserFactory
from tests.helpers import auth_headers

pytestmark = pytest.mark.integration


async def _create_chat(client: AsyncClient, headers, title: str = "Pricing research") -> str:
    response = await client.post("/api/v1/chats", json={"title": title}, headers=headers)
    assert response.status_code == 201
    return response.json()["id"]


async def test_new_chat_is_empty(client: AsyncClient, user_headers):
    response = await client.post("/api/v1/chats", json={"title": "Pricing"}, headers=user_headers)

    data = response.json()
    assert data["message_count"] == 0
    assert data["last_message"] is None


async def test_add_message_updates_counters(client: AsyncClient, user_headers):
    chat_id = await _create_chat(client, user_headers)

    for content in ("Who are Globex's competitors?", "Initech and Umbrella."):
        response = await client.post(
            "/api/v1/messages",
            json={"chat_id": chat_id, "content": content},
            headers=user_headers,
        )
        assert response.status_code == 201

    chat = (await client.get(f"/api/v1/chats/{chat_id}", headers=user_headers)).json()
    assert chat["message_count"] == 2
    assert chat["last_message"] == "Initech and Umbrella."
    assert [m["content"] for m in chat["messages"]] == [
        "Who are Globex's competitors?",
        "Initech and Umbrella.",
    ]


async def test_listing_is_scoped_to_owner(
    client: AsyncClient, db_session: AsyncSession, user_headers
):
    other = UserFactory.build()
    db_session.add(other)
    await db_session.commit()
    await _create_chat(client, auth_headers(other), title="Not mine")
    await _create_chat(client, user_headers, title="Mine")

    data = (await client.get("/api/v1/chats", headers=user_headers)).json()

    assert data["total"] == 1
    assert [c["title"] for c in data["items"]] == ["Mine"]


async def test_other_users_chat_is_forbidden(
    client: AsyncClient, db_session: AsyncSession, user_headers
):
    other = UserFactory.build()
    db_session.add(other)
    await db_session.commit()
    chat_id = await _create_chat(client, auth_headers(other))

    read = await client.get(f"/api/v1/chats/{chat_id}", headers=user_headers)
    write = await client.post(
        "/api/v1/messages", json={"chat_id": chat_id, "content": "hi"}, headers=user_headers
    )

    assert read.status_code == 403
    assert write.status_code == 403


async def test_admin_can_read_any_chat(client: AsyncClient, user_headers, admin_headers):
    chat_id = await _create_chat(client, user_headers)

    response = await client.get(f"/api/v1/chats/{chat_id}", headers=admin_headers)
    assert response.status_code == 200


async def test_delete_chat_removes_messages(client: AsyncClient, user_headers):
    chat_id = await _create_chat(client, user_headers)
    await client.post(
        "/api/v1/messages", json={"chat_id": chat_id, "content": "hello"}, headers=user_headers
    )

    deleted = await client.delete(f"/api/v1/chats/{chat_id}", headers=user_headers)
    assert deleted.status_code == 204

    missing = await client.get(f"/api/v1/chats/{chat_id}", headers=user_headers)
    assert missing.status_code == 404
