# tests/test_todos_api.py
import time
from uuid import uuid4

import pytest
from httpx import AsyncClient

from conftest import register_and_login

pytestmark = pytest.mark.asyncio


async def _create(client: AsyncClient, token: str, text: str):
    r = await client.post("/todos", json={"text": text}, headers={"x-auth": token})
    assert r.status_code == 200, r.text
    return r.json()


async def test_todos_require_auth(client: AsyncClient):
    fake_id = uuid4().hex
    for method, url in [
        ("GET", "/todos"),
        ("POST", "/todos"),
        ("GET", f"/todos/{fake_id}"),
        ("PATCH", f"/todos/{fake_id}"),
        ("DELETE", f"/todos/{fake_id}"),
    ]:
        r = await client.request(method, url, json={"text": "x"})
        assert r.status_code == 401, (method, url)
        assert r.json() == {}


async def test_create_todo(client: AsyncClient):
    user, token = await register_and_login(client, "todo@example.com")
    todo = await _create(client, token, "  Test todo text  ")
    assert todo["text"] == "Test todo text"
    assert todo["completed"] is False
    assert todo["completedAt"] is None
    assert "completed_at" not in todo
    assert todo["creator"] == user["id"]


@pytest.mark.parametrize("payload", [{}, {"text": ""}, {"text": "   "}])
async def test_create_todo_invalid(client: AsyncClient, payload):
    _, token = await register_and_login(client, "bad-todo@example.com")
    r = await client.post("/todos", json=payload, headers={"x-auth": token})
    assert r.status_code == 400
    data = r.json()
    assert data["detail"] == "Todo validation failed"
    assert data["errors"][0]["field"] == "text"

    r = await client.get("/todos", headers={"x-auth": token})
    assert r.json() == {"todos": []}


async def test_list_only_own_todos(client: AsyncClient):
    _, a = await register_and_login(client, "owner-a@example.com")
    _, b = await register_and_login(client, "owner-b@example.com")
    await _create(client, a, "first")
    await _create(client, a, "second")
    await _create(client, b, "not mine")

    r = await client.get("/todos", headers={"x-auth": a})
    assert r.status_code == 200
    texts = sorted(t["text"] for t in r.json()["todos"])
    assert texts == ["first", "second"]


async def test_get_todo(client: AsyncClient):
    _, token = await register_and_login(client, "get@example.com")
    todo = await _create(client, token, "read me")

    r = await client.get(f"/todos/{todo['id']}", headers={"x-auth": token})
    assert r.status_code == 200
    assert r.json()["todo"]["text"] == "read me"


@pytest.mark.parametrize("todo_id", ["123", "abc123", uuid4().hex, "Z" * 32])
async def test_get_todo_not_found(client: AsyncClient, todo_id):
    _, token = await register_and_login(client, "missing@example.com")
    r = await client.get(f"/todos/{todo_id}", headers={"x-auth": token})
    assert r.status_code == 404


async def test_other_users_todo_is_not_visible(client: AsyncClient):
    _, a = await register_and_login(client, "vis-a@example.com")
    _, b = await register_and_login(client, "vis-b@example.com")
    todo = await _create(client, a, "private")

    assert (await client.get(f"/todos/{todo['id']}", headers={"x-auth": b})).status_code == 404
    assert (await client.patch(f"/todos/{todo['id']}", json={"completed": True}, headers={"x-auth": b})).status_code == 404
    assert (await client.delete(f"/todos/{todo['id']}", headers={"x-auth": b})).status_code == 404
    # 還在
    assert (await client.get(f"/todos/{todo['id']}", headers={"x-auth": a})).status_code == 200


async def test_delete_todo(client: AsyncClient):
    _, token = await register_and_login(client, "del@example.com")
    todo = await _create(client, token, "delete me")

    r = await client.delete(f"/todos/{todo['id']}", headers={"x-auth": token})
    assert r.status_code == 200
    assert r.json()["todo"]["id"] == todo["id"]

    r = await client.get(f"/todos/{todo['id']}", headers={"x-auth": token})
    assert r.status_code == 404
    r = await client.delete(f"/todos/{todo['id']}", headers={"x-auth": token})
    assert r.status_code == 404


async def test_patch_complete_sets_timestamp(client: AsyncClient):
    _, token = await register_and_login(client, "patch@example.com")
    todo = await _create(client, token, "first test todo")

    before = int(time.time() * 1000)
    r = await client.patch(
        f"/todos/{todo['id']}",
        json={"completed": True, "text": "updated first test todo"},
        headers={"x-auth": token},
    )
    assert r.status_code == 200, r.text
    updated = r.json()["todo"]
    assert updated["text"] == "updated first test todo"
    assert updated["completed"] is True
    assert isinstance(updated["completedAt"], int)
    assert updated["completedAt"] >= before


async def test_patch_incomplete_clears_timestamp(client: AsyncClient):
    _, token = await register_and_login(client, "clear@example.com")
    todo = await _create(client, token, "second test todo")
    await client.patch(f"/todos/{todo['id']}", json={"completed": True}, headers={"x-auth": token})

    r = await client.patch(
        f"/todos/{todo['id']}",
        json={"completed": False, "text": "updated second test todo"},
        headers={"x-auth": token},
    )
    assert r.status_code == 200
    updated = r.json()["todo"]
    assert updated["text"] == "updated second test todo"
    assert updated["completed"] is False
    assert updated["completedAt"] is None


async def test_patch_completed_must_be_boolean(client: AsyncClient):
    _, token = await register_and_login(client, "strict@example.com")
    todo = await _create(client, token, "not done yet")
    for value in ("true", 1):
        r = await client.patch(f"/todos/{todo['id']}", json={"completed": value}, headers={"x-auth": token})
        assert r.status_code == 422

    r = await client.get(f"/todos/{todo['id']}", headers={"x-auth": token})
    current = r.json()["todo"]
    assert current["completed"] is False
    assert current["completedAt"] is None


async def test_patch_ignores_unknown_fields(client: AsyncClient):
    user, token = await register_and_login(client, "pick@example.com")
    todo = await _create(client, token, "keep creator")
    r = await client.patch(
        f"/todos/{todo['id']}",
        json={"creator": uuid4().hex, "id": uuid4().hex},
        headers={"x-auth": token},
    )
    assert r.status_code == 200
    updated = r.json()["todo"]
    assert updated["id"] == todo["id"]
    assert updated["creator"] == user["id"]
    assert updated["text"] == "keep creator"


async def test_patch_blank_text_rejected(client: AsyncClient):
    _, token = await register_and_login(client, "blank@example.com")
    todo = await _create(client, token, "unchanged")
    r = await client.patch(f"/todos/{todo['id']}", json={"text": "  "}, headers={"x-auth": token})
    assert r.status_code == 400
    r = await client.get(f"/todos/{todo['id']}", headers={"x-auth": token})
    assert r.json()["todo"]["text"] == "unchanged"


async def test_patch_invalid_id(client: AsyncClient):
    _, token = await register_and_login(client, "badid@example.com")
    r = await client.patch("/todos/abc123", json={"completed": False, "text": "test fail"}, headers={"x-auth": token})
    assert r.status_code == 404
