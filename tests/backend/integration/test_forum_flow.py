import pytest


pytestmark = pytest.mark.asyncio


def cookie(token: str) -> dict[str, str]:
    return {"Cookie": f"token={token}"}


async def test_register_login_ask_and_vote(client):
    reg = await client.post(
        "/api/auth/register",
        json={"username": "alice", "email": "alice@example.com", "password": "StrongPass!23"},
    )
    assert reg.status_code == 201
    client.cookies.clear()

    login = await client.post("/api/auth/login", json={"email": "alice@example.com", "password": "StrongPass!23"})
    assert login.status_code == 200
    token = login.cookies["token"]
    client.cookies.clear()
    headers = cookie(token)

    created = await client.post(
        "/api/question",
        headers=headers,
        json={"title": "Why?", "description": "Because.", "tagNames": ["meta"]},
    )
    assert created.status_code == 201
    qid = created.json()["question"]["id"]

    up = await client.post(f"/api/question/{qid}/vote", headers=headers, json={"type": "up"})
    assert up.json()["votes"] == 1
    detail = await client.get(f"/api/question/{qid}", headers=headers)
    assert detail.json()["question"]["votes"]["net"] == 1

    down = await client.post(f"/api/question/{qid}/vote", headers=headers, json={"type": "down"})
    assert down.json()["votes"] == -1
    detail = await client.get(f"/api/question/{qid}", headers=headers)
    assert detail.json()["question"]["votes"]["net"] == -1
