import pytest

from forum.models import Notification, Question, Tag
from forum.services.notifications import notify


pytestmark = pytest.mark.asyncio


async def test_inbox_and_mark_read(client, create_user, session_for):
    alice, _ = await create_user("alice")
    bob, _ = await create_user("bob")
    q = await Question.create(user=alice, title="t", description="d")
    first = await notify(alice.id, "answer_posted", q.id, "bob answered", f"/question/{q.id}")
    await notify(alice.id, "mention", q.id, "bob mentioned you", f"/question/{q.id}")
    await notify(bob.id, "mention", q.id, "for bob")

    inbox = await client.get("/api/notifications", headers=session_for(alice))
    assert inbox.status_code == 200
    body = inbox.json()
    assert body["unreadCount"] == 2
    assert {n["message"] for n in body["items"]} == {"bob answered", "bob mentioned you"}

    # Bob cannot mark Alice's notification
    resp = await client.patch(f"/api/notifications/{first.id}/read", headers=session_for(bob))
    assert resp.status_code == 404

    resp = await client.patch(f"/api/notifications/{first.id}/read", headers=session_for(alice))
    assert resp.status_code == 200
    assert resp.json()["notification"]["isRead"] is True

    resp = await client.patch("/api/notifications/mark-all-read", headers=session_for(alice))
    assert resp.status_code == 200
    assert resp.json()["updated"] == 1

    inbox = await client.get("/api/notifications", headers=session_for(alice))
    assert inbox.json()["unreadCount"] == 0
    assert await Notification.filter(recipient_user_id=bob.id, is_read=False).count() == 1


async def test_mention_in_question_reaches_inbox(client, create_user, session_for):
    alice, _ = await create_user("alice")
    carol, _ = await create_user("carol")

    resp = await client.post(
        "/api/question",
        headers=session_for(alice),
        json={"title": "Help", "description": "@carol any idea?", "tagNames": []},
    )
    qid = resp.json()["question"]["id"]

    inbox = await client.get("/api/notifications", headers=session_for(carol))
    items = inbox.json()["items"]
    assert len(items) == 1
    assert items[0]["type"] == "mention"
    assert items[0]["link"] == f"/question/{qid}"


async def test_admin_can_describe_tags(client, create_user, create_admin, session_for):
    user, _ = await create_user()
    admin, _ = await create_admin()
    tag = await Tag.create(name="python")

    resp = await client.patch(f"/api/tags/{tag.id}", headers=session_for(user), json={"color": "#3776ab"})
    assert resp.status_code == 403

    resp = await client.patch(
        f"/api/tags/{tag.id}",
        headers=session_for(admin),
        json={"description": "The language", "color": "#3776ab"},
    )
    assert resp.status_code == 200
    assert resp.json()["tag"]["color"] == "#3776ab"
    assert resp.json()["tag"]["description"] == "The language"
