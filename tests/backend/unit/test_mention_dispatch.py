import pytest

from forum.models import Answer, Comment, Mention, Notification, Question
from forum.schemas.auth import Identity
from forum.services.notifications import dispatch_mentions, notify, run_side_effect


pytestmark = pytest.mark.asyncio


def _identity(user) -> Identity:
    return Identity(id=user.id, username=user.username, email=user.email, role=user.role)


async def _comment(author, content):
    q = await Question.create(user=author, title="T", description="D")
    a = await Answer.create(question=q, author=author, content="A")
    c = await Comment.create(answer=a, user=author, content=content)
    return a, c


async def _dispatch(author, answer, comment):
    return await dispatch_mentions(
        source_type="comment",
        source_id=comment.id,
        content=comment.content,
        author=_identity(author),
        reference_id=answer.id,
        link=f"/answer/{answer.id}",
    )


async def test_existing_user_gets_one_mention_and_notification(db, create_user):
    author, _ = await create_user("alice")
    carol, _ = await create_user("carol")
    answer, comment = await _comment(author, "@carol nice!")

    created = await _dispatch(author, answer, comment)

    assert len(created) == 1
    mention = await Mention.get(mentioned_user_id=carol.id)
    assert mention.source_type == "comment"
    assert mention.source_id == comment.id
    assert str(mention.by_user_id) == str(author.id)

    notes = await Notification.filter(recipient_user_id=carol.id)
    assert len(notes) == 1
    assert notes[0].type == "mention"
    assert notes[0].reference_id == answer.id
    assert notes[0].link == f"/answer/{answer.id}"
    assert "alice" in notes[0].message
    assert notes[0].is_read is False


async def test_unknown_user_is_ignored(db, create_user):
    author, _ = await create_user("alice")
    answer, comment = await _comment(author, "@carol nice!")

    assert await _dispatch(author, answer, comment) == []
    assert await Mention.all().count() == 0
    assert await Notification.all().count() == 0


async def test_author_mentioning_themselves_is_skipped(db, create_user):
    author, _ = await create_user("alice")
    answer, comment = await _comment(author, "note to self @alice")

    assert await _dispatch(author, answer, comment) == []
    assert await Notification.all().count() == 0


async def test_match_is_case_sensitive(db, create_user):
    author, _ = await create_user("alice")
    await create_user("carol")
    answer, comment = await _comment(author, "@Carol hi")

    assert await _dispatch(author, answer, comment) == []


async def test_each_occurrence_is_recorded(db, create_user):
    author, _ = await create_user("alice")
    bob, _ = await create_user("bob")
    dave, _ = await create_user("dave")
    answer, comment = await _comment(author, "@bob @dave @ghost @bob")

    created = await _dispatch(author, answer, comment)

    assert [m.mentioned_user_id for m in created] == [bob.id, dave.id, bob.id]
    assert await Notification.filter(recipient_user_id=bob.id).count() == 2


async def test_run_side_effect_swallows_and_logs_failures(caplog):
    async def boom():
        raise RuntimeError("store down")

    await run_side_effect(boom(), "mention dispatch for comment x")
    assert "mention dispatch for comment x failed" in caplog.text


async def test_unknown_types_are_rejected(db, create_user):
    author, _ = await create_user("alice")
    with pytest.raises(ValueError):
        await notify(author.id, "poke", author.id, "hi")
    with pytest.raises(ValueError):
        await dispatch_mentions(
            source_type="profile",
            source_id=author.id,
            content="@bob",
            author=_identity(author),
            reference_id=author.id,
            link="/",
        )
