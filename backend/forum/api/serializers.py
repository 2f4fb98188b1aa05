# forum/api/serializers.py
"""
Response shaping shared by the routers.
Authors are always rendered as {id, username, reputation}; vote state as
{up, down, net}.
"""
import datetime as dt

from forum.models import Answer, Comment, Notification, Question, Tag, User
from forum.schemas.vote import VoteTally

def iso(ts: dt.datetime | None) -> str | None:
    return ts.isoformat() if ts else None

def author_to_dict(user: User | None) -> dict:
    if user is None:
        return {"id": None, "username": "Unknown", "reputation": 0}
    return {"id": str(user.id), "username": user.username, "reputation": user.reputation}

def user_to_dict(user: User) -> dict:
    return {
        "id": str(user.id),
        "username": user.username,
        "email": user.email,
        "role": user.role,
        "reputation": user.reputation,
        "createdAt": iso(user.created_at),
    }

def tag_to_dict(tag: Tag, question_count: int | None = None) -> dict:
    data = {"id": str(tag.id), "name": tag.name, "description": tag.description, "color": tag.color}
    if question_count is not None:
        data["questionCount"] = question_count
    return data

def question_to_dict(q: Question, tally: VoteTally, answer_count: int = 0) -> dict:
    """
    Requires `tags` and `user` to be fetched (prefetch_related / fetch_related).
    """
    return {
        "id": str(q.id),
        "title": q.title,
        "description": q.description,
        "tags": [t.name for t in q.tags],
        "author": author_to_dict(q.user),
        "votes": tally.as_dict(),
        "answerCount": answer_count,
        "createdAt": iso(q.created_at),
        "updatedAt": iso(q.updated_at),
    }

def answer_to_dict(a: Answer, tally: VoteTally, comments: list[dict] | None = None) -> dict:
    """
    Requires `author` to be fetched.
    """
    data = {
        "id": str(a.id),
        "questionId": str(a.question_id),
        "content": a.content,
        "author": author_to_dict(a.author),
        "votes": tally.as_dict(),
        "isPinned": a.is_pinned,
        "isAccepted": a.is_accepted,
        "createdAt": iso(a.created_at),
        "updatedAt": iso(a.updated_at),
    }
    if comments is not None:
        data["comments"] = comments
    return data

def comment_to_dict(c: Comment, tally: VoteTally) -> dict:
    """
    Requires `user` to be fetched.
    """
    return {
        "id": str(c.id),
        "answerId": str(c.answer_id),
        "content": c.content,
        "author": author_to_dict(c.user),
        "votes": tally.as_dict(),
        "createdAt": iso(c.created_at),
        "updatedAt": iso(c.updated_at),
    }

def notification_to_dict(n: Notification) -> dict:
    return {
        "id": str(n.id),
        "type": n.type,
        "referenceId": str(n.reference_id),
        "message": n.message,
        "link": n.link,
        "isRead": n.is_read,
        "createdAt": iso(n.created_at),
    }
