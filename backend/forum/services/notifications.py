"""
Mention and notification dispatch.

Runs after the content it belongs to has been saved. Nothing here is
transactional with that save: callers wrap dispatch in `run_side_effect`,
which logs failures instead of propagating them.
"""
import logging
import uuid
from collections.abc import Awaitable

from forum.models import Mention, Notification, User
from forum.models.mention import MENTION_SOURCE_TYPES
from forum.models.notification import NOTIFICATION_TYPES
from forum.schemas.auth import Identity
from forum.services.mentions import extract_mentions

logger = logging.getLogger("uvicorn.error")

SOURCE_LABELS = {
    "question": "a question",
    "answer": "an answer",
    "comment": "a comment",
}


async def notify(
    recipient_id: uuid.UUID,
    type: str,
    reference_id: uuid.UUID,
    message: str,
    link: str | None = None,
) -> Notification:
    if type not in NOTIFICATION_TYPES:
        raise ValueError(f"unknown notification type: {type!r}")
    return await Notification.create(
        recipient_user_id=recipient_id,
        type=type,
        reference_id=reference_id,
        message=message,
        link=link,
    )


async def dispatch_mentions(
    *,
    source_type: str,
    source_id: uuid.UUID,
    content: str,
    author: Identity,
    reference_id: uuid.UUID,
    link: str,
) -> list[Mention]:
    """
    Record a Mention and send a "mention" Notification for every "@username"
    in `content` that names an existing user other than the author.

    Unknown usernames are ignored. A user mentioned several times gets one
    Mention/Notification per occurrence.

    Args:
        source_type: "question", "answer" or "comment"
        source_id: Id of the content the mentions were found in
        content: Text to scan
        author: Identity of the content's author
        reference_id: Id the notification points at (the parent answer for comments)
        link: Client route the notification links to

    Returns:
        list[Mention]: Mentions created, in order of appearance
    """
    if source_type not in MENTION_SOURCE_TYPES:
        raise ValueError(f"unknown mention source type: {source_type!r}")
    candidates = extract_mentions(content)
    if not candidates:
        return []

    users = await User.filter(username__in=list(set(candidates)))
    by_username = {u.username: u for u in users}
    message = f"{author.username} mentioned you in {SOURCE_LABELS.get(source_type, 'a post')}."

    created: list[Mention] = []
    for username in candidates:
        user = by_username.get(username)
        if user is None or user.id == author.id:
            continue
        mention = await Mention.create(
            source_type=source_type,
            source_id=source_id,
            mentioned_user_id=user.id,
            by_user_id=author.id,
        )
        await notify(user.id, "mention", reference_id, message, link)
        created.append(mention)

    if created:
        logger.info("[mentions] %s %s -> %d mention(s)", source_type, source_id, len(created))
    return created


async def run_side_effect(awaitable: Awaitable, what: str) -> None:
    """
    Await a post-write side effect; log and swallow its failure so the
    request that triggered it still succeeds.
    """
    try:
        await awaitable
    except Exception:
        logger.exception("[notifications] %s failed", what)
