import logging

from fastapi import APIRouter, Depends, HTTPException, status

from forum.api.deps import ensure_owner_or_admin, get_answer_or_404, get_current_identity, parse_id, require_content
from forum.api.serializers import comment_to_dict
from forum.models import Comment
from forum.schemas.auth import Identity
from forum.schemas.posts import ContentIn
from forum.schemas.vote import VoteIn, VoteTally
from forum.services import posts
from forum.services.notifications import dispatch_mentions, notify, run_side_effect
from forum.services.votes import VoteTargetNotFound, cast_vote, tally_votes

router = APIRouter(prefix="/comment", tags=["comments"], dependencies=[Depends(get_current_identity)])
logger = logging.getLogger("uvicorn.error")

async def _get_comment(comment_id: str) -> Comment:
    cid = parse_id(comment_id, "Comment")
    c = await Comment.get_or_none(id=cid)
    if not c:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
    return c

@router.post("/answer/{answer_id}", status_code=status.HTTP_201_CREATED)
async def create_comment(answer_id: str, body: ContentIn, identity: Identity = Depends(get_current_identity)):
    """
    Comment on an answer.

    After the comment is saved, every "@username" naming an existing user
    other than the author produces one Mention and one "mention"
    Notification linking to the parent answer, and the answer author gets a
    "comment_posted" notification. These side effects are logged on failure
    and never undo the comment.

    Raises:
        HTTPException (400): Blank content
        HTTPException (404): Answer not found
    """
    answer = await get_answer_or_404(answer_id)
    content = require_content(body)

    c = await Comment.create(answer_id=answer.id, user_id=identity.id, content=content)

    await run_side_effect(
        dispatch_mentions(
            source_type="comment",
            source_id=c.id,
            content=c.content,
            author=identity,
            reference_id=answer.id,
            link=f"/answer/{answer.id}",
        ),
        f"mention dispatch for comment {c.id}",
    )
    if str(answer.author_id) != str(identity.id):
        await run_side_effect(
            notify(
                answer.author_id,
                "comment_posted",
                answer.id,
                f"{identity.username} commented on your answer.",
                f"/answer/{answer.id}",
            ),
            f"comment notification for {c.id}",
        )

    await c.fetch_related("user")
    return {"message": "Comment created", "comment": comment_to_dict(c, VoteTally())}

@router.get("/answer/{answer_id}")
async def list_comments(answer_id: str):
    """
    Comments on an answer, newest first.
    """
    answer = await get_answer_or_404(answer_id)
    rows = await Comment.filter(answer_id=answer.id).order_by("-created_at").prefetch_related("user")
    tallies = await tally_votes("comment", [c.id for c in rows])
    return [comment_to_dict(c, tallies[c.id]) for c in rows]

@router.put("/{comment_id}")
async def update_comment(comment_id: str, body: ContentIn, identity: Identity = Depends(get_current_identity)):
    """
    Replace the content of a comment (author or admin).

    Mentions are only dispatched when a comment is created, not on edit.

    Args:
        comment_id: Comment UUID from the path
        body: {"content": str}

    Returns:
        dict: {"message": "Comment updated", "comment": comment}

    Raises:
        HTTPException (400): Blank content
        HTTPException (403): Caller is neither the author nor an admin
        HTTPException (404): Comment not found
    """
    c = await _get_comment(comment_id)
    ensure_owner_or_admin(c.user_id, identity, "comment")
    c.content = require_content(body)
    await c.save()
    await c.fetch_related("user")
    tally = (await tally_votes("comment", [c.id]))[c.id]
    return {"message": "Comment updated", "comment": comment_to_dict(c, tally)}

@router.delete("/{comment_id}")
async def delete_comment(comment_id: str, identity: Identity = Depends(get_current_identity)):
    """
    Delete a comment (author or admin) together with its votes.

    Args:
        comment_id: Comment UUID from the path

    Returns:
        dict: {"message": "Comment deleted successfully"}

    Raises:
        HTTPException (403): Caller is neither the author nor an admin
        HTTPException (404): Comment not found
    """
    c = await _get_comment(comment_id)
    ensure_owner_or_admin(c.user_id, identity, "comment")
    await posts.delete_comment(c)
    logger.info("[comments] %s deleted by %s", c.id, identity.username)
    return {"message": "Comment deleted successfully"}

@router.post("/{comment_id}/vote")
async def vote_comment(comment_id: str, body: VoteIn, identity: Identity = Depends(get_current_identity)):
    """
    Vote "up"/"down" on a comment; any other type retracts the caller's vote.

    Returns:
        dict: {"message", "votes": net score, "up", "down"}

    Raises:
        HTTPException (400): Missing vote type
        HTTPException (404): Comment not found
    """
    cid = parse_id(comment_id, "Comment")
    try:
        tally = await cast_vote("comment", cid, identity.id, body.type)
    except VoteTargetNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return {"message": "Vote updated", "votes": tally.net, "up": tally.up, "down": tally.down}
