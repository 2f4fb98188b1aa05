import logging

from fastapi import APIRouter, Depends, HTTPException, status

from forum.api.deps import ensure_owner_or_admin, get_answer_or_404, get_current_identity, parse_id, require_content
from forum.api.serializers import answer_to_dict
from forum.models import Answer, Question
from forum.schemas.auth import Identity
from forum.schemas.posts import ContentIn
from forum.schemas.vote import VoteIn, VoteTally
from forum.services import posts
from forum.services.notifications import dispatch_mentions, notify, run_side_effect
from forum.services.votes import VoteTargetNotFound, cast_vote, tally_votes

router = APIRouter(prefix="/answer", tags=["answers"], dependencies=[Depends(get_current_identity)])
logger = logging.getLogger("uvicorn.error")

@router.get("/my")
async def list_my_answers(identity: Identity = Depends(get_current_identity)):
    """
    Answers written by the caller, newest first, each with the title of the
    question it answers.
    """
    rows = await Answer.filter(author_id=identity.id).order_by("-created_at").prefetch_related("author", "question")
    tallies = await tally_votes("answer", [a.id for a in rows])
    items = []
    for a in rows:
        data = answer_to_dict(a, tallies[a.id])
        data["question"] = {"id": str(a.question.id), "title": a.question.title}
        items.append(data)
    return items

@router.post("/question/{question_id}", status_code=status.HTTP_201_CREATED)
async def create_answer(question_id: str, body: ContentIn, identity: Identity = Depends(get_current_identity)):
    """
    Answer a question.

    The question owner gets an "answer_posted" notification (unless they
    answered themselves) and "@username" mentions in the content are
    dispatched. Neither side effect can fail the request.

    Raises:
        HTTPException (400): Blank content
        HTTPException (404): Question not found
    """
    qid = parse_id(question_id, "Question")
    question = await Question.get_or_none(id=qid)
    if not question:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")
    content = require_content(body)

    a = await Answer.create(question_id=question.id, author_id=identity.id, content=content)

    if str(question.user_id) != str(identity.id):
        await run_side_effect(
            notify(
                question.user_id,
                "answer_posted",
                a.id,
                f'{identity.username} answered your question "{question.title}".',
                f"/question/{question.id}",
            ),
            f"answer notification for {a.id}",
        )
    await run_side_effect(
        dispatch_mentions(
            source_type="answer",
            source_id=a.id,
            content=a.content,
            author=identity,
            reference_id=a.id,
            link=f"/answer/{a.id}",
        ),
        f"mention dispatch for answer {a.id}",
    )

    await a.fetch_related("author")
    return {"message": "Answer created", "answer": answer_to_dict(a, VoteTally())}

@router.put("/{answer_id}")
async def update_answer(answer_id: str, body: ContentIn, identity: Identity = Depends(get_current_identity)):
    """
    Replace the content of an answer (author or admin).

    Args:
        answer_id: Answer UUID from the path
        body: {"content": str}

    Returns:
        dict: {"message": "Answer updated", "answer": answer}

    Raises:
        HTTPException (400): Blank content
        HTTPException (403): Caller is neither the author nor an admin
        HTTPException (404): Answer not found
    """
    a = await get_answer_or_404(answer_id)
    ensure_owner_or_admin(a.author_id, identity, "answer")
    a.content = require_content(body)
    await a.save()
    await a.fetch_related("author")
    tally = (await tally_votes("answer", [a.id]))[a.id]
    return {"message": "Answer updated", "answer": answer_to_dict(a, tally)}

@router.delete("/{answer_id}")
async def delete_answer(answer_id: str, identity: Identity = Depends(get_current_identity)):
    """
    Delete an answer (author or admin) with its comments and their votes.

    Everything is removed in one transaction; on failure nothing is deleted.

    Args:
        answer_id: Answer UUID from the path

    Returns:
        dict: {"message": "Answer deleted successfully"}

    Raises:
        HTTPException (403): Caller is neither the author nor an admin
        HTTPException (404): Answer not found
    """
    a = await get_answer_or_404(answer_id)
    ensure_owner_or_admin(a.author_id, identity, "answer")
    await posts.delete_answer(a)
    logger.info("[answers] %s deleted by %s", a.id, identity.username)
    return {"message": "Answer deleted successfully"}

@router.post("/{answer_id}/accept")
async def accept_answer(answer_id: str, identity: Identity = Depends(get_current_identity)):
    """
    Mark an answer as the accepted one for its question.

    Only the question owner (or an admin) may accept. Accepting clears the
    flag on the question's other answers; accepting the already accepted
    answer un-accepts it.

    Raises:
        HTTPException (403): Caller does not own the question and is not an admin
        HTTPException (404): Answer not found
    """
    a = await get_answer_or_404(answer_id)
    question = await Question.get(id=a.question_id)
    ensure_owner_or_admin(question.user_id, identity, "question")

    accepted = not a.is_accepted
    await Answer.filter(question_id=question.id).exclude(id=a.id).update(is_accepted=False)
    a.is_accepted = accepted
    await a.save()
    return {"message": "Answer accepted" if accepted else "Answer unaccepted", "isAccepted": accepted}

@router.post("/{answer_id}/vote")
async def vote_answer(answer_id: str, body: VoteIn, identity: Identity = Depends(get_current_identity)):
    """
    Vote "up"/"down" on an answer; any other type retracts the caller's vote.

    Args:
        answer_id: Answer UUID from the path
        body: {"type": "up" | "down" | anything else to retract}

    Returns:
        dict: {"message", "votes": net score, "up", "down"}

    Raises:
        HTTPException (400): Missing vote type
        HTTPException (404): Answer not found
    """
    aid = parse_id(answer_id, "Answer")
    try:
        tally = await cast_vote("answer", aid, identity.id, body.type)
    except VoteTargetNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return {"message": "Vote updated", "votes": tally.net, "up": tally.up, "down": tally.down}
