import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status

from forum.api.deps import ensure_owner_or_admin, get_current_identity, parse_id
from forum.api.serializers import answer_to_dict, comment_to_dict, question_to_dict
from forum.models import Answer, Comment, Question
from forum.schemas.auth import Identity
from forum.schemas.posts import QuestionCreateIn, QuestionUpdateIn
from forum.schemas.vote import VoteIn, VoteTally
from forum.services import posts
from forum.services.notifications import dispatch_mentions, run_side_effect
from forum.services.posts import resolve_tags
from forum.services.votes import VoteTargetNotFound, cast_vote, get_user_vote, tally_votes

router = APIRouter(prefix="/question", tags=["questions"], dependencies=[Depends(get_current_identity)])
logger = logging.getLogger("uvicorn.error")

# ===== Helpers =====
async def _answer_counts(question_ids: list[uuid.UUID]) -> dict[uuid.UUID, int]:
    counts: dict[uuid.UUID, int] = {}
    if not question_ids:
        return counts
    for qid in await Answer.filter(question_id__in=question_ids).values_list("question_id", flat=True):
        qid = qid if isinstance(qid, uuid.UUID) else uuid.UUID(str(qid))
        counts[qid] = counts.get(qid, 0) + 1
    return counts

async def _questions_out(questions: list[Question]) -> list[dict]:
    ids = [q.id for q in questions]
    tallies = await tally_votes("question", ids)
    counts = await _answer_counts(ids)
    return [question_to_dict(q, tallies[q.id], counts.get(q.id, 0)) for q in questions]

async def _get_question(question_id: str) -> Question:
    qid = parse_id(question_id, "Question")
    q = await Question.get_or_none(id=qid)
    if not q:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")
    return q

# ===== Routes =====
@router.post("", status_code=status.HTTP_201_CREATED)
async def create_question(body: QuestionCreateIn, identity: Identity = Depends(get_current_identity)):
    """
    Ask a question.

    Tags are resolved by name (created if absent). "@username" mentions in
    the description notify the mentioned users; that step never fails the
    request.

    Returns:
        dict: {"question": question}

    Raises:
        HTTPException (400): Blank title or description
    """
    title = body.title.strip()
    description = body.description.strip()
    if not title or not description:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title and description are required")

    tags = await resolve_tags(body.tagNames)
    q = await Question.create(user_id=identity.id, title=title, description=description)
    if tags:
        await q.tags.add(*tags)

    await run_side_effect(
        dispatch_mentions(
            source_type="question",
            source_id=q.id,
            content=q.description,
            author=identity,
            reference_id=q.id,
            link=f"/question/{q.id}",
        ),
        f"mention dispatch for question {q.id}",
    )

    await q.fetch_related("tags", "user")
    return {"question": question_to_dict(q, VoteTally(), 0)}

@router.get("")
async def list_questions():
    """
    List all questions, newest first, with tag names, author and votes.
    """
    rows = await Question.all().order_by("-created_at").prefetch_related("tags", "user")
    return await _questions_out(rows)

@router.get("/my")
async def list_my_questions(identity: Identity = Depends(get_current_identity)):
    """
    Questions asked by the caller, newest first.

    Args:
        identity: The caller, from the session cookie

    Returns:
        list[dict]: Questions in the same shape as the full list
    """
    rows = await Question.filter(user_id=identity.id).order_by("-created_at").prefetch_related("tags", "user")
    return await _questions_out(rows)

@router.get("/unanswered")
async def list_unanswered_questions():
    answered = await Answer.all().distinct().values_list("question_id", flat=True)
    qs = Question.all()
    if answered:
        qs = qs.exclude(id__in=list(answered))
    rows = await qs.order_by("-created_at").prefetch_related("tags", "user")
    return await _questions_out(rows)

@router.get("/{question_id}")
async def get_question(question_id: str, identity: Identity = Depends(get_current_identity)):
    """
    Get one question with its answers, each answer with its comments.

    Answers are ordered accepted first, then pinned, then oldest first;
    comments newest first. `myVote` is the caller's current vote on the
    question ("up", "down" or null).

    Raises:
        HTTPException (404): If the question does not exist
    """
    q = await _get_question(question_id)
    await q.fetch_related("tags", "user")

    answers = await Answer.filter(question_id=q.id).order_by("-is_accepted", "-is_pinned", "created_at").prefetch_related("author")
    answer_ids = [a.id for a in answers]
    comments = []
    if answer_ids:
        comments = await Comment.filter(answer_id__in=answer_ids).order_by("-created_at").prefetch_related("user")

    question_tally = (await tally_votes("question", [q.id]))[q.id]
    answer_tallies = await tally_votes("answer", answer_ids)
    comment_tallies = await tally_votes("comment", [c.id for c in comments])

    comments_by_answer: dict[str, list[dict]] = {str(aid): [] for aid in answer_ids}
    for c in comments:
        comments_by_answer[str(c.answer_id)].append(comment_to_dict(c, comment_tallies[c.id]))

    data = question_to_dict(q, question_tally, len(answers))
    data["answers"] = [answer_to_dict(a, answer_tallies[a.id], comments_by_answer[str(a.id)]) for a in answers]
    data["myVote"] = await get_user_vote("question", q.id, identity.id)
    return {"question": data}

@router.put("/{question_id}")
async def update_question(question_id: str, body: QuestionUpdateIn, identity: Identity = Depends(get_current_identity)):
    """
    Edit a question (owner or admin).

    Only the provided fields change; `tagNames` replaces the whole tag set.

    Raises:
        HTTPException (403): Caller is neither the owner nor an admin
        HTTPException (404): Question not found
    """
    q = await _get_question(question_id)
    ensure_owner_or_admin(q.user_id, identity, "question")

    if body.title and body.title.strip():
        q.title = body.title.strip()
    if body.description and body.description.strip():
        q.description = body.description.strip()
    await q.save()

    if body.tagNames is not None:
        tags = await resolve_tags(body.tagNames)
        await q.tags.clear()
        if tags:
            await q.tags.add(*tags)

    await q.fetch_related("tags", "user")
    tally = (await tally_votes("question", [q.id]))[q.id]
    counts = await _answer_counts([q.id])
    return {"message": "Question updated", "question": question_to_dict(q, tally, counts.get(q.id, 0))}

@router.delete("/{question_id}")
async def delete_question(question_id: str, identity: Identity = Depends(get_current_identity)):
    """
    Delete a question (owner or admin) along with its answers, their
    comments and all related votes.

    The whole removal is one transaction; if any step fails the question
    and everything under it stay in place.

    Args:
        question_id: Question UUID from the path

    Returns:
        dict: {"message": "Question deleted successfully"}

    Raises:
        HTTPException (403): Caller is neither the owner nor an admin
        HTTPException (404): Question not found
    """
    q = await _get_question(question_id)
    ensure_owner_or_admin(q.user_id, identity, "question")

    await posts.delete_question(q)
    logger.info("[questions] %s deleted by %s", q.id, identity.username)
    return {"message": "Question deleted successfully"}

@router.post("/{question_id}/vote")
async def vote_question(question_id: str, body: VoteIn, identity: Identity = Depends(get_current_identity)):
    """
    Vote "up"/"down" on a question; any other type retracts the caller's vote.

    Returns:
        dict: {"message", "votes": net score, "up", "down"}
    """
    qid = parse_id(question_id, "Question")
    try:
        tally = await cast_vote("question", qid, identity.id, body.type)
    except VoteTargetNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return {"message": "Vote updated", "votes": tally.net, "up": tally.up, "down": tally.down}
