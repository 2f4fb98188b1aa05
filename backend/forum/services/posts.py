"""
Helpers shared by the question/answer/comment routers.

The delete helpers each run in one transaction: either the whole subtree
(content plus its ledger rows) goes, or nothing does.
"""
import uuid

from tortoise.transactions import in_transaction

from forum.models import Answer, Comment, Question, Tag
from forum.services.votes import clear_votes


async def resolve_tags(names: list[str]) -> list[Tag]:
    """
    Look tags up by name, creating the missing ones. Blank and repeated
    names are skipped; order of first appearance is kept.
    """
    tags: list[Tag] = []
    seen: set[str] = set()
    for raw in names:
        name = (raw or "").strip()
        if not name or name in seen:
            continue
        seen.add(name)
        tag, _ = await Tag.get_or_create(name=name)
        tags.append(tag)
    return tags


async def _purge_answers(answer_ids: list[uuid.UUID]) -> None:
    # Caller owns the transaction
    if not answer_ids:
        return
    comment_ids = await Comment.filter(answer_id__in=answer_ids).values_list("id", flat=True)
    await clear_votes("comment", comment_ids)
    await Comment.filter(answer_id__in=answer_ids).delete()
    await clear_votes("answer", answer_ids)
    await Answer.filter(id__in=answer_ids).delete()


async def delete_question(question: Question) -> None:
    """
    Remove a question with its answers, their comments and the ledger rows
    of all of them.
    """
    async with in_transaction():
        answer_ids = await Answer.filter(question_id=question.id).values_list("id", flat=True)
        await _purge_answers(list(answer_ids))
        await clear_votes("question", [question.id])
        await question.delete()


async def delete_answer(answer: Answer) -> None:
    """Remove an answer with its comments and the ledger rows of both."""
    async with in_transaction():
        await _purge_answers([answer.id])


async def delete_comment(comment: Comment) -> None:
    async with in_transaction():
        await clear_votes("comment", [comment.id])
        await comment.delete()
