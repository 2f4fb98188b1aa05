"""
Vote ledger.

Keeps one vote per (voter, target) for questions, answers and comments and
exposes up/down counts plus the net score. Each voter only ever touches its
own ledger row, so concurrent voters on the same target cannot overwrite
each other.
"""
import logging
import uuid
from collections.abc import Iterable

from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from forum.models import Answer, Comment, Question, Vote
from forum.models.vote import VOTE_DIRECTIONS
from forum.schemas.vote import VoteTally

logger = logging.getLogger("uvicorn.error")

VOTABLE_MODELS = {
    "question": Question,
    "answer": Answer,
    "comment": Comment,
}


class VoteTargetNotFound(LookupError):
    """Raised when the voted-on question/answer/comment does not exist."""

    def __init__(self, target_type: str, target_id):
        super().__init__(f"{target_type.capitalize()} not found")
        self.target_type = target_type
        self.target_id = target_id


def _as_uuid(value) -> uuid.UUID:
    return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))


def _model_for(target_type: str):
    try:
        return VOTABLE_MODELS[target_type]
    except KeyError:
        raise ValueError(f"unknown vote target type: {target_type!r}") from None


async def _replace_vote(target_type: str, target_id: uuid.UUID, voter_id: uuid.UUID, direction: str) -> None:
    async with in_transaction():
        await Vote.filter(target_type=target_type, target_id=target_id, voter_id=voter_id).delete()
        if direction in VOTE_DIRECTIONS:
            await Vote.create(
                target_type=target_type,
                target_id=target_id,
                voter_id=voter_id,
                direction=direction,
            )


async def cast_vote(target_type: str, target_id: uuid.UUID, voter_id: uuid.UUID, direction: str) -> VoteTally:
    """
    Record `voter_id`'s vote on a target and return the new tally.

    The voter is first removed from both the upvoters and the downvoters,
    then added to the set named by `direction`. Any direction other than
    "up"/"down" leaves the voter in neither set, i.e. retracts the vote.
    Casting the same direction twice is a no-op. If a simultaneous request
    from the same voter trips the unique (target, voter) constraint, the
    replacement is retried once against the committed row.

    Raises:
        VoteTargetNotFound: If the target does not exist
    """
    model = _model_for(target_type)
    if not await model.filter(id=target_id).exists():
        raise VoteTargetNotFound(target_type, target_id)

    try:
        await _replace_vote(target_type, target_id, voter_id, direction)
    except IntegrityError:
        # Same voter raced us between delete and insert; their row is committed now
        logger.warning("[votes] concurrent vote on %s %s by %s, retrying", target_type, target_id, voter_id)
        await _replace_vote(target_type, target_id, voter_id, direction)

    tally = await get_votes(target_type, target_id)
    logger.info("[votes] %s %s by %s -> %s (net=%d)", target_type, target_id, voter_id, direction, tally.net)
    return tally


async def get_votes(target_type: str, target_id: uuid.UUID) -> VoteTally:
    _model_for(target_type)
    up = await Vote.filter(target_type=target_type, target_id=target_id, direction="up").count()
    down = await Vote.filter(target_type=target_type, target_id=target_id, direction="down").count()
    return VoteTally(up=up, down=down)


async def tally_votes(target_type: str, target_ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, VoteTally]:
    """
    Bulk version of get_votes for list endpoints.
    Every requested id is present in the result, with zero counts if unvoted.
    """
    _model_for(target_type)
    ids = list(target_ids)
    tallies = {tid: VoteTally() for tid in ids}
    if not ids:
        return tallies
    rows = await Vote.filter(target_type=target_type, target_id__in=ids).values_list("target_id", "direction")
    for target_id, direction in rows:
        tally = tallies.setdefault(_as_uuid(target_id), VoteTally())
        if direction == "up":
            tally.up += 1
        elif direction == "down":
            tally.down += 1
    return tallies


async def get_user_vote(target_type: str, target_id: uuid.UUID, voter_id: uuid.UUID) -> str | None:
    """Return "up", "down" or None for the caller's current vote on a target."""
    vote = await Vote.get_or_none(target_type=target_type, target_id=target_id, voter_id=voter_id)
    return vote.direction if vote else None


async def clear_votes(target_type: str, target_ids: Iterable[uuid.UUID]) -> int:
    """Drop the ledger rows of deleted targets. Returns the number of rows removed."""
    _model_for(target_type)
    ids = list(target_ids)
    if not ids:
        return 0
    return await Vote.filter(target_type=target_type, target_id__in=ids).delete()
