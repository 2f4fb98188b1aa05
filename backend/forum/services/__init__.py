"""
Services Module

Domain logic shared by the routers:
- mentions: "@username" extraction
- votes: per-voter vote ledger and net scores
- notifications: mention records and notification dispatch
- posts: tag resolution and transactional cascade deletes
"""
from .mentions import extract_mentions
from .votes import (
    VoteTargetNotFound,
    cast_vote,
    clear_votes,
    get_user_vote,
    get_votes,
    tally_votes,
)
from .notifications import dispatch_mentions, notify, run_side_effect
from .posts import delete_answer, delete_comment, delete_question, resolve_tags

__all__ = [
    "extract_mentions",
    "VoteTargetNotFound",
    "cast_vote",
    "clear_votes",
    "get_user_vote",
    "get_votes",
    "tally_votes",
    "dispatch_mentions",
    "notify",
    "run_side_effect",
    "delete_question",
    "delete_answer",
    "delete_comment",
    "resolve_tags",
]
