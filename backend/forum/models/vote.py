# forum/models/vote.py
"""
Database model for the vote ledger.

One row per (target, voter): the upvoters of a target are its rows with
direction "up", the downvoters its rows with direction "down". The unique
constraint keeps a voter in at most one of the two sets.
"""
import uuid
from tortoise import fields, models

VOTE_DIRECTIONS = ("up", "down")

class Vote(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    target_type = fields.CharField(max_length=16)  # "question", "answer" or "comment"
    target_id = fields.UUIDField(index=True)  # Question/Answer/Comment id (no FK: polymorphic)
    voter = fields.ForeignKeyField("models.User", related_name="votes", on_delete=fields.CASCADE)
    direction = fields.CharField(max_length=4)  # "up" or "down"
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "votes"
        unique_together = (("target_type", "target_id", "voter"),)
