# forum/models/mention.py
import uuid
from tortoise import fields, models

MENTION_SOURCE_TYPES = ("question", "answer", "comment")

class Mention(models.Model):
    """
    Links a piece of content to a user referenced by "@username" inside it.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    source_type = fields.CharField(max_length=16)  # One of MENTION_SOURCE_TYPES
    source_id = fields.UUIDField(index=True)
    mentioned_user = fields.ForeignKeyField("models.User", related_name="mentions", on_delete=fields.CASCADE)
    by_user = fields.ForeignKeyField("models.User", related_name="authored_mentions", on_delete=fields.CASCADE)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "mentions"
