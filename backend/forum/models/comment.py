# forum/models/comment.py
import uuid
from tortoise import fields, models

class Comment(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    user = fields.ForeignKeyField("models.User", related_name="comments", on_delete=fields.CASCADE)
    answer = fields.ForeignKeyField("models.Answer", related_name="comments", on_delete=fields.CASCADE)
    content = fields.TextField()
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "comments"
