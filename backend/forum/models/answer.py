# forum/models/answer.py
import uuid
from tortoise import fields, models

class Answer(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    question = fields.ForeignKeyField("models.Question", related_name="answers", on_delete=fields.CASCADE)
    author = fields.ForeignKeyField("models.User", related_name="answers", on_delete=fields.CASCADE)
    content = fields.TextField()
    is_pinned = fields.BooleanField(default=False)
    is_accepted = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "answers"
