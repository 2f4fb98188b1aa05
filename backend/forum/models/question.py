# forum/models/question.py
"""
Database models for questions and their tags.
"""
import uuid
from tortoise import fields, models

class Tag(models.Model):
    """
    Tag attached to questions.

    Tags are created lazily: looked up by name when a question is saved and
    created if absent.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    name = fields.CharField(max_length=64, unique=True, index=True)
    description = fields.TextField(null=True)
    color = fields.CharField(max_length=16, null=True)  # e.g. "#3b82f6"
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "tags"


class Question(models.Model):
    """
    Question database model.

    Relationships:
    - Belongs to a User (the asker)
    - Has many Tags (many-to-many, reverse name "questions")
    - Has many Answers (via related_name in Answer model)

    Votes are not stored here; see forum.models.vote.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    user = fields.ForeignKeyField("models.User", related_name="questions", on_delete=fields.CASCADE)
    title = fields.CharField(max_length=300)
    description = fields.TextField()
    tags = fields.ManyToManyField("models.Tag", related_name="questions", through="question_tags")
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "questions"
