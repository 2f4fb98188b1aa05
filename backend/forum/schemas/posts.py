"""
Pydantic schemas for question, answer and comment endpoints.
"""
from pydantic import BaseModel, Field

class QuestionCreateIn(BaseModel):
    title: str
    description: str
    tagNames: list[str] = Field(default_factory=list)

class QuestionUpdateIn(BaseModel):
    """
    All fields optional; only provided fields are updated.
    """
    title: str | None = None
    description: str | None = None
    tagNames: list[str] | None = None

class ContentIn(BaseModel):
    """
    Body of answer/comment create and update requests.
    """
    content: str
