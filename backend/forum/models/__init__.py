# forum/models/__init__.py
"""
Database models module initialization.
Exports all Tortoise ORM models for convenient imports throughout the application.

Models exported:
- User: Forum account and authentication model
- Question / Tag: Questions and their lazily created tags
- Answer: Answer to a question
- Comment: Comment on an answer
- Vote: One row per (target, voter) of the vote ledger
- Mention: "@username" reference recorded from content
- Notification: Per-user notification inbox entry
"""
from .user import User
from .question import Question, Tag
from .answer import Answer
from .comment import Comment
from .vote import Vote
from .mention import Mention
from .notification import Notification
