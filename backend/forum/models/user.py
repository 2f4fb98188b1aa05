# forum/models/user.py
"""
Database model for users.
Represents a forum account with authentication credentials and role.
"""
import uuid
from tortoise import fields, models

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many Questions (related_name="questions")
    - Has many Answers (related_name="answers")
    - Has many Comments (related_name="comments")
    - Has many Notifications as recipient (related_name="notifications")

    Security:
    - Password is stored as a hash (never store plain text passwords)
    - Username and email must be unique across all users
    - Role determines access level (user vs admin)
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    username = fields.CharField(max_length=64, unique=True, index=True)  # Also the @mention handle
    email = fields.CharField(max_length=256, unique=True, index=True)
    password_hash = fields.CharField(max_length=255)  # argon2 hash
    role = fields.CharField(max_length=16, default="user")  # "user" or "admin"
    reputation = fields.IntField(default=0)  # Shown next to the author of every post
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
