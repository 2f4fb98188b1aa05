"""
Pydantic schemas for authentication endpoints.
Defines request models for register/login and the identity value produced
by the session gate.
"""
import uuid
from pydantic import BaseModel

class RegisterIn(BaseModel):
    """
    Request model for account registration.
    """
    username: str  # Must be unique; also the @mention handle
    email: str  # Must be unique
    password: str  # Plain text, hashed server-side

class LoginIn(BaseModel):
    """
    Request model for credential login.
    Both fields are optional because a client holding a valid session cookie
    may log in silently with an empty body.
    """
    email: str | None = None
    password: str | None = None

class Identity(BaseModel):
    """
    Authenticated caller, produced by the session gate and passed explicitly
    to every protected handler.
    """
    id: uuid.UUID
    username: str
    email: str
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def to_public(self) -> dict:
        return {"id": str(self.id), "username": self.username, "email": self.email, "role": self.role}
