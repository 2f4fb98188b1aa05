# forum/api/deps.py
import uuid

import jwt
from fastapi import Depends, HTTPException, Request, status

from forum.config import settings
from forum.core.security import decode_access_token
from forum.models import Answer
from forum.models.user import User
from forum.schemas.auth import Identity
from forum.schemas.posts import ContentIn

async def get_current_identity(request: Request) -> Identity:
    """
    FastAPI dependency implementing the session gate.

    The session token is read from the HttpOnly "token" cookie only; an
    Authorization header is not consulted. After the signature and expiry
    are verified, the user is re-resolved by the token's `sub` claim so a
    deleted account cannot keep using an old cookie.

    Args:
        request: FastAPI Request object (for accessing cookies)

    Returns:
        Identity: The authenticated caller, built from the stored user record

    Raises:
        HTTPException (401): No cookie ("Access denied. No token provided.")
        HTTPException (401): Token expired ("Token expired.")
        HTTPException (401): Bad signature or malformed token ("Invalid token.")
        HTTPException (401): User no longer exists ("User not found. Token invalid.")

    Usage:
        @router.get("/protected")
        async def protected_route(identity: Identity = Depends(get_current_identity)):
            return {"user_id": str(identity.id)}
    """
    token = request.cookies.get(settings.cookie_name)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access denied. No token provided.")

    try:
        payload = decode_access_token(token)
        user_id = uuid.UUID(str(payload.get("sub")))
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired.")
    except (jwt.InvalidTokenError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token.")

    user = await User.get_or_none(id=user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found. Token invalid.")
    return identity_from_user(user)

def identity_from_user(user: User) -> Identity:
    return Identity(id=user.id, username=user.username, email=user.email, role=user.role)

async def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    """
    FastAPI dependency to ensure the caller is an administrator.

    Raises:
        HTTPException (403): If the caller is not an admin
    """
    if not identity.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return identity

def ensure_owner_or_admin(owner_id, identity: Identity, what: str) -> None:
    """
    Owner-or-admin rule for mutating questions, answers and comments.

    Raises:
        HTTPException (403): If the caller neither owns the entity nor is an admin
    """
    if str(owner_id) != str(identity.id) and not identity.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Not authorized to modify this {what}")

def parse_id(raw: str, what: str) -> uuid.UUID:
    """
    Parse an entity id from the path; malformed ids are reported as not found.
    """
    try:
        return uuid.UUID(raw)
    except (ValueError, TypeError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")

async def get_answer_or_404(answer_id: str) -> Answer:
    aid = parse_id(answer_id, "Answer")
    answer = await Answer.get_or_none(id=aid)
    if not answer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Answer not found")
    return answer

def require_content(body: ContentIn) -> str:
    """
    Stripped body content of an answer or comment.

    Raises:
        HTTPException (400): If the content is blank
    """
    content = body.content.strip()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Content is required")
    return content
