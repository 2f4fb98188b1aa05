import logging
import uuid

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from forum.api.deps import get_current_identity, identity_from_user
from forum.config import settings
from forum.core.security import create_access_token, decode_access_token, hash_password, verify_password
from forum.models.user import User
from forum.schemas.auth import Identity, LoginIn, RegisterIn

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("uvicorn.error")

def _set_session_cookie(response: Response, identity: Identity) -> None:
    token = create_access_token(
        str(identity.id), identity.username, identity.email, identity.role
    )
    response.set_cookie(
        settings.cookie_name,
        token,
        max_age=settings.jwt_expires_minutes * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterIn, response: Response):
    """
    Register a new account and log it in.

    The password is hashed before storage. Username and email must be unique.
    On success the session cookie is set, so the client is logged in straight
    away.

    Returns:
        dict: {"message": str, "user": {id, username, email, role}}

    Raises:
        HTTPException (400): Missing field, username taken or email taken
    """
    username = body.username.strip()
    email = body.email.strip().lower()
    if not username or not email or not body.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="username, email and password are required")
    if await User.filter(username=username).exists():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")
    if await User.filter(email=email).exists():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    user = await User.create(
        username=username,
        email=email,
        password_hash=hash_password(body.password),
        role="user",
    )
    identity = identity_from_user(user)
    _set_session_cookie(response, identity)
    logger.info("[auth] registered %s (%s)", user.username, user.id)
    return {"message": "User registered and logged in", "user": identity.to_public()}

async def _identity_from_cookie(request: Request) -> Identity | None:
    token = request.cookies.get(settings.cookie_name)
    if not token:
        return None
    try:
        payload = decode_access_token(token)
        user_id = uuid.UUID(str(payload.get("sub")))
    except (jwt.InvalidTokenError, ValueError):
        return None
    user = await User.get_or_none(id=user_id)
    return identity_from_user(user) if user else None

@router.post("/login")
async def login(request: Request, response: Response, body: LoginIn | None = None):
    """
    Log in with email and password, or silently with a still-valid cookie.

    A caller already holding a valid session cookie is logged in without
    credentials and the cookie is left untouched. Otherwise the credentials
    are checked and a fresh cookie is issued.

    Returns:
        dict: {"message": str, "user": {id, username, email, role}}

    Raises:
        HTTPException (400): No valid cookie and no credentials
        HTTPException (401): Wrong email or password
    """
    current = await _identity_from_cookie(request)
    if current is not None:
        return {"message": "User logged in via cookie", "user": current.to_public()}

    if body is None or not body.email or not body.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="email and password are required")

    user = await User.get_or_none(email=body.email.strip().lower())
    if not user or not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    identity = identity_from_user(user)
    _set_session_cookie(response, identity)
    return {"message": "Login successful", "user": identity.to_public()}

@router.get("/me")
async def me(identity: Identity = Depends(get_current_identity)):
    """
    Return the caller decoded from the session cookie.

    Raises:
        HTTPException (401): If no valid session cookie is present
    """
    return {"user": identity.to_public()}

@router.post("/logout")
async def logout(response: Response):
    """
    Clear the session cookie.

    Note:
        The token itself stays valid until it expires; there is no
        server-side revocation list.
    """
    response.delete_cookie(settings.cookie_name, httponly=True, secure=settings.cookie_secure, samesite="strict")
    return {"message": "Logged out successfully"}
