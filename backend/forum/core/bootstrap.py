# forum/core/bootstrap.py
"""
Bootstrap module for application initialization.
Creates a default admin account on first startup.
"""
import os
import logging
from forum.models.user import User
from forum.core.security import hash_password

logger = logging.getLogger("uvicorn.error")

async def ensure_default_admin() -> User | None:
    """
    If no admin exists in the database, create a default admin based on environment variables.
    Only takes effect under the following conditions:
      - Currently no user with role="admin"
      - And ADMIN_PASSWORD is set (to avoid using default weak password)
    Environment variables:
      ADMIN_USERNAME (default: "admin")
      ADMIN_EMAIL    (default: "admin@example.com")
      ADMIN_PASSWORD (required, otherwise won't create)

    Returns:
        The created admin, or None when nothing was created
    """
    if await User.filter(role="admin").exists():
        return None

    admin_password = os.getenv("ADMIN_PASSWORD")
    if not admin_password:
        logger.warning("[bootstrap] No admin present, but ADMIN_PASSWORD not set -> skip creating default admin.")
        return None

    admin_username = os.getenv("ADMIN_USERNAME", "admin")
    admin_email = os.getenv("ADMIN_EMAIL", "admin@example.com").lower()

    if await User.filter(email=admin_email).exists():
        logger.warning("[bootstrap] ADMIN_EMAIL %s already belongs to a regular account -> skip.", admin_email)
        return None

    # Username may already be taken by a regular account; pick a non-conflicting one
    base_username = admin_username
    suffix = 1
    while await User.filter(username=admin_username).exists():
        suffix += 1
        admin_username = f"{base_username}{suffix}"

    u = await User.create(
        username=admin_username,
        email=admin_email,
        password_hash=hash_password(admin_password),
        role="admin",
    )
    logger.warning("[bootstrap] Created default admin -> username=%s email=%s id=%s",
                   u.username, u.email, u.id)
    return u
