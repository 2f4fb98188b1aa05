import pytest

from forum.config import Settings, settings
from forum.core.bootstrap import ensure_default_admin
from forum.models.user import User


def test_require_jwt_secret_refuses_missing_secret():
    with pytest.raises(RuntimeError, match="JWT_SECRET"):
        Settings(jwt_secret=None).require_jwt_secret()
    with pytest.raises(RuntimeError):
        Settings(jwt_secret="").require_jwt_secret()


def test_require_jwt_secret_returns_configured_secret():
    assert Settings(jwt_secret="s3cret").require_jwt_secret() == "s3cret"
    assert settings.require_jwt_secret()


def test_cookie_defaults():
    s = Settings()
    assert s.cookie_name == "token"
    assert s.jwt_expires_minutes == 1440


@pytest.mark.asyncio
async def test_default_admin_requires_password(db, monkeypatch):
    monkeypatch.delenv("ADMIN_PASSWORD", raising=False)
    assert await ensure_default_admin() is None
    assert await User.filter(role="admin").count() == 0


@pytest.mark.asyncio
async def test_default_admin_created_once(db, monkeypatch, create_user):
    monkeypatch.setenv("ADMIN_PASSWORD", "Adm1n!pass")
    monkeypatch.setenv("ADMIN_USERNAME", "admin")
    monkeypatch.setenv("ADMIN_EMAIL", "root@example.com")
    await create_user("admin")  # name already taken by a regular account

    created = await ensure_default_admin()
    assert created is not None
    assert created.role == "admin"
    assert created.username == "admin2"

    assert await ensure_default_admin() is None
    assert await User.filter(role="admin").count() == 1
