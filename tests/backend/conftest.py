import os
import uuid

# Must be set before any forum module reads its settings
TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from tortoise import Tortoise  # noqa: E402

from forum.core import db as db_module  # noqa: E402
from forum.core.security import create_access_token, hash_password  # noqa: E402
from forum.main import app  # noqa: E402
from forum.models.user import User  # noqa: E402

db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """
    Fresh database without an HTTP client, for service-level tests.
    """
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client(db):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    try:
        transport = ASGITransport(app=app, lifespan="off")
    except TypeError:
        # Fallback for httpx versions that don't support lifespan parameter
        transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def create_user():
    """
    Factory fixture to create users directly via ORM.
    """

    async def _create_user(
        username: str | None = None,
        password: str = "UserPass!23",
        role: str = "user",
    ) -> tuple[User, str]:
        username = username or f"user_{uuid.uuid4().hex[:6]}"
        user = await User.create(
            username=username,
            email=f"{username.lower()}@example.com",
            password_hash=hash_password(password),
            role=role,
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def create_admin(create_user):
    async def _create_admin(password: str = "AdminPass!23") -> tuple[User, str]:
        return await create_user(username=f"admin_{uuid.uuid4().hex[:6]}", password=password, role="admin")

    return _create_admin


def _cookie_header(token: str) -> dict[str, str]:
    return {"Cookie": f"token={token}"}


@pytest.fixture
def session_for():
    """
    Build request headers carrying a freshly minted session cookie for a user.
    Used by tests that are not about the login flow itself.
    """

    def _session_for(user: User) -> dict[str, str]:
        token = create_access_token(str(user.id), user.username, user.email, user.role)
        return _cookie_header(token)

    return _session_for
