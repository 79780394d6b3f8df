"""Shared test fixtures.

Tests run against a throwaway SQLite database and the local identity provider.
The environment is set before anything from clubhouse is imported, since
settings and the engine are built at import time.
"""

import os
import tempfile

_DB_PATH = os.path.join(tempfile.gettempdir(), f"clubhouse-test-{os.getpid()}.db")
os.environ["CB_DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["CB_IDENTITY_PROVIDER"] = "local"
os.environ["CB_IDENTITY_SECRET"] = "test-secret"
os.environ["CB_CREATE_TABLES"] = "false"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from clubhouse.core.database import async_session_factory, engine  # noqa: E402
from clubhouse.core.identity import create_local_id_token  # noqa: E402
from clubhouse.main import app  # noqa: E402
from clubhouse.models import Base, User, UserRole  # noqa: E402


@pytest.fixture(autouse=True)
async def _fresh_schema():
    """Rebuild every table before each test.

    Disposing first drops pooled connections bound to a previous test's event loop.
    """
    await engine.dispose()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield


@pytest.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def auth_headers(email: str, **kwargs) -> dict:
    return {"Authorization": f"Bearer {create_local_id_token(email, **kwargs)}"}


@pytest.fixture
def headers_for():
    """Bearer headers for any email, signed by the local provider."""
    return auth_headers


@pytest.fixture
def make_user():
    """Insert a user directly and return it."""

    async def _make(email: str, role: UserRole | None = None, name: str | None = None) -> User:
        async with async_session_factory() as db:
            user = User(email=email, name=name or email.split("@")[0], role=role)
            db.add(user)
            await db.commit()
            return user

    return _make


@pytest.fixture
async def admin_headers(make_user):
    await make_user("admin@example.com", UserRole.ADMIN, name="Club Admin")
    return auth_headers("admin@example.com")


@pytest.fixture
async def user_headers(make_user):
    await make_user("player@example.com", name="Pat Player")
    return auth_headers("player@example.com")
