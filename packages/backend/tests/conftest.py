"""Test fixtures — a fresh database per test and an app client bound to it.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own engine with freshly created tables. By default
   that is an in-memory SQLite database (StaticPool keeps one connection
   alive so every session sees the same data). Point
   REVIEWSTORE_TEST_DATABASE_URL at a PostgreSQL database to run the same
   tests against asyncpg.
2. The app's get_db dependency is overridden to hand out sessions from the
   test engine, one per request, the same way production does.
3. get_token_signer is overridden with a signer using a test secret, so
   tests can also build signers with other secrets and watch them fail.

Services commit for real here (no savepoint wrapping): uniqueness and
foreign-key checks have to fire at commit time for the tests to mean
anything.
"""

import os

# Must be set before reviewstore.config is imported.
os.environ.setdefault("REVIEWSTORE_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("REVIEWSTORE_BCRYPT_ROUNDS", "4")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from reviewstore.auth.jwt import TokenSigner, get_token_signer
from reviewstore.db.engine import build_engine, create_all, get_db
from reviewstore.db.models import Base
from reviewstore.main import app

TEST_DB_URL = os.environ.get("REVIEWSTORE_TEST_DATABASE_URL", "sqlite+aiosqlite://")
IS_SQLITE = make_url(TEST_DB_URL).get_backend_name() == "sqlite"

TEST_SECRET = "test-secret-0123456789-abcdefghijklmnopqrstuvwxyz"
OTHER_SECRET = "other-secret-9876543210-zyxwvutsrqponmlkjihgfedcba"

API = "/api/v1"


@pytest_asyncio.fixture()
async def engine():
    """Per-test engine with a clean schema."""
    if IS_SQLITE:
        test_engine = build_engine(TEST_DB_URL, poolclass=StaticPool)
    else:
        test_engine = build_engine(TEST_DB_URL)
    await create_all(test_engine, drop=True)
    try:
        yield test_engine
    finally:
        async with test_engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await test_engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """A session for driving services directly or inspecting rows."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
def signer():
    return TokenSigner(TEST_SECRET)


@pytest_asyncio.fixture()
async def client(session_factory, signer):
    """HTTP client with get_db and the token signer overridden for testing.

    Learn: Unlike a mocked identity, the real auth pipeline runs: tests
    register, log in and send the issued bearer token like any client.
    """
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_signer] = lambda: signer

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(client):
    """Register + login helper. Returns (user_json, auth_headers)."""

    async def _make_user(username: str, password: str = "password_123"):
        r = await client.post(
            f"{API}/users/register",
            json={"username": username, "password": password},
        )
        assert r.status_code == 201, r.text
        user = r.json()

        r = await client.post(
            f"{API}/users/login",
            json={"username": username, "password": password},
        )
        assert r.status_code == 200, r.text
        token = r.json()["token"]
        return user, {"Authorization": f"Bearer {token}"}

    return _make_user
