"""Test fixtures — a fresh in-memory SQLite database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Env vars are set before anything imports venus.config, so Settings
   picks up a cheap bcrypt cost and an in-memory database URL.
2. Each test gets its own engine (StaticPool keeps the single in-memory
   connection alive) with tables created from the models.
3. get_db is overridden to yield that session; get_settings to point
   uploads at the test's tmp_path.

This gives us fast, isolated tests without any cross-test pollution.
"""

import os

os.environ.setdefault("VENUS_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("VENUS_BCRYPT_ROUNDS", "4")
os.environ.setdefault("VENUS_ENVIRONMENT", "development")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from venus.config import get_settings, settings  # noqa: E402
from venus.db.engine import get_db, init_models  # noqa: E402
from venus.db.models import User  # noqa: E402
from venus.main import app  # noqa: E402

FIXTURE_USER_ID = 1


@pytest.fixture()
def test_settings(tmp_path):
    return settings.model_copy(update={"upload_dir": str(tmp_path / "uploads")})


@pytest_asyncio.fixture()
async def db_session():
    """Per-test session on a brand new in-memory database."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_models(engine)
    session = AsyncSession(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


@pytest_asyncio.fixture()
async def client(db_session, test_settings):
    """HTTP client with get_db and auth overridden for testing.

    Learn: We override get_current_user to return a fixed identity so
    CRUD tests don't need to register+login first. The identity's
    account row is seeded so foreign keys line up.
    """
    from venus.auth.dependencies import CurrentIdentity, get_current_user

    db_session.add(
        User(
            id=FIXTURE_USER_ID,
            username="fixture-owner",
            email="owner@example.com",
            password_hash="$2b$04$" + "a" * 53,
        )
    )
    await db_session.commit()

    async def override_get_db():
        yield db_session

    def override_get_current_user():
        return CurrentIdentity(user_id=FIXTURE_USER_ID)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_current_user] = override_get_current_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def unauthenticated_client(db_session, test_settings):
    """HTTP client WITHOUT auth override — the real token pipeline runs.

    Learn: Only get_db and get_settings are overridden, so requests must
    carry a real token (header or cookie) to reach protected routes.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
