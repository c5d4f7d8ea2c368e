import os
import tempfile

# Point the application at a throwaway database before it is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="event_platform_logs_")
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool

from app.main import app
from app.database import get_db
from app.models import Base, UserRole
from app.services.auth import AuthContext
from tests.helpers import add_user, auth_headers, build_user


# =====================================================================
# Service fixtures: async sessions on a per-test SQLite file
# =====================================================================

@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
async def engine(db_url):
    test_engine = create_async_engine(db_url, poolclass=NullPool)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    """Session for seeding and assertions."""
    async with session_factory() as seed_session:
        yield seed_session


@pytest.fixture
async def session(session_factory):
    """
    Session handed to the service under test.

    Kept apart from ``db`` so that a rejected operation, which rolls its
    session back and expires everything loaded in it, leaves the seeded
    rows usable.
    """
    async with session_factory() as service_session:
        yield service_session


@pytest.fixture
async def admin(db):
    return await add_user(db, "admin", UserRole.ADMIN)


@pytest.fixture
async def member(db):
    return await add_user(db, "member")


@pytest.fixture
def admin_ctx(admin):
    return AuthContext.for_user(admin)


@pytest.fixture
def member_ctx(member):
    return AuthContext.for_user(member)


# =====================================================================
# API fixtures
# =====================================================================

@pytest.fixture
def api_db_path(tmp_path):
    path = tmp_path / "api.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return path


@pytest.fixture
def client(api_db_path):
    """
    Get a test client whose requests run against the per-test database.
    """
    api_engine = create_async_engine(f"sqlite+aiosqlite:///{api_db_path}", poolclass=NullPool)
    api_session = sessionmaker(api_engine, class_=AsyncSession, expire_on_commit=False)

    # Override the database dependency
    async def override_get_db():
        async with api_session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    # Clean up
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def seed(api_db_path):
    """Insert rows straight into the API database and return them detached."""
    sync_engine = create_engine(f"sqlite:///{api_db_path}")

    def _seed(*objects):
        with Session(sync_engine, expire_on_commit=False) as session:
            session.add_all(objects)
            session.commit()
        return objects[0] if len(objects) == 1 else objects

    yield _seed
    sync_engine.dispose()


@pytest.fixture
def api_admin(seed):
    return seed(build_user("admin", UserRole.ADMIN))


@pytest.fixture
def admin_headers(api_admin):
    return auth_headers(api_admin)
