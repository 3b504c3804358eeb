"""Service test fixtures — async DB, authenticated FastAPI test client, scripted model.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - get_current_user overridden: requests act as `current_user` (switchable mid-test)
    - get_ruby_generator overridden: model calls answered by `mock_llm` in order
    - db_manager patched so the readiness probe hits the test DB

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - mock_llm responses appended per test: each test scripts exactly the calls it expects
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from ruby_tutor.api.dependencies import get_ruby_generator
from ruby_tutor.config import Settings
from ruby_tutor.db.base import Base
import ruby_tutor.models  # noqa: F401
from ruby_tutor.infrastructure.auth import CurrentUser, get_current_user
from ruby_tutor.infrastructure.database import get_db, DatabaseSessionManager
import ruby_tutor.infrastructure.database as db_module
from ruby_tutor.main import app
from ruby_tutor.models.project import Project
from ruby_tutor.services.ruby_generator import RubyGenerator

from tests.services.mock_anthropic import MockAnthropicClient

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def test_settings():
    return Settings(
        anthropic_api_key="sk-ant-test-fake-key",
        database_url="sqlite+aiosqlite:///:memory:",
    )


@pytest.fixture
def mock_llm():
    """Scripted model: append tool_message()/tool_stream()/exceptions in call order."""
    return MockAnthropicClient()


@pytest.fixture
def generator(mock_llm, test_settings):
    return RubyGenerator(mock_llm, test_settings)


@pytest.fixture
def current_user():
    """Mutable holder: tests may swap holder["user"] to act as someone else."""
    return {"user": CurrentUser(id=USER_ID, email="kid@example.com")}


@pytest.fixture
async def client(test_engine, test_session_factory, current_user, generator):
    """FastAPI test client with DB, auth and model dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: current_user["user"]
    app.dependency_overrides[get_ruby_generator] = lambda: generator

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def make_project(test_db):
    """Insert a project directly (bypassing the API) for the given user."""
    async def _make(user_id: str = USER_ID, **fields) -> Project:
        values = {
            "title": "Tic Tac Toe",
            "description": "A two-player game on a 3x3 grid",
            "scoped_goal": "Build tic-tac-toe with a winner banner",
            "master_plan": {},
            "status": "planning",
        }
        values.update(fields)
        project = Project(user_id=user_id, **values)
        test_db.add(project)
        await test_db.commit()
        await test_db.refresh(project)
        return project
    return _make
