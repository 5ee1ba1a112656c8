"""Integration test fixtures: a throwaway SQLite database per test and an HTTP client.

Tables are created straight from SQLModel metadata; migrations are not involved.
"""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from src.inspector.core import health
from src.inspector.core import redis as redis_core
from src.inspector.core.db import engine as engine_module
from src.inspector.core.db import get_session_factory
from src.inspector.core.shutdown import request_tracker
from src.inspector.main import create_app
from src.inspector.models import User
from tests.factories import UserFactory

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
async def _reset_process_state() -> AsyncGenerator[None]:
    """Module-level singletons must not leak between tests."""
    redis_core.reset_redis_state()
    health.reset_health_cache()
    request_tracker.reset()
    yield
    await redis_core.close_redis()
    health.reset_health_cache()
    request_tracker.reset()


@pytest.fixture
async def engine(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[AsyncEngine]:
    """File-backed SQLite engine, installed as the application engine."""
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'inspector.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    monkeypatch.setattr(engine_module, "_engine", test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return get_session_factory(engine)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Session for arranging and inspecting data. Tests commit explicitly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def create_user(db_session: AsyncSession) -> Callable[..., Any]:
    """Persist a user built by UserFactory; pass factory kwargs or a builder."""

    async def _create(builder: Callable[..., User] = UserFactory.build, **kwargs: Any) -> User:
        user = builder(**kwargs)
        db_session.add(user)
        await db_session.commit()
        return user

    return _create


@pytest.fixture
async def engineer(create_user: Callable[..., Any]) -> User:
    return await create_user()


@pytest.fixture
async def admin(create_user: Callable[..., Any]) -> User:
    return await create_user(UserFactory.admin)
