"""Root test fixtures shared across all test types.

Database fixtures live in tests/integration/conftest.py.
"""

import os

# Must be set before any application import: settings are read at import time
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-at-least-32-characters-long")
# Cheap argon2 parameters keep the suite fast
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "8192")
os.environ.pop("REDIS_URL", None)
os.environ.pop("RESEND_API_KEY", None)

# ruff: noqa: E402
from collections.abc import AsyncGenerator, Generator

import pytest
from fakeredis import aioredis as fakeredis_aio
from redis.asyncio import Redis

from src.inspector.core import rate_limit
from src.inspector.core import redis as redis_core
from src.inspector.core.config import get_settings

get_settings.cache_clear()


@pytest.fixture
def reset_rate_limit_buckets() -> Generator[None]:
    """Clean in-memory rate limit state before and after the test."""
    rate_limit.reset_buckets()
    yield
    rate_limit.reset_buckets()


@pytest.fixture
async def fake_redis() -> AsyncGenerator[Redis]:
    """In-memory Redis implementation."""
    client = fakeredis_aio.FakeRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
async def mock_redis(fake_redis: Redis, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[Redis]:
    """Make get_redis() return the fakeredis client everywhere it is imported."""
    redis_core.reset_redis_state()

    async def _get_fake_redis() -> Redis:
        return fake_redis

    monkeypatch.setattr("src.inspector.core.redis.get_redis", _get_fake_redis)
    monkeypatch.setattr("src.inspector.core.cache.get_redis", _get_fake_redis)
    monkeypatch.setattr("src.inspector.core.rate_limit.get_redis", _get_fake_redis)
    monkeypatch.setattr("src.inspector.core.health.get_redis", _get_fake_redis)
    yield fake_redis
    redis_core.reset_redis_state()


@pytest.fixture
async def mock_redis_unavailable(monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[None]:
    """Make get_redis() return None, as when Redis is down or not configured."""
    redis_core.reset_redis_state()

    async def _get_none() -> None:
        return None

    monkeypatch.setattr("src.inspector.core.redis.get_redis", _get_none)
    monkeypatch.setattr("src.inspector.core.cache.get_redis", _get_none)
    monkeypatch.setattr("src.inspector.core.rate_limit.get_redis", _get_none)
    monkeypatch.setattr("src.inspector.core.health.get_redis", _get_none)
    yield
    redis_core.reset_redis_state()
