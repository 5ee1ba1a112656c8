"""Optional Redis connection.

Redis backs the revoked-refresh-token cache and rate limiting. When REDIS_URL is
unset or the server is unreachable, get_redis() returns None and callers fall
back to the database / in-memory paths.
"""

from redis.asyncio import ConnectionPool, Redis

from src.inspector.core.config import get_settings
from src.inspector.core.logging import get_logger

logger = get_logger(__name__)

_pool: ConnectionPool | None = None
_redis: Redis | None = None
# A failed connection is not retried until close_redis()/reset_redis_state()
_connection_attempted: bool = False


async def _connect(url: str, max_connections: int) -> Redis | None:
    global _pool
    _pool = ConnectionPool.from_url(url, max_connections=max_connections, decode_responses=True)
    client = Redis(connection_pool=_pool)
    try:
        await client.ping()  # type: ignore[misc]
    except Exception as e:
        logger.warning("Redis unavailable, continuing without it", error=str(e))
        await client.aclose()
        await _pool.disconnect()
        _pool = None
        return None
    logger.info("Redis connected")
    return client


async def get_redis() -> Redis | None:
    """Get the shared Redis client, connecting lazily. Returns None if unavailable."""
    global _redis, _connection_attempted

    if _redis is not None or _connection_attempted:
        return _redis

    _connection_attempted = True
    settings = get_settings()
    if not settings.redis_url:
        logger.info("Redis not configured (REDIS_URL not set)")
        return None

    _redis = await _connect(settings.redis_url, settings.redis_pool_size)
    return _redis


async def close_redis() -> None:
    """Close the Redis client and pool. Called during application shutdown."""
    if _redis is not None:
        await _redis.aclose()
        logger.info("Redis connection closed")
    if _pool is not None:
        await _pool.disconnect()
    reset_redis_state()


def reset_redis_state() -> None:
    """Forget the current client so the next get_redis() reconnects (used by tests)."""
    global _pool, _redis, _connection_attempted
    _redis = None
    _pool = None
    _connection_attempted = False
