"""Rate limiting.

Two layers:
1. A global per-IP token bucket applied to every request by middleware.
2. slowapi per-route limits on the credential endpoints (login, refresh, reset).

Both use Redis when configured and fall back to per-process memory otherwise.
Both are disabled when APP_ENV=testing.
"""

import asyncio
import time
from dataclasses import dataclass

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from src.inspector.core.config import get_settings
from src.inspector.core.logging import get_logger
from src.inspector.core.redis import get_redis

logger = get_logger(__name__)

EXEMPT_PATHS = frozenset({"/health", "/metrics", "/docs", "/openapi.json", "/redoc"})

# Atomic token bucket on the Redis server
_REDIS_TOKEN_BUCKET_SCRIPT = """
local key = KEYS[1]
local rate = tonumber(ARGV[1])
local burst = tonumber(ARGV[2])
local now = tonumber(ARGV[3])
local ttl = tonumber(ARGV[4])

local bucket = redis.call('HMGET', key, 'tokens', 'last_update')
local tokens = tonumber(bucket[1]) or burst
local last_update = tonumber(bucket[2]) or now

tokens = math.min(burst, tokens + (now - last_update) * rate)
local allowed = 0
if tokens >= 1 then
    tokens = tokens - 1
    allowed = 1
end
redis.call('HSET', key, 'tokens', tokens, 'last_update', now)
redis.call('EXPIRE', key, ttl)
return allowed
"""

_script_sha: str | None = None


@dataclass
class _Bucket:
    tokens: float
    last_update: float


_buckets: dict[str, _Bucket] = {}
_buckets_lock = asyncio.Lock()


def get_rate_limit_key(request: Request) -> str:
    """Rate limit key: client IP only.

    Never mix in request headers or body fields; a client could rotate them
    to get a fresh bucket per request.
    """
    return get_remote_address(request) or "unknown"


def create_limiter() -> Limiter:
    """Create the slowapi limiter, backed by Redis if configured."""
    settings = get_settings()
    if settings.app_env == "testing":
        return Limiter(key_func=get_rate_limit_key, enabled=False)
    if settings.redis_url:
        return Limiter(key_func=get_rate_limit_key, storage_uri=settings.redis_url)
    return Limiter(key_func=get_rate_limit_key)


limiter = create_limiter()


def reset_buckets() -> None:
    """Drop in-memory buckets and the cached script SHA (used by tests)."""
    global _script_sha
    _buckets.clear()
    _script_sha = None


async def _check_in_memory(client_ip: str) -> bool:
    settings = get_settings()
    rate = settings.global_rate_limit_per_second
    burst = settings.global_rate_limit_burst
    now = time.time()

    async with _buckets_lock:
        bucket = _buckets.setdefault(client_ip, _Bucket(tokens=float(burst), last_update=now))
        bucket.tokens = min(burst, bucket.tokens + (now - bucket.last_update) * rate)
        bucket.last_update = now
        if bucket.tokens >= 1:
            bucket.tokens -= 1
            return True
        return False


async def _check_redis(redis: object, client_ip: str) -> bool:
    global _script_sha
    settings = get_settings()
    rate = settings.global_rate_limit_per_second
    burst = settings.global_rate_limit_burst
    ttl = int(burst / rate) + 60

    if _script_sha is None:
        _script_sha = await redis.script_load(_REDIS_TOKEN_BUCKET_SCRIPT)  # type: ignore[attr-defined]
    result = await redis.evalsha(  # type: ignore[attr-defined]
        _script_sha, 1, f"global_ratelimit:{client_ip}", rate, burst, time.time(), ttl
    )
    return bool(int(result) == 1)


async def is_request_allowed(client_ip: str) -> bool:
    """Consume one token for the client. Redis first, memory as fallback."""
    global _script_sha
    if get_settings().app_env == "testing":
        return True

    redis = await get_redis()
    if redis is None:
        return await _check_in_memory(client_ip)
    try:
        return await _check_redis(redis, client_ip)
    except Exception as e:
        logger.warning("Redis rate limit check failed, using in-memory bucket", error=str(e))
        _script_sha = None
        return await _check_in_memory(client_ip)


async def global_rate_limit_middleware(request: Request, call_next) -> Response:  # type: ignore[no-untyped-def]
    """Reject clients exceeding the global per-IP rate with 429."""
    if request.url.path in EXEMPT_PATHS:
        return await call_next(request)  # type: ignore[no-any-return]

    client_ip = get_rate_limit_key(request)
    if not await is_request_allowed(client_ip):
        logger.warning("Global rate limit exceeded", client_ip=client_ip, path=request.url.path)
        return JSONResponse(
            status_code=429,
            content={
                "success": False,
                "message": "Too many requests. Please slow down.",
                "errors": [],
            },
            headers={"Retry-After": "1"},
        )

    return await call_next(request)  # type: ignore[no-any-return]
