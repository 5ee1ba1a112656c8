"""Revoked refresh-token cache with Redis backend and graceful fallback.

Redis only answers "definitely revoked" quickly. The database stays the source
of truth: a miss, or Redis being unavailable, always falls through to the DB.
"""

from src.inspector.core.redis import get_redis

PREFIX_REVOKED_REFRESH_TOKEN = "revoked_refresh_token"


def _key(token_hash: str) -> str:
    return f"{PREFIX_REVOKED_REFRESH_TOKEN}:{token_hash}"


async def blacklist_token(token_hash: str, ttl: int) -> bool:
    """Mark a refresh token hash as revoked.

    Args:
        token_hash: SHA256 hash of the refresh token
        ttl: Seconds until the token would have expired anyway

    Returns:
        True if stored in Redis, False if Redis unavailable or ttl already elapsed
    """
    if ttl <= 0:
        return False
    redis = await get_redis()
    if not redis:
        return False
    await redis.setex(_key(token_hash), ttl, "1")
    return True


async def is_token_blacklisted(token_hash: str) -> bool | None:
    """Check if a refresh token hash is known to be revoked.

    Returns:
        True: revoked
        False: not in the cache (caller still checks the database)
        None: Redis unavailable
    """
    redis = await get_redis()
    if not redis:
        return None
    result = await redis.get(_key(token_hash))
    return result is not None


async def blacklist_tokens_with_ttls(tokens_with_ttls: list[tuple[str, int]]) -> int:
    """Bulk mark refresh token hashes as revoked, each with its remaining lifetime.

    Used when every token of a user is revoked at once.

    Returns:
        Number of tokens written (0 if Redis unavailable)
    """
    redis = await get_redis()
    if not redis:
        return 0

    live = [(token_hash, ttl) for token_hash, ttl in tokens_with_ttls if ttl > 0]
    if not live:
        return 0
    pipe = redis.pipeline()
    for token_hash, ttl in live:
        pipe.setex(_key(token_hash), ttl, "1")
    await pipe.execute()
    return len(live)
