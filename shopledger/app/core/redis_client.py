"""
Redis connection for bill write locks.

Only the lock primitives are used; no ledger data lives in Redis.
"""

import redis.asyncio as redis
from shopledger.app.core.config import settings


redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


async def get_redis():
    """FastAPI dependency returning the shared client (overridden in tests)."""
    return redis_client


async def ping_redis() -> bool:
    """True when Redis answers; lock-taking writes fail while it is down."""
    try:
        return bool(await redis_client.ping())
    except redis.RedisError:
        return False


async def close_redis() -> None:
    await redis_client.aclose()
