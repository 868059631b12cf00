"""
Redis Connection

Shared async client used by the rate limiter. The service runs without
Redis in development; callers must handle a missing client.
"""

from redis.asyncio import Redis, from_url

from hero_banners.core.config import settings

redis_client: Redis | None = None


async def init_redis() -> Redis:
    """Connect to Redis on startup and verify the connection."""
    global redis_client
    client = from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
    await client.ping()
    redis_client = client
    return redis_client


def get_redis_client() -> Redis | None:
    """Current client, or None when Redis was never connected."""
    return redis_client


async def close_redis() -> None:
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
