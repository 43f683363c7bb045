"""Redis access for short-lived wallet login challenges.

Nonce, strategy and currency state never touch Redis; losing Redis only
invalidates pending challenges.
"""

import redis.asyncio as aioredis

from config.settings import settings

_redis_pool: aioredis.Redis | None = None

CHALLENGE_KEY_PREFIX = "auth:challenge:"


def challenge_key(address: str) -> str:
    return f"{CHALLENGE_KEY_PREFIX}{address}"


async def get_redis() -> aioredis.Redis:
    """FastAPI dependency: shared client, created on first use."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is None:
        _redis_pool = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            health_check_interval=30,
        )
    return _redis_pool


async def ping_redis() -> None:
    client = await get_redis()
    await client.ping()


async def close_redis() -> None:
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None
