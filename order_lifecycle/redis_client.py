import redis.asyncio as redis
from order_lifecycle.config import settings

_redis: redis.Redis | None = None


async def get_redis() -> redis.Redis:
    global _redis
    if _redis is None:
        _redis = redis.from_url(settings.redis_url, decode_responses=True)
    return _redis


async def close_redis() -> None:
    global _redis
    if _redis is not None:
        await _redis.aclose()
        _redis = None


async def check_idempotency(r: redis.Redis, key: str, ttl_seconds: int | None = None) -> bool:
    """
    Returns True if this key was already seen (duplicate) -> caller should skip.
    Returns False if key is new -> caller should proceed.
    Uses SET NX: set if not exists. If we set it, we're first; if not, duplicate.
    """
    ttl = ttl_seconds or settings.side_effect_idempotency_ttl_seconds
    was_set = await r.set(key, "1", nx=True, ex=ttl)
    return not was_set  # True = duplicate (already existed), False = new
