from __future__ import annotations

from functools import lru_cache

import redis
from redis.asyncio import Redis as AsyncRedis

from boardtree.config import settings


@lru_cache
def get_redis_sync() -> redis.Redis:
    """Process-wide client used to publish board events."""
    return redis.Redis.from_url(settings.REDIS_URL, decode_responses=True, health_check_interval=30)


def create_redis_async() -> AsyncRedis:
    """Fresh client per subscription; pub/sub connections are not shared."""
    return AsyncRedis.from_url(settings.REDIS_URL, decode_responses=True)


def close_redis_sync() -> None:
    if get_redis_sync.cache_info().currsize:
        get_redis_sync().close()
        get_redis_sync.cache_clear()
