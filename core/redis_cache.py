from __future__ import annotations

from functools import lru_cache

import redis

from core.settings import get_settings


@lru_cache(maxsize=1)
def get_cache_db() -> redis.Redis | None:
    """Geocoding cache client, or None when REDIS_URL is not configured."""
    redis_url = get_settings().redis_url
    if not redis_url:
        return None
    return redis.Redis.from_url(redis_url, socket_connect_timeout=2, decode_responses=True)
