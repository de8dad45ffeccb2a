import redis

from openmic.core.config import get_redis_url


def get_redis_client():
    """Get a Redis client for sessions and per-event locks."""
    return redis.from_url(get_redis_url(), decode_responses=True)
