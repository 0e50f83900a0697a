"""
Redis caching utilities for the Scanner service.

Holds a short-lived copy of the inventory snapshot so repeated scans do not
refetch the whole store. Cache failures are logged and treated as a miss.
"""
import json
import logging
from typing import Optional, Any
import redis

from .config import REDIS_URL, CACHE_ENABLED

logger = logging.getLogger(__name__)

# Initialize Redis client (connects lazily on first command)
redis_client = redis.from_url(REDIS_URL, decode_responses=True)


def get_cache(key: str) -> Optional[Any]:
    """
    Get a value from Redis cache.

    Args:
        key: Cache key

    Returns:
        Cached value or None if not found
    """
    if not CACHE_ENABLED:
        return None
    try:
        value = redis_client.get(key)
        if value:
            return json.loads(value)
        return None
    except redis.RedisError as e:
        logger.warning(f"Cache get error: {e}")
        return None

def set_cache(key: str, value: Any, ttl: int = 5) -> bool:
    """
    Set a value in Redis cache with TTL.

    Args:
        key: Cache key
        value: Value to cache (will be JSON serialized)
        ttl: Time to live in seconds

    Returns:
        True if successful, False otherwise
    """
    if not CACHE_ENABLED:
        return False
    try:
        redis_client.setex(key, ttl, json.dumps(value))
        return True
    except redis.RedisError as e:
        logger.warning(f"Cache set error: {e}")
        return False

def delete_cache(key: str) -> bool:
    """
    Delete a key from Redis cache.

    Args:
        key: Cache key to delete

    Returns:
        True if successful, False otherwise
    """
    if not CACHE_ENABLED:
        return False
    try:
        redis_client.delete(key)
        return True
    except redis.RedisError as e:
        logger.warning(f"Cache delete error: {e}")
        return False
