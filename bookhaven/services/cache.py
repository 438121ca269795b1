"""
Redis Caching Service

Caches external catalog responses (searches and volume lookups) so repeated
queries don't hit Google Books.

Features:
- One client per process, built in the app lifespan and closed on shutdown
- Cache key generation helper
- Automatic JSON serialization/deserialization
- Graceful degradation when Redis is unavailable

Usage:
    cache = connect_cache(settings)      # None when disabled/unreachable
    if cache is not None:
        cache.set(make_cache_key("volume", book_id), data, ttl=3600)
"""

import json
import logging
from typing import Any, Optional

import redis
from redis.exceptions import RedisError

from bookhaven.config import Settings

logger = logging.getLogger(__name__)


# =============================================================================
# Cache Key Generation
# =============================================================================

def make_cache_key(prefix: str, *args, **kwargs) -> str:
    """
    Generate a consistent cache key from prefix and arguments.

    Examples:
        make_cache_key("volume", "zyTCAlFPjgYC") -> "volume:zyTCAlFPjgYC"
        make_cache_key("search", q="dune", page=1) -> "search:page=1:q=dune"

    Args:
        prefix: Cache key prefix (e.g., "volume", "search")
        *args: Positional arguments to include in key
        **kwargs: Keyword arguments to include in key (sorted for consistency)
    """
    parts = [prefix]

    for arg in args:
        if arg is not None:
            parts.append(str(arg))

    for key in sorted(kwargs.keys()):
        value = kwargs[key]
        if value is not None:
            parts.append(f"{key}={value}")

    return ":".join(parts)


# =============================================================================
# Cache Wrapper
# =============================================================================

class RedisCache:
    """
    Thin JSON cache over a Redis client.

    Every operation swallows RedisError after logging it: a cache failure
    must never fail the request that tried to use it.
    """

    def __init__(self, client: redis.Redis, default_ttl: int = 300):
        self.client = client
        self.default_ttl = default_ttl

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if missing or on error."""
        try:
            value = self.client.get(key)
            if value is not None:
                logger.debug(f"Cache HIT: {key}")
                return json.loads(value)
            logger.debug(f"Cache MISS: {key}")
            return None
        except RedisError as e:
            logger.warning(f"Cache get error for {key}: {e}")
            return None
        except json.JSONDecodeError as e:
            logger.warning(f"Cache JSON decode error for {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store a value with a TTL (seconds). Returns True when cached."""
        if ttl is None:
            ttl = self.default_ttl

        try:
            serialized = json.dumps(value, default=str)  # default=str handles dates
            self.client.setex(key, ttl, serialized)
            logger.debug(f"Cache SET: {key} (TTL: {ttl}s)")
            return True
        except RedisError as e:
            logger.warning(f"Cache set error for {key}: {e}")
            return False
        except (TypeError, ValueError) as e:
            logger.warning(f"Cache serialization error for {key}: {e}")
            return False

    def stats(self) -> dict:
        """Cache statistics for the health endpoint."""
        try:
            info = self.client.info("stats")
            return {
                "status": "connected",
                "hits": info.get("keyspace_hits", 0),
                "misses": info.get("keyspace_misses", 0),
                "keys": self.client.dbsize(),
            }
        except RedisError:
            return {"status": "error"}

    def close(self) -> None:
        self.client.close()
        logger.info("Redis connection closed")


def connect_cache(settings: Settings) -> Optional[RedisCache]:
    """
    Connect to Redis and wrap the client.

    Returns:
        RedisCache, or None when caching is disabled or Redis is unreachable
    """
    if not settings.cache_enabled:
        logger.info("Caching disabled by configuration")
        return None

    try:
        client = redis.from_url(
            settings.redis_url,
            decode_responses=True,  # Return strings instead of bytes
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        client.ping()
        logger.info("Successfully connected to Redis")
        return RedisCache(client, default_ttl=settings.cache_ttl)
    except RedisError as e:
        logger.warning(f"Failed to connect to Redis: {e}. Caching disabled.")
        return None
