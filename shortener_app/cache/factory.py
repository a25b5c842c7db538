"""
Factory for creating cache instances.
Simple, clean factory; the service container owns the created instance.
"""

from enum import Enum
import logging

import redis

from .strategies import CacheStrategy, RedisCache, InMemoryCache, NullCache
from shortener_app.config import Settings

logger = logging.getLogger(__name__)


class CacheBackend(Enum):
    """Available cache backends"""
    REDIS = "redis"
    MEMORY = "memory"
    NULL = "null"


class CacheFactory:
    """
    Simple factory for creating cache instances.

    Redis clients are lazy: nothing connects until the first command, so
    creating the cache never blocks or fails. An unreachable server is
    handled by RedisCache itself (fail fast, retry after an interval).
    """

    @classmethod
    def create(cls, backend: CacheBackend, settings: Settings) -> CacheStrategy:
        """
        Create a cache instance.

        Args:
            backend: Type of cache backend (from enum)
            settings: Redis URL, timeouts and reconnect interval

        Returns:
            Cache strategy instance
        """
        if backend == CacheBackend.REDIS:
            redis_client = redis.from_url(
                settings.redis_url,
                decode_responses=False,
                socket_connect_timeout=settings.cache_socket_timeout,
                socket_timeout=settings.cache_socket_timeout,
            )
            logger.info("Redis cache configured (%s)", settings.redis_url)
            return RedisCache(redis_client, reconnect_interval=settings.cache_reconnect_interval)

        if backend == CacheBackend.MEMORY:
            logger.info("In-memory cache initialized")
            return InMemoryCache()

        if backend == CacheBackend.NULL:
            logger.info("Null cache initialized, caching disabled")
            return NullCache()

        raise ValueError(f"Unknown cache backend: {backend}")
