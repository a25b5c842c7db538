"""
Cache strategies using Strategy Pattern.
Allows switching between different cache backends (Redis, In-Memory, Null).

Backends are raw key-value stores. They raise CacheUnavailableError when
they cannot serve a request; turning that into a cache miss is the job of
the layers above (LinkCache, HitTracker).
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List, Tuple, Callable
import fnmatch
import logging
import threading
import time

import redis

from shortener_app.exceptions import CacheUnavailableError

logger = logging.getLogger(__name__)


class CacheStrategy(ABC):
    """
    Abstract base class for cache strategies.

    This is the Strategy Pattern interface - allows multiple cache implementations
    without changing the service layer code.

    All methods are async because cache operations involve I/O (network for Redis).
    """

    @property
    def connected(self) -> bool:
        """Whether the backend is currently believed to be reachable"""
        return True

    async def connect(self) -> bool:
        """
        Probe the backend once.

        Returns:
            True if the backend is usable
        """
        return True

    async def close(self) -> None:
        """Release backend resources"""
        pass

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        """
        Set value in cache with TTL (Time To Live), overwriting any existing value.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time to live in seconds (default: 1 hour)

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete key from cache.

        Returns:
            True if deleted, False if key didn't exist
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if key exists in cache."""
        pass

    @abstractmethod
    async def incr(self, key: str, ttl: int) -> int:
        """
        Atomically increment an integer counter and (re)set its expiry.

        Args:
            key: Counter key
            ttl: Expiry in seconds applied after the increment

        Returns:
            The counter value after the increment
        """
        pass

    @abstractmethod
    async def keys(self, pattern: str) -> List[str]:
        """
        List keys matching a glob-style pattern.

        Args:
            pattern: Pattern such as "popular:*"
        """
        pass

    @abstractmethod
    async def clear(self) -> bool:
        """
        Clear all cache entries.

        Returns:
            True if successful
        """
        pass

    @abstractmethod
    async def info(self) -> Dict[str, Any]:
        """Backend statistics for observability"""
        pass


class RedisCache(CacheStrategy):
    """
    Redis cache implementation.

    Production cache with:
    - Distributed caching (multiple servers can share cache)
    - Atomic operations (INCR inside MULTI for hit counters)
    - TTL support

    The client is created with short socket timeouts. After a connection
    error or timeout the server is considered down for `reconnect_interval`
    seconds: calls in that window fail immediately without touching the
    network, the first call after it is a single reconnect attempt.
    """

    INFO_FIELDS = (
        "redis_version",
        "uptime_in_seconds",
        "connected_clients",
        "used_memory_human",
        "keyspace_hits",
        "keyspace_misses",
        "evicted_keys",
    )

    def __init__(
        self,
        redis_client,
        reconnect_interval: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize Redis cache.

        Args:
            redis_client: Redis client instance (redis.Redis)
            reconnect_interval: Seconds to stay in fail-fast mode after a connection error
            clock: Monotonic time source
        """
        self.redis = redis_client
        self.reconnect_interval = reconnect_interval
        self._clock = clock
        self._connected = False
        self._down_since: Optional[float] = None

    @property
    def connected(self) -> bool:
        return self._connected

    def _should_attempt(self) -> bool:
        if self._down_since is None:
            return True
        if self._clock() - self._down_since >= self.reconnect_interval:
            # Half-open: let this call through, keep others failing fast
            self._down_since = self._clock()
            return True
        return False

    def _mark_down(self, error: Exception) -> None:
        if self._connected or self._down_since is None:
            logger.warning(
                "Redis unavailable, serving from the database for the next %.0fs: %s",
                self.reconnect_interval, error,
            )
        self._connected = False
        self._down_since = self._clock()

    def _mark_up(self) -> None:
        if not self._connected:
            if self._down_since is not None:
                logger.info("Redis connection restored")
            self._connected = True
        self._down_since = None

    def _execute(self, operation: Callable[[], Any]) -> Any:
        if not self._should_attempt():
            raise CacheUnavailableError("Redis is marked down")
        try:
            result = operation()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            self._mark_down(e)
            raise CacheUnavailableError(f"Redis connection failed: {e}") from e
        except redis.exceptions.RedisError as e:
            raise CacheUnavailableError(f"Redis command failed: {e}") from e
        self._mark_up()
        return result

    @staticmethod
    def _decode(value) -> Optional[str]:
        if value is None:
            return None
        return value.decode('utf-8') if isinstance(value, bytes) else value

    async def connect(self) -> bool:
        """PING once; failures leave the cache in fail-fast mode"""
        try:
            self._execute(self.redis.ping)
        except CacheUnavailableError:
            return False
        return True

    async def close(self) -> None:
        try:
            self.redis.close()
        except redis.exceptions.RedisError as e:
            logger.warning("Error closing Redis client: %s", e)
        self._connected = False

    async def get(self, key: str) -> Optional[str]:
        """Get value from Redis"""
        return self._decode(self._execute(lambda: self.redis.get(key)))

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        """Set value in Redis with TTL"""
        if ttl > 0:
            return bool(self._execute(lambda: self.redis.setex(key, ttl, value)))
        return bool(self._execute(lambda: self.redis.set(key, value)))

    async def delete(self, key: str) -> bool:
        """Delete key from Redis"""
        return bool(self._execute(lambda: self.redis.delete(key)))

    async def exists(self, key: str) -> bool:
        """Check if key exists in Redis"""
        return bool(self._execute(lambda: self.redis.exists(key)))

    async def incr(self, key: str, ttl: int) -> int:
        """INCR and EXPIRE in one MULTI/EXEC transaction"""
        def _incr():
            pipe = self.redis.pipeline(transaction=True)
            pipe.incr(key)
            pipe.expire(key, ttl)
            count, _ = pipe.execute()
            return int(count)

        return self._execute(_incr)

    async def keys(self, pattern: str) -> List[str]:
        """SCAN instead of KEYS so large keyspaces don't block the server"""
        return self._execute(
            lambda: [self._decode(key) for key in self.redis.scan_iter(match=pattern)]
        )

    async def clear(self) -> bool:
        """Clear all Redis keys in the current database (use with caution!)"""
        self._execute(self.redis.flushdb)
        return True

    async def info(self) -> Dict[str, Any]:
        raw = self._execute(self.redis.info)
        return {field: raw[field] for field in self.INFO_FIELDS if field in raw}


class InMemoryCache(CacheStrategy):
    """
    In-memory cache implementation using Python dict.

    Pros:
    - Very fast (no network overhead)
    - Simple (no external dependencies)
    - Good for development and testing

    Cons:
    - Not distributed (each server has its own cache)
    - Lost on restart

    Expired entries are dropped lazily when they are read.
    Note: Async for interface consistency, but operations are instant.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """Initialize in-memory cache"""
        self._cache: Dict[str, Tuple[str, Optional[float]]] = {}
        self._clock = clock
        self._lock = threading.Lock()

    def _live_value(self, key: str) -> Optional[str]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            del self._cache[key]
            return None
        return value

    def _expiry(self, ttl: int) -> Optional[float]:
        return self._clock() + ttl if ttl > 0 else None

    async def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._live_value(key)

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        with self._lock:
            self._cache[key] = (value, self._expiry(ttl))
        return True

    async def delete(self, key: str) -> bool:
        with self._lock:
            if self._live_value(key) is None:
                return False
            del self._cache[key]
            return True

    async def exists(self, key: str) -> bool:
        with self._lock:
            return self._live_value(key) is not None

    async def incr(self, key: str, ttl: int) -> int:
        with self._lock:
            count = int(self._live_value(key) or 0) + 1
            self._cache[key] = (str(count), self._expiry(ttl))
            return count

    async def keys(self, pattern: str) -> List[str]:
        with self._lock:
            return [
                key for key in list(self._cache)
                if fnmatch.fnmatchcase(key, pattern) and self._live_value(key) is not None
            ]

    async def clear(self) -> bool:
        with self._lock:
            self._cache.clear()
        return True

    async def info(self) -> Dict[str, Any]:
        with self._lock:
            return {"backend": "memory", "keys": len(self._cache)}


class NullCache(CacheStrategy):
    """
    Null Object Pattern - cache that does nothing.

    Used for:
    - Testing (when you want to test without cache)
    - Disabling cache in certain environments

    All operations succeed but don't actually cache anything.
    """

    @property
    def connected(self) -> bool:
        return False

    async def get(self, key: str) -> Optional[str]:
        """Always returns None (cache miss)"""
        return None

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        """Pretends to set but does nothing"""
        return True

    async def delete(self, key: str) -> bool:
        return True

    async def exists(self, key: str) -> bool:
        return False

    async def incr(self, key: str, ttl: int) -> int:
        """No counters are kept"""
        return 0

    async def keys(self, pattern: str) -> List[str]:
        return []

    async def clear(self) -> bool:
        return True

    async def info(self) -> Dict[str, Any]:
        return {"backend": "null"}
