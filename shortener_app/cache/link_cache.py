"""
Volatile lookup cache for short link records.

Read-through, write-around:
- Redirects read the cache first and repopulate it from the database on a miss
- Shortening writes to the database, then pushes the new record here

The cached `hits` figure is informational only. The database count is
authoritative; a put never lowers a cached figure, so reads through the
cache never see hits go backwards.

Every method is wrapped with fail_open: a broken or unreachable backend
looks like an empty cache to the caller.
"""

from typing import Optional
import logging

from pydantic import ValidationError

from shortener_app.cache.helpers import fail_open
from shortener_app.cache.keys import CacheKeySchema
from shortener_app.cache.strategies import CacheStrategy
from shortener_app.schemas.url import CacheStats, ShortLinkRecord

logger = logging.getLogger(__name__)


class LinkCache:

    def __init__(
        self,
        cache: CacheStrategy,
        keys: Optional[CacheKeySchema] = None,
        default_ttl: int = 3600,
    ):
        """
        Args:
            cache: Backend strategy (Redis, in-memory, null)
            keys: Key schema; defaults to unprefixed keys
            default_ttl: Seconds a cached record lives
        """
        self.cache = cache
        self.keys = keys or CacheKeySchema()
        self.default_ttl = default_ttl

    @fail_open(lambda: None)
    async def get(self, short_id: str) -> Optional[ShortLinkRecord]:
        """Cached copy or None. Never consults the database."""
        raw = await self.cache.get(self.keys.link_key(short_id))
        if raw is None:
            logger.debug("Cache MISS for %s", short_id)
            return None
        logger.debug("Cache HIT for %s", short_id)
        return ShortLinkRecord.model_validate_json(raw)

    @fail_open(lambda: False)
    async def put(self, record: ShortLinkRecord, ttl: Optional[int] = None) -> bool:
        """Store a serialized copy with an expiry, replacing any existing entry."""
        key = self.keys.link_key(record.short_id)
        raw = await self.cache.get(key)
        cached = self._parse(raw) if raw is not None else None
        if cached is not None and cached.hits > record.hits:
            record = record.model_copy(update={"hits": cached.hits})
        stored = await self.cache.set(key, record.model_dump_json(), ttl=ttl or self.default_ttl)
        logger.debug("Cached %s", record.short_id)
        return bool(stored)

    @staticmethod
    def _parse(raw: str) -> Optional[ShortLinkRecord]:
        # Corrupt or stale-schema entries are overwritten
        try:
            return ShortLinkRecord.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable cache entry")
            return None

    @fail_open(lambda: False)
    async def invalidate(self, short_id: str) -> bool:
        removed = await self.cache.delete(self.keys.link_key(short_id))
        logger.info("Invalidated cache for %s", short_id)
        return removed

    @fail_open(lambda: False)
    async def clear(self) -> bool:
        cleared = await self.cache.clear()
        logger.info("Cleared all cache entries")
        return cleared

    @fail_open(lambda: CacheStats(connected=False, info=None))
    async def stats(self) -> CacheStats:
        info = await self.cache.info()
        return CacheStats(connected=self.cache.connected, info=info)
