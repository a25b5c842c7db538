"""
Approximate hit tracking in the cache.

Each redirect bumps a short-lived counter (hits:<id>). Links whose counter
passes a threshold get a popularity marker (popular:<id>) used for ranking.

These figures are fast and disposable. The durable hit count is updated
separately by the redirect workflow and is the only authoritative one;
the two are never assumed to be equal.
"""

import json
import logging
from typing import List, Optional

from shortener_app.cache.helpers import fail_open
from shortener_app.cache.keys import CacheKeySchema
from shortener_app.cache.strategies import CacheStrategy
from shortener_app.schemas.url import PopularLink

logger = logging.getLogger(__name__)


class HitTracker:

    def __init__(
        self,
        cache: CacheStrategy,
        keys: Optional[CacheKeySchema] = None,
        counter_ttl: int = 86400,
        popular_threshold: int = 10,
        popular_ttl: int = 86400,
    ):
        self.cache = cache
        self.keys = keys or CacheKeySchema()
        self.counter_ttl = counter_ttl
        self.popular_threshold = popular_threshold
        self.popular_ttl = popular_ttl

    @fail_open(int)
    async def record_hit(self, short_id: str) -> int:
        """
        Increment the approximate counter for a short id.

        Returns:
            Current approximate count, or 0 if the cache is unavailable
        """
        count = await self.cache.incr(self.keys.hits_key(short_id), ttl=self.counter_ttl)

        if count > self.popular_threshold:
            await self._mark_popular(short_id, count)

        logger.debug("Tracked hit for %s, approximate total %d", short_id, count)
        return count

    async def _mark_popular(self, short_id: str, count: int) -> None:
        payload = json.dumps({"short_id": short_id, "hits": count})
        await self.cache.set(self.keys.popular_key(short_id), payload, ttl=self.popular_ttl)

    @fail_open(list)
    async def popular(self, limit: int = 10) -> List[PopularLink]:
        """Popular links, highest approximate count first"""
        links = []
        for key in await self.cache.keys(self.keys.popular_pattern()):
            raw = await self.cache.get(key)
            if raw is not None:
                links.append(PopularLink.model_validate_json(raw))

        links.sort(key=lambda link: link.hits, reverse=True)
        return links[:limit]

    @fail_open(int)
    async def rebuild_popular(self) -> int:
        """
        Recompute popularity markers from the approximate counters.

        Returns:
            Number of short ids currently above the threshold
        """
        promoted = 0
        for key in await self.cache.keys(self.keys.hits_pattern()):
            raw = await self.cache.get(key)
            if raw is None:
                continue
            count = int(raw)
            if count > self.popular_threshold:
                await self._mark_popular(self.keys.short_id_from_key(key), count)
                promoted += 1

        logger.info("Rebuilt popularity registry, %d links above threshold", promoted)
        return promoted
