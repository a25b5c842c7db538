import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from shortener_app.cache.link_cache import LinkCache
from shortener_app.exceptions import (
    CounterUpdateFailedError,
    DuplicateKeyError,
    GenerationExhaustedError,
    ShortIdNotFoundError,
    ShorteningFailedError,
)
from shortener_app.schemas.url import CacheStats, PopularLink, ShortLinkRecord
from shortener_app.services.background import BackgroundTaskRunner
from shortener_app.services.hit_tracker import HitTracker
from shortener_app.services.short_code_strategies import ShortCodeStrategy
from shortener_app.storage.strategies import LinkStore

logger = logging.getLogger(__name__)


class URLService:
    """
    Shortening and redirect workflows.

    Dependencies are injected (not created internally):
    - store: durable record store, the source of truth
    - link_cache: volatile lookup cache, optional for correctness
    - hit_tracker: approximate counters in the cache
    - generator: short id strategy
    - background: runner for fire-and-forget hit increments

    Database operations are sync (fast, indexed); the redirect path runs
    them on worker threads. Cache operations are async. Only ShortIdNotFoundError and ShorteningFailedError escape.
    """

    # Insert attempts per shortening: the first plus one retry after a race
    PERSIST_ATTEMPTS = 2

    def __init__(
        self,
        store: LinkStore,
        link_cache: LinkCache,
        hit_tracker: HitTracker,
        generator: ShortCodeStrategy,
        background: Optional[BackgroundTaskRunner] = None,
    ):
        self.store = store
        self.link_cache = link_cache
        self.hit_tracker = hit_tracker
        self.generator = generator
        self.background = background or BackgroundTaskRunner()

    async def shorten(self, long_url: str, creator_identity: Optional[str] = None) -> ShortLinkRecord:
        """Turn a validated long URL into a short link record (idempotent per long URL)."""
        record, _ = await self.create_or_get(long_url, creator_identity)
        return record

    async def create_or_get(
        self, long_url: str, creator_identity: Optional[str] = None
    ) -> Tuple[ShortLinkRecord, bool]:
        """Shortening workflow; the flag tells whether a new record was created.

        Process:
        1. Deduplicate: an existing record for long_url is returned unchanged
        2. Generate a short id
        3. Persist with hits=0; a DuplicateKeyError means another request
           won a race, so steps 1-3 run once more
        4. Push the new record to the cache (best effort)

        Raises:
            ShorteningFailedError: if no id could be generated or persisted
        """
        for attempt in range(1, self.PERSIST_ATTEMPTS + 1):
            existing = self.store.find_by_long_url(long_url)
            if existing is not None:
                logger.debug("Returning existing short id %s for %s", existing.short_id, long_url)
                return existing, False

            try:
                short_id = self.generator.generate()
            except GenerationExhaustedError as e:
                logger.error("Short id generation exhausted for %s", long_url)
                raise ShorteningFailedError(long_url, str(e)) from e

            record = ShortLinkRecord(
                short_id=short_id,
                long_url=long_url,
                hits=0,
                created_at=datetime.now(timezone.utc),
                created_by=creator_identity,
            )
            try:
                created = self.store.insert(record)
            except DuplicateKeyError:
                logger.warning(
                    "Duplicate key inserting %s (attempt %d/%d)",
                    short_id, attempt, self.PERSIST_ATTEMPTS,
                )
                continue

            await self.link_cache.put(created)
            logger.info("Shortened %s -> %s", long_url, created.short_id)
            return created, True

        raise ShorteningFailedError(long_url, "duplicate key on every attempt")

    async def resolve(self, short_id: str) -> str:
        """Resolve a short id to its long URL and record the visit.

        Flow:
        1. Cache first
        2. On a miss, read the database on a worker thread and repopulate the cache
        3. Bump the approximate counter (best effort)
        4. Spawn the durable increment without awaiting it
        5. Return the long URL

        Raises:
            ShortIdNotFoundError: if the short id has no durable record
        """
        record = await self.link_cache.get(short_id)

        if record is None:
            record = await asyncio.to_thread(self.store.find_by_short_id, short_id)
            if record is None:
                raise ShortIdNotFoundError(short_id)
            await self.link_cache.put(record)

        await self.hit_tracker.record_hit(short_id)
        self.background.spawn(self._increment_hits(short_id), name=f"increment-hits:{short_id}")

        return record.long_url

    async def _increment_hits(self, short_id: str) -> int:
        # Worker thread so the event loop keeps serving redirects
        try:
            hits = await asyncio.to_thread(self.store.increment_hits, short_id)
        except Exception as e:
            raise CounterUpdateFailedError(short_id, e) from e
        logger.debug("Durable hits for %s now %d", short_id, hits)
        return hits

    async def get_link(self, short_id: str) -> ShortLinkRecord:
        """Authoritative record straight from the database (hits included)"""
        record = self.store.find_by_short_id(short_id)
        if record is None:
            raise ShortIdNotFoundError(short_id)
        return record

    async def list_all(self) -> List[ShortLinkRecord]:
        return self.store.list_all()

    async def cache_stats(self) -> CacheStats:
        return await self.link_cache.stats()

    async def popular_links(self, limit: int = 10) -> List[PopularLink]:
        return await self.hit_tracker.popular(limit)

    async def invalidate(self, short_id: str) -> bool:
        return await self.link_cache.invalidate(short_id)

    async def clear_cache(self) -> bool:
        return await self.link_cache.clear()
