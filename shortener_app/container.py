"""
Explicitly constructed service graph with a startup/shutdown lifecycle.

One container per process (or per test). The FastAPI lifespan creates it
and stores it on app.state; dependencies read it from there.
"""

import logging
from typing import Optional

from shortener_app.cache.factory import CacheBackend, CacheFactory
from shortener_app.cache.keys import CacheKeySchema
from shortener_app.cache.link_cache import LinkCache
from shortener_app.cache.strategies import CacheStrategy
from shortener_app.config import Settings
from shortener_app.database.connection import build_engine, build_session_factory
from shortener_app.services.background import BackgroundTaskRunner
from shortener_app.services.hit_tracker import HitTracker
from shortener_app.services.short_code_factory import ShortCodeFactory
from shortener_app.services.url_service import URLService
from shortener_app.storage.strategies import SQLAlchemyLinkStore

logger = logging.getLogger(__name__)


class ServiceContainer:

    def __init__(self, settings: Settings, cache: Optional[CacheStrategy] = None):
        """
        Args:
            settings: Application settings
            cache: Pre-built cache backend; built from settings when omitted
        """
        self.settings = settings

        self.engine = build_engine(settings.database_url)
        self.session_factory = build_session_factory(self.engine)
        self.store = SQLAlchemyLinkStore(self.session_factory)

        self.cache = cache or CacheFactory.create(CacheBackend(settings.cache_backend), settings)
        keys = CacheKeySchema(settings.cache_key_prefix)
        self.link_cache = LinkCache(self.cache, keys=keys, default_ttl=settings.cache_ttl)
        self.hit_tracker = HitTracker(
            self.cache,
            keys=keys,
            counter_ttl=settings.hit_counter_ttl,
            popular_threshold=settings.popular_threshold,
            popular_ttl=settings.popular_ttl,
        )

        self.generator = ShortCodeFactory.create_strategy(self.store, settings=settings)
        self.background = BackgroundTaskRunner()
        self.url_service = URLService(
            store=self.store,
            link_cache=self.link_cache,
            hit_tracker=self.hit_tracker,
            generator=self.generator,
            background=self.background,
        )

    async def startup(self) -> None:
        self.store.create_schema()
        if await self.cache.connect():
            logger.info("Cache enabled (%s)", self.settings.cache_backend)
            # Popularity markers may have expired while counters survived
            await self.hit_tracker.rebuild_popular()
        else:
            logger.warning("Cache not available, using database only")

    async def shutdown(self) -> None:
        pending = await self.background.drain(timeout=self.settings.shutdown_drain_timeout)
        if pending:
            logger.warning("Shutting down with %d hit increments unfinished", pending)
        await self.cache.close()
        self.engine.dispose()
        logger.info("Services shut down")
