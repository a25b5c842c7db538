"""
Test configuration and fixtures for the URL shortener.
This centralizes all test setup, making individual tests clean.
"""

from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shortener_app.cache.keys import CacheKeySchema
from shortener_app.cache.link_cache import LinkCache
from shortener_app.cache.strategies import CacheStrategy, InMemoryCache
from shortener_app.config import Settings
from shortener_app.database.connection import build_engine, build_session_factory
from shortener_app.exceptions import CacheUnavailableError
from shortener_app.services.background import BackgroundTaskRunner
from shortener_app.services.hit_tracker import HitTracker
from shortener_app.services.short_code_strategies import RandomShortCodeStrategy
from shortener_app.services.url_service import URLService
from shortener_app.storage.strategies import SQLAlchemyLinkStore


class UnavailableCache(CacheStrategy):
    """Backend that fails every call, like a Redis server that is down"""

    def __init__(self):
        self.calls = 0

    @property
    def connected(self) -> bool:
        return False

    async def connect(self) -> bool:
        return False

    def _fail(self):
        self.calls += 1
        raise CacheUnavailableError("cache is down")

    async def get(self, key: str) -> Optional[str]:
        self._fail()

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        self._fail()

    async def delete(self, key: str) -> bool:
        self._fail()

    async def exists(self, key: str) -> bool:
        self._fail()

    async def incr(self, key: str, ttl: int) -> int:
        self._fail()

    async def keys(self, pattern: str) -> List[str]:
        self._fail()

    async def clear(self) -> bool:
        self._fail()

    async def info(self) -> Dict[str, Any]:
        self._fail()


class FakeClock:
    """Manually advanced monotonic clock"""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def test_settings(database_url) -> Settings:
    return Settings(
        _env_file=None,
        database_url=database_url,
        cache_backend="memory",
        base_url="http://sho.rt",
        log_level="WARNING",
    )


@pytest.fixture(scope="function")
def store(database_url):
    """
    Create a fresh database for each test.
    This ensures tests are isolated and don't affect each other.
    """
    engine = build_engine(database_url)
    link_store = SQLAlchemyLinkStore(build_session_factory(engine))
    link_store.create_schema()

    try:
        yield link_store
    finally:
        engine.dispose()


@pytest.fixture
def keys() -> CacheKeySchema:
    return CacheKeySchema()


@pytest.fixture
def memory_cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def unavailable_cache() -> UnavailableCache:
    return UnavailableCache()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


def build_service(store, cache: CacheStrategy, keys: CacheKeySchema) -> URLService:
    return URLService(
        store=store,
        link_cache=LinkCache(cache, keys=keys),
        hit_tracker=HitTracker(cache, keys=keys),
        generator=RandomShortCodeStrategy(store),
        background=BackgroundTaskRunner(),
    )


@pytest.fixture
def url_service(store, memory_cache, keys) -> URLService:
    return build_service(store, memory_cache, keys)


@pytest.fixture
def degraded_service(store, unavailable_cache, keys) -> URLService:
    """Service whose cache backend is down"""
    return build_service(store, unavailable_cache, keys)


@pytest.fixture(scope="function")
def client(test_settings):
    """
    Create a test client running the full app lifespan.
    This is the main fixture that API tests will use.
    """
    app = create_app(test_settings)

    with TestClient(app) as test_client:
        yield test_client
