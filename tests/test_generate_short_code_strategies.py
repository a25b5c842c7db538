"""
Tests for short id generation strategies.
"""
import string
from unittest.mock import MagicMock

import pytest

from shortener_app.config import Settings
from shortener_app.exceptions import GenerationExhaustedError
from shortener_app.services.short_code_strategies import (
    RandomShortCodeStrategy,
    Base62ShortCodeStrategy
)
from shortener_app.services.short_code_factory import (
    ShortCodeFactory,
    ShortCodeStrategyType
)
from shortener_app.storage.strategies import LinkStore


@pytest.fixture
def mock_store():
    store = MagicMock(spec=LinkStore)
    store.exists.return_value = False
    return store


class TestRandomStrategy:
    """Test random generation with collision checks"""

    def test_generates_seven_alphanumeric_characters(self, mock_store):
        strategy = RandomShortCodeStrategy(mock_store)

        code = strategy.generate()

        assert len(code) == 7
        assert set(code) <= set(string.ascii_letters + string.digits)
        mock_store.exists.assert_called_once_with(code)

    def test_retries_on_collision(self, mock_store):
        mock_store.exists.side_effect = [True, True, False]
        strategy = RandomShortCodeStrategy(mock_store, max_retries=10)

        strategy.generate()

        assert mock_store.exists.call_count == 3

    def test_exhaustion_raises(self, mock_store):
        mock_store.exists.return_value = True
        strategy = RandomShortCodeStrategy(mock_store, max_retries=10)

        with pytest.raises(GenerationExhaustedError) as exc_info:
            strategy.generate()

        assert exc_info.value.attempts == 10
        assert mock_store.exists.call_count == 10

    def test_codes_vary(self, mock_store):
        strategy = RandomShortCodeStrategy(mock_store)

        codes = {strategy.generate() for _ in range(200)}

        assert len(codes) == 200

    def test_against_real_store(self, store):
        strategy = RandomShortCodeStrategy(store, length=7)
        assert len(strategy.generate()) == 7


class TestBase62Strategy:
    """Test counter-based Base62 strategy"""

    @pytest.mark.parametrize("number, encoded", [
        (0, "0"),
        (61, "z"),
        (62, "10"),
        (3843, "zz"),
    ])
    def test_base62_encode(self, number, encoded):
        assert Base62ShortCodeStrategy.base62_encode(number) == encoded

    def test_negative_numbers_rejected(self):
        with pytest.raises(ValueError):
            Base62ShortCodeStrategy.base62_encode(-1)

    def test_pads_to_min_length(self, mock_store):
        mock_store.next_sequence.return_value = 1
        strategy = Base62ShortCodeStrategy(mock_store, min_length=7)

        assert strategy.generate() == "0000001"
        mock_store.next_sequence.assert_called_once_with("url_count")

    def test_salt_offsets_sequence(self, mock_store):
        mock_store.next_sequence.return_value = 1
        strategy = Base62ShortCodeStrategy(mock_store, salt=61, min_length=7)

        assert strategy.generate() == "0000010"

    def test_sequence_codes_are_unique(self, store):
        strategy = Base62ShortCodeStrategy(store, min_length=7)

        codes = [strategy.generate() for _ in range(100)]

        assert len(set(codes)) == 100
        assert all(len(code) == 7 for code in codes)


class TestShortCodeFactory:
    """Test strategy factory"""

    def test_creates_random_strategy(self, mock_store):
        strategy = ShortCodeFactory.create_strategy(mock_store, ShortCodeStrategyType.RANDOM)
        assert isinstance(strategy, RandomShortCodeStrategy)

    def test_creates_base62_strategy(self, mock_store):
        strategy = ShortCodeFactory.create_strategy(mock_store, ShortCodeStrategyType.BASE62)
        assert isinstance(strategy, Base62ShortCodeStrategy)

    def test_creates_default_from_settings(self, mock_store):
        settings = Settings(_env_file=None, short_code_strategy="random", short_url_length=9, max_retries=3)

        strategy = ShortCodeFactory.create_strategy(mock_store, settings=settings)

        assert isinstance(strategy, RandomShortCodeStrategy)
        assert strategy.length == 9
        assert strategy.max_retries == 3

    def test_unknown_strategy_in_settings(self, mock_store):
        settings = Settings(_env_file=None, short_code_strategy="sequential")

        with pytest.raises(ValueError):
            ShortCodeFactory.create_strategy(mock_store, settings=settings)
