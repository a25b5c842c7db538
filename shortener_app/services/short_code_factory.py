"""
Factory for creating short id generation strategies.
"""

from enum import Enum
from shortener_app.services.short_code_strategies import (
    ShortCodeStrategy,
    RandomShortCodeStrategy,
    Base62ShortCodeStrategy
)
from shortener_app.config import Settings, settings as default_settings
from shortener_app.storage.strategies import LinkStore


class ShortCodeStrategyType(Enum):
    """Available short id generation strategies"""
    RANDOM = "random"
    BASE62 = "base62"


class ShortCodeFactory:
    """Factory for creating short id generation strategies"""

    @classmethod
    def create_strategy(
        cls,
        store: LinkStore,
        strategy_type: ShortCodeStrategyType = None,
        settings: Settings = None
    ) -> ShortCodeStrategy:
        """
        Create a short id generation strategy bound to a store.

        Args:
            store: Durable store used for uniqueness checks / counters
            strategy_type: Type of strategy to create.
                          If None, uses value from settings.
            settings: Settings to read lengths and limits from

        Returns:
            A ShortCodeStrategy instance

        Raises:
            ValueError: If strategy_type is unknown
        """
        settings = settings or default_settings

        if strategy_type is None:
            strategy_type = ShortCodeStrategyType(settings.short_code_strategy)

        if strategy_type == ShortCodeStrategyType.RANDOM:
            return RandomShortCodeStrategy(
                store,
                length=settings.short_url_length,
                max_retries=settings.max_retries
            )
        if strategy_type == ShortCodeStrategyType.BASE62:
            return Base62ShortCodeStrategy(
                store,
                salt=settings.short_code_salt,
                min_length=settings.short_url_length
            )

        raise ValueError(f"Unknown strategy type: {strategy_type}")
