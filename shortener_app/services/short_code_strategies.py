"""
Short id generation strategies for URL shortener.
Uses Strategy Pattern to allow different generation algorithms.
"""

import secrets
import string
import logging
from abc import ABC, abstractmethod

from shortener_app.exceptions import GenerationExhaustedError
from shortener_app.storage.strategies import LinkStore

logger = logging.getLogger(__name__)


class ShortCodeStrategy(ABC):
    """Abstract base class for short id generation strategies"""

    @abstractmethod
    def generate(self) -> str:
        """
        Generate a short id.

        Returns:
            A URL-safe short id not yet present in the store

        Raises:
            GenerationExhaustedError: if no unique id could be produced
        """
        pass


class RandomShortCodeStrategy(ShortCodeStrategy):
    """
    Random generation strategy.
    Draws a fixed-length id and checks the store for uniqueness.

    Pros: Unpredictable, no central counter
    Cons: One DB read per attempt, collisions possible (and checked)

    The check only lowers the collision chance; the store's unique
    constraint is what guarantees uniqueness.
    """

    CHARACTERS = string.ascii_letters + string.digits

    def __init__(self, store: LinkStore, length: int = 7, max_retries: int = 10):
        self.store = store
        self.length = length
        self.max_retries = max_retries

    def generate(self) -> str:
        """Generate random short id with collision checking"""
        for attempt in range(1, self.max_retries + 1):
            short_id = self._generate_random_string()

            if not self.store.exists(short_id):
                return short_id

            logger.info("Short id collision on attempt %d/%d", attempt, self.max_retries)

        raise GenerationExhaustedError(self.max_retries)

    def _generate_random_string(self) -> str:
        """Generate a random string of specified length from a CSPRNG"""
        return ''.join(secrets.choice(self.CHARACTERS) for _ in range(self.length))


class Base62ShortCodeStrategy(ShortCodeStrategy):
    """
    Counter-based strategy.
    Atomically increments a durable counter and Base62-encodes it.

    Pros: No collisions, no existence checks
    Cons: Predictable, needs a centrally incremented counter
    """

    BASE62_CHARS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
    COUNTER_NAME = "url_count"

    def __init__(self, store: LinkStore, salt: int = 0, min_length: int = 7):
        self.store = store
        self.salt = salt
        self.min_length = min_length

    def generate(self) -> str:
        """
        Process:
        1. Increment the durable counter
        2. Add salt
        3. Encode to Base62, left-padded to min_length
        """
        sequence = self.store.next_sequence(self.COUNTER_NAME)
        return self.base62_encode(sequence + self.salt).rjust(self.min_length, self.BASE62_CHARS[0])

    @classmethod
    def base62_encode(cls, number: int) -> str:
        """
        Convert integer to Base62 string.

        Base62 uses: 0-9 (10) + A-Z (26) + a-z (26) = 62 characters
        """
        if number < 0:
            raise ValueError(f"Cannot encode negative number: {number}")
        if number == 0:
            return cls.BASE62_CHARS[0]

        result = ""
        while number > 0:
            result = cls.BASE62_CHARS[number % 62] + result
            number //= 62

        return result
