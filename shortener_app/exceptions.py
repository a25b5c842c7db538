"""
Custom Exceptions

Error taxonomy for the shortening and redirect workflows.

Only ShortIdNotFoundError and ShorteningFailedError (plus the upstream
ValidationFailedError) are meant to reach callers. Cache and counter
errors are absorbed by the service layer and only logged.
"""


class URLShortenerError(Exception):
    """Base exception for URL shortener service."""
    pass


class ValidationFailedError(URLShortenerError):
    """Raised when a long URL is rejected before reaching the service."""

    def __init__(self, url: str, reason: str = "Invalid URL format"):
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url}")


class ShortIdNotFoundError(URLShortenerError):
    """Raised when a short id has no durable record."""

    def __init__(self, short_id: str):
        self.short_id = short_id
        super().__init__(f"Short id '{short_id}' not found")


class DuplicateKeyError(URLShortenerError):
    """Raised by the durable store when a unique constraint is violated."""

    def __init__(self, short_id: str, original_error: Exception = None):
        self.short_id = short_id
        self.original_error = original_error
        super().__init__(f"Short link '{short_id}' violates a uniqueness constraint")


class GenerationExhaustedError(URLShortenerError):
    """Raised when no unique short id was found within the attempt bound."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Could not generate unique short id after {attempts} attempts")


class ShorteningFailedError(URLShortenerError):
    """Raised when the shortening workflow cannot persist a new record."""

    def __init__(self, long_url: str, reason: str):
        self.long_url = long_url
        self.reason = reason
        super().__init__(f"Could not shorten {long_url}: {reason}")


class CacheUnavailableError(URLShortenerError):
    """Raised by cache backends; never surfaced past the cache layer."""
    pass


class CounterUpdateFailedError(URLShortenerError):
    """Raised when a hit counter could not be updated; only logged."""

    def __init__(self, short_id: str, original_error: Exception = None):
        self.short_id = short_id
        self.original_error = original_error
        super().__init__(f"Failed to update hit counter for '{short_id}': {original_error}")
