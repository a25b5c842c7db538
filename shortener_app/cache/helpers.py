import functools
import logging
from typing import Any, Callable, TypeVar


__all__ = ['fail_open']

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def fail_open(fallback: Callable[[], Any]) -> Callable[[F], F]:
    """Wrap async cache-facing methods so no cache error escapes them

    Args:
        fallback (Callable[[], Any]):
            Zero-argument factory for the result returned instead, e.g.
            `lambda: None`, `list`, `int`.

    Example:
        >>> @fail_open(lambda: None)
        ... async def get(self, short_id):
        ...     return await self.cache.get(short_id)
    """

    def decorator(method: F) -> F:
        @functools.wraps(method)
        async def wrapper(self, *args, **kwargs):
            try:
                return await method(self, *args, **kwargs)
            except Exception as e:
                logger.warning(
                    "%s.%s failed, continuing without cache: %s",
                    type(self).__name__, method.__name__, e,
                )
                return fallback()

        return wrapper

    return decorator
