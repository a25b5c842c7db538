import functools
from typing import Callable, Optional


__all__ = ['CacheKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class CacheKeySchema:
    """Namespaced cache keys, one prefix per concern.

    - url:<short_id>      cached link records
    - hits:<short_id>     approximate hit counters
    - popular:<short_id>  popularity markers

    An optional prefix namespaces every key, e.g. "shortener:prod".
    """

    URL = 'url'
    HITS = 'hits'
    POPULAR = 'popular'

    def __init__(self, prefix: Optional[str] = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix or None

    @prefix_key
    def link_key(self, short_id: str) -> str:
        return f'{self.URL}:{short_id}'

    @prefix_key
    def hits_key(self, short_id: str) -> str:
        return f'{self.HITS}:{short_id}'

    @prefix_key
    def popular_key(self, short_id: str) -> str:
        return f'{self.POPULAR}:{short_id}'

    @prefix_key
    def hits_pattern(self) -> str:
        return f'{self.HITS}:*'

    @prefix_key
    def popular_pattern(self) -> str:
        return f'{self.POPULAR}:*'

    def short_id_from_key(self, key: str) -> str:
        """Strip prefix and concern from a key produced by this schema"""
        return key.rsplit(':', 1)[-1]
