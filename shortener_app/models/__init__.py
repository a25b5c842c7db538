"""
Database models for URL shortener.

Only the durable copy of each link lives here. Approximate hit counters
and popularity markers live in the volatile cache.
"""

from .url import ShortLink, Counter

__all__ = ["ShortLink", "Counter"]
