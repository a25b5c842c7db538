"""
Durable record store for short links.
Implements Strategy Pattern so the SQL backend can be swapped out.
"""

from .strategies import LinkStore, SQLAlchemyLinkStore

__all__ = [
    "LinkStore",
    "SQLAlchemyLinkStore",
]
