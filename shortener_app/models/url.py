from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from shortener_app.database.connection import Base


class ShortLink(Base):
    """
    Canonical copy of a short link.

    The durable store owns this row; the cache only ever mirrors it.
    Both short_id and long_url are unique: the first keeps identifiers
    collision free, the second makes shortening idempotent even when two
    requests race past the existence check.
    """
    __tablename__ = "short_links"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # unique=True plus index=True creates a unique index
    short_id = Column(String(16), unique=True, nullable=False, index=True)
    long_url = Column(String, unique=True, nullable=False)
    hits = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)  # Modeled, unused
    created_by = Column(String, nullable=True)


class Counter(Base):
    """Named monotonic sequence used by the base62 short id strategy."""
    __tablename__ = "counters"

    name = Column(String(64), primary_key=True)
    value = Column(Integer, nullable=False, default=0)
