"""
Durable record store strategies using Strategy Pattern.

The store is the source of truth for every short link:
- Exact lookups by short id and by long URL
- Inserts guarded by unique constraints
- Atomic hit increments (no read-modify-write)
- Named counters for sequence based short ids

Methods are synchronous (SQLAlchemy sessions). The service calls them
inline on the request path and from a worker thread for background
hit increments, so every call opens its own short-lived session.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from shortener_app.database.connection import Base
from shortener_app.exceptions import DuplicateKeyError, ShortIdNotFoundError
from shortener_app.models.url import ShortLink, Counter
from shortener_app.schemas.url import ShortLinkRecord

logger = logging.getLogger(__name__)


class LinkStore(ABC):
    """
    Abstract base class for durable record stores.

    Implementations must provide atomic increments and enforce uniqueness
    of short_id and long_url themselves; callers never lock.
    """

    @abstractmethod
    def find_by_long_url(self, long_url: str) -> Optional[ShortLinkRecord]:
        """Exact-match lookup used to make shortening idempotent."""
        pass

    @abstractmethod
    def find_by_short_id(self, short_id: str) -> Optional[ShortLinkRecord]:
        """Primary lookup."""
        pass

    @abstractmethod
    def exists(self, short_id: str) -> bool:
        """Check whether a short id is already taken."""
        pass

    @abstractmethod
    def insert(self, record: ShortLinkRecord) -> ShortLinkRecord:
        """
        Persist a new record.

        Raises:
            DuplicateKeyError: if short_id or long_url is already stored
        """
        pass

    @abstractmethod
    def increment_hits(self, short_id: str) -> int:
        """
        Atomically add one hit and return the new count.

        Raises:
            ShortIdNotFoundError: if no record has this short id
        """
        pass

    @abstractmethod
    def list_all(self) -> List[ShortLinkRecord]:
        """All records, newest first."""
        pass

    @abstractmethod
    def next_sequence(self, name: str) -> int:
        """Atomically increment and return a named counter (starts at 1)."""
        pass

    def create_schema(self) -> None:
        """Create storage structures if the backend needs them."""
        pass


class SQLAlchemyLinkStore(LinkStore):
    """
    SQLAlchemy implementation (SQLite by default, any SQL database works).
    """

    def __init__(self, session_factory: sessionmaker):
        """
        Args:
            session_factory: Factory for creating database sessions
        """
        self.session_factory = session_factory

    def create_schema(self) -> None:
        engine = self.session_factory.kw["bind"]
        Base.metadata.create_all(bind=engine)

    def find_by_long_url(self, long_url: str) -> Optional[ShortLinkRecord]:
        with self.session_factory() as db:
            row = db.query(ShortLink).filter(ShortLink.long_url == long_url).first()
            return ShortLinkRecord.model_validate(row) if row else None

    def find_by_short_id(self, short_id: str) -> Optional[ShortLinkRecord]:
        with self.session_factory() as db:
            row = db.query(ShortLink).filter(ShortLink.short_id == short_id).first()
            return ShortLinkRecord.model_validate(row) if row else None

    def exists(self, short_id: str) -> bool:
        with self.session_factory() as db:
            return db.query(ShortLink.id).filter(ShortLink.short_id == short_id).first() is not None

    def insert(self, record: ShortLinkRecord) -> ShortLinkRecord:
        row = ShortLink(
            short_id=record.short_id,
            long_url=record.long_url,
            hits=record.hits,
            created_at=record.created_at,
            expires_at=record.expires_at,
            created_by=record.created_by,
        )
        with self.session_factory() as db:
            db.add(row)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise DuplicateKeyError(record.short_id, e) from e
            db.refresh(row)
            return ShortLinkRecord.model_validate(row)

    def increment_hits(self, short_id: str) -> int:
        with self.session_factory() as db:
            try:
                # Single UPDATE ... SET hits = hits + 1, no prior read
                updated = (
                    db.query(ShortLink)
                    .filter(ShortLink.short_id == short_id)
                    .update({ShortLink.hits: ShortLink.hits + 1}, synchronize_session=False)
                )
                if not updated:
                    raise ShortIdNotFoundError(short_id)
                # The row stays locked by our update until commit
                hits = db.query(ShortLink.hits).filter(ShortLink.short_id == short_id).scalar()
                db.commit()
            except Exception:
                db.rollback()
                raise
            return hits

    def list_all(self) -> List[ShortLinkRecord]:
        with self.session_factory() as db:
            rows = db.query(ShortLink).order_by(ShortLink.created_at.desc(), ShortLink.id.desc()).all()
            return [ShortLinkRecord.model_validate(row) for row in rows]

    def next_sequence(self, name: str) -> int:
        with self.session_factory() as db:
            try:
                updated = (
                    db.query(Counter)
                    .filter(Counter.name == name)
                    .update({Counter.value: Counter.value + 1}, synchronize_session=False)
                )
                if not updated:
                    db.add(Counter(name=name, value=1))
                    db.flush()
                value = db.query(Counter.value).filter(Counter.name == name).scalar()
                db.commit()
            except IntegrityError:
                # Another writer created the counter first; increment theirs
                db.rollback()
                logger.debug("Counter %s created concurrently, retrying increment", name)
                return self.next_sequence(name)
            except Exception:
                db.rollback()
                raise
            return value
