from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Iterator, List, Optional
import logging

from sqlalchemy import func, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from shortlinks.core.errors import ConflictError, NotFoundError, StorageFailureError
from shortlinks.db.Models.models import Link
from shortlinks.schemas.LinkRecord import LinkRecord
from shortlinks.services.RedisLinkCache import LinkTargetCache
from shortlinks.utils.encoding import generate_short_code
from shortlinks.utils.validators import validate_target

logger = logging.getLogger(__name__)

DEFAULT_MAX_CREATE_ATTEMPTS = 5


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class LinkStore:
    """Owns every Link row.

    Each operation runs in its own session, so one instance can be shared by
    all request threads. Callers only ever receive LinkRecord copies.
    """

    def __init__(
        self,
        engine: Engine,
        id_generator: Callable[[], str] = generate_short_code,
        cache: Optional[LinkTargetCache] = None,
        max_create_attempts: int = DEFAULT_MAX_CREATE_ATTEMPTS,
    ):
        if max_create_attempts < 1:
            raise ValueError("max_create_attempts must be at least 1")
        self.engine = engine
        self.id_generator = id_generator
        self.cache = cache
        self.max_create_attempts = max_create_attempts
        self.SessionLocal = sessionmaker(
            bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Storage failure during %s: %s", action, e)
            raise StorageFailureError(f"Storage failure during {action}") from e
        finally:
            db.close()

    # --- create ---

    def create(self, target: str) -> str:
        """Store a new link for target and return its id."""
        return self.create_link(target).id

    def create_link(self, target: str) -> LinkRecord:
        target = validate_target(target)

        for attempt in range(1, self.max_create_attempts + 1):
            link_id = self.id_generator()
            try:
                record = self._insert(link_id, target)
            except ConflictError:
                logger.info(
                    "Short code collision on attempt %d/%d", attempt, self.max_create_attempts
                )
                continue

            if self.cache is not None:
                self.cache.put(record.id, record.target)
            logger.debug("Shortened %s... to %s", target[:50], record.id)
            return record

        logger.error(
            "Failed to generate unique short code after %d attempts", self.max_create_attempts
        )
        raise StorageFailureError(
            f"Failed to generate unique short code after {self.max_create_attempts} attempts"
        )

    def _insert(self, link_id: str, target: str) -> LinkRecord:
        link = Link(id=link_id, target=target, clicks=0, created_at=_utcnow())
        with self._session("create") as db:
            try:
                db.add(link)
                db.commit()
            except IntegrityError as e:
                db.rollback()
                logger.warning("IntegrityError creating Link id=%s: %s", link_id, e.orig)
                raise ConflictError(f"Link id {link_id!r} already exists") from e
            return LinkRecord.model_validate(link)

    # --- resolve ---

    def resolve_and_track(self, link_id: str) -> str:
        """Return the target for link_id and count one click.

        The click is best-effort: if the increment fails after the target was
        found, the failure is logged and the target is still returned.
        """
        cached = self.cache.get(link_id) if self.cache is not None else None
        if cached is not None:
            # The row count of the increment is the existence check on a cache hit.
            try:
                updated = self._increment(link_id)
            except StorageFailureError:
                logger.exception("Failed to record click for %s", link_id)
                return cached
            if updated == 0:
                self.cache.evict(link_id)
                logger.warning("Cached short code has no row: %s", link_id)
                raise NotFoundError(f"Link {link_id!r} not found")
            return cached

        target = self._lookup_target(link_id)
        if self.cache is not None:
            self.cache.put(link_id, target)

        try:
            self._increment(link_id)
        except StorageFailureError:
            logger.exception("Failed to record click for %s", link_id)
        return target

    def _lookup_target(self, link_id: str) -> str:
        with self._session("lookup") as db:
            target = db.query(Link.target).filter(Link.id == link_id).scalar()
        if target is None:
            logger.warning("Short code not found: %s", link_id)
            raise NotFoundError(f"Link {link_id!r} not found")
        return target

    def _increment(self, link_id: str) -> int:
        # Relative update so concurrent clicks on the same row are never lost.
        with self._session("increment") as db:
            updated = db.query(Link).filter(Link.id == link_id).update(
                {Link.clicks: Link.clicks + 1}, synchronize_session=False
            )
            db.commit()
        return updated

    # --- read-only queries ---

    def get(self, link_id: str) -> LinkRecord:
        with self._session("get") as db:
            link = db.query(Link).filter(Link.id == link_id).first()
            record = LinkRecord.model_validate(link) if link is not None else None
        if record is None:
            raise NotFoundError(f"Link {link_id!r} not found")
        return record

    def list_links(self, skip: int = 0, limit: int = 100) -> List[LinkRecord]:
        with self._session("list") as db:
            links = (
                db.query(Link)
                .order_by(Link.created_at.desc(), Link.id)
                .offset(skip)
                .limit(limit)
                .all()
            )
            return [LinkRecord.model_validate(link) for link in links]

    def count(self) -> int:
        with self._session("count") as db:
            return db.query(func.count(Link.id)).scalar() or 0

    def total_clicks(self) -> int:
        with self._session("total_clicks") as db:
            return db.query(func.sum(Link.clicks)).scalar() or 0

    # --- lifecycle ---

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database connection failed: {e}")
            return False

    def dispose(self) -> None:
        self.engine.dispose()
        if self.cache is not None:
            self.cache.close()
