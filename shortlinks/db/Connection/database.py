import logging
from typing import Callable, Optional

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from shortlinks.core.config import Settings, settings
from shortlinks.core.errors import StoreSetupError
from shortlinks.db.Models.models import Base
from shortlinks.db.repository import LinkStore
from shortlinks.services.RedisLinkCache import LinkTargetCache
from shortlinks.utils.encoding import generate_short_code

logger = logging.getLogger(__name__)


def build_engine(database_url: str, busy_timeout: float = 5.0) -> Engine:
    """Create the SQLAlchemy engine.

    SQLite connections wait at most busy_timeout seconds for a lock and run
    in WAL mode so readers never block the single writer.
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(
            database_url,
            pool_pre_ping=True,
            pool_timeout=busy_timeout,
        )

    in_memory = url.database in (None, "", ":memory:")
    kwargs = {
        "connect_args": {"check_same_thread": False, "timeout": busy_timeout},
    }
    if in_memory:
        kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(pool_size=10, max_overflow=20, pool_timeout=busy_timeout)
    engine = create_engine(database_url, **kwargs)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout * 1000)}")
        if not in_memory:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def open_link_store(
    config: Settings = settings,
    id_generator: Callable[[], str] = generate_short_code,
) -> LinkStore:
    """Open the database, ensure the schema and return a ready LinkStore.

    Raises StoreSetupError instead of exiting so the entry point decides
    whether to abort.
    """
    try:
        engine = build_engine(config.DATABASE_URL, config.DB_BUSY_TIMEOUT)
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        logger.error(f"Failed to open link store at {config.DATABASE_URL}: {e}")
        raise StoreSetupError(f"Failed to open link store: {e}") from e
    logger.info("Database models initialized/checked.")

    cache: Optional[LinkTargetCache] = None
    if config.REDIS_URL:
        try:
            cache = LinkTargetCache.from_url(config.REDIS_URL, config.CACHE_TTL)
        except ValueError as e:
            engine.dispose()
            raise StoreSetupError(f"Invalid REDIS_URL: {e}") from e
        verify_redis_connection(cache)

    return LinkStore(
        engine,
        id_generator=id_generator,
        cache=cache,
        max_create_attempts=config.MAX_CREATE_ATTEMPTS,
    )


def get_link_store(request: Request) -> LinkStore:
    """FastAPI dependency: the store built at startup.

    Usage: store: LinkStore = Depends(database.get_link_store)
    """
    return request.app.state.link_store


def verify_redis_connection(cache: LinkTargetCache) -> bool:
    if cache.ping():
        logger.info("Redis connection verified")
        return True
    logger.warning("Redis connection failed. Service will run with degraded performance.")
    return False


def verify_database_connection(store: LinkStore) -> bool:
    if store.ping():
        logger.info("Database connection verified")
        return True
    return False
