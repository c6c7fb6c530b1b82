import logging
import sqlite3
import time

import pytest

from shortlinks.core.errors import StorageFailureError
from shortlinks.db.Connection.database import build_engine
from shortlinks.db.Models.models import Base
from shortlinks.db.repository import LinkStore

BUSY_TIMEOUT = 0.5


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "busy.db"


@pytest.fixture
def busy_store(db_path):
    engine = build_engine(f"sqlite:///{db_path}", busy_timeout=BUSY_TIMEOUT)
    Base.metadata.create_all(bind=engine)
    yield LinkStore(engine)
    engine.dispose()


@pytest.fixture
def write_lock(db_path):
    """Raw connection that can hold the database write lock."""
    conn = sqlite3.connect(str(db_path), isolation_level=None)
    yield conn
    if conn.in_transaction:
        conn.execute("ROLLBACK")
    conn.close()


def test_create_on_locked_database_fails_within_timeout(busy_store, write_lock):
    write_lock.execute("BEGIN EXCLUSIVE")

    started = time.monotonic()
    with pytest.raises(StorageFailureError):
        busy_store.create("https://example.com/locked")
    elapsed = time.monotonic() - started

    assert elapsed < 2.0


def test_resolve_on_locked_database_still_returns_target(busy_store, write_lock, caplog):
    link_id = busy_store.create("https://example.com/x")
    write_lock.execute("BEGIN EXCLUSIVE")

    started = time.monotonic()
    with caplog.at_level(logging.ERROR, logger="shortlinks.db.repository"):
        assert busy_store.resolve_and_track(link_id) == "https://example.com/x"
    elapsed = time.monotonic() - started

    assert elapsed < 2.0
    assert "Failed to record click" in caplog.text


def test_click_lost_while_locked_is_not_counted(busy_store, write_lock):
    link_id = busy_store.create("https://example.com/after")

    write_lock.execute("BEGIN EXCLUSIVE")
    busy_store.resolve_and_track(link_id)
    write_lock.execute("ROLLBACK")

    busy_store.resolve_and_track(link_id)
    assert busy_store.get(link_id).clicks == 1
