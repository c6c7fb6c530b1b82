import pytest
from fastapi.testclient import TestClient

from shortlinks.core.config import Settings
from shortlinks.core.errors import StoreSetupError
from shortlinks.db.Connection import database
from shortlinks.main import create_app


def test_open_link_store_creates_schema(tmp_path):
    config = Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'fresh.db'}", MAX_CREATE_ATTEMPTS=3)
    store = database.open_link_store(config)
    try:
        assert store.max_create_attempts == 3
        assert store.cache is None
        link_id = store.create("https://example.com/setup")
        assert store.resolve_and_track(link_id) == "https://example.com/setup"
    finally:
        store.dispose()


def test_open_link_store_persists_between_opens(tmp_path):
    config = Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'durable.db'}")
    first = database.open_link_store(config)
    link_id = first.create("https://example.com/durable")
    first.dispose()

    second = database.open_link_store(config)
    try:
        assert second.resolve_and_track(link_id) == "https://example.com/durable"
        assert second.get(link_id).clicks == 1
    finally:
        second.dispose()


def test_open_link_store_in_memory():
    store = database.open_link_store(Settings(DATABASE_URL="sqlite:///:memory:"))
    try:
        link_id = store.create("https://example.com/memory")
        assert store.get(link_id).target == "https://example.com/memory"
    finally:
        store.dispose()


def test_open_link_store_unreachable_path_is_setup_error(tmp_path):
    missing = tmp_path / "no" / "such" / "dir" / "links.db"
    with pytest.raises(StoreSetupError):
        database.open_link_store(Settings(DATABASE_URL=f"sqlite:///{missing}"))


def test_open_link_store_bad_url_is_setup_error():
    with pytest.raises(StoreSetupError):
        database.open_link_store(Settings(DATABASE_URL="not a database url"))


def test_app_opens_store_on_startup(tmp_path, monkeypatch):
    opened = []
    real_open = database.open_link_store

    def open_from_test_settings(_config):
        store = real_open(Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'app.db'}"))
        opened.append(store)
        return store

    monkeypatch.setattr(database, "open_link_store", open_from_test_settings)

    app = create_app()
    with TestClient(app) as client:
        short_id = client.post("/shorten", json={"url": "https://example.com/lifespan"}).json()["id"]
        assert client.get(f"/{short_id}", follow_redirects=False).status_code == 302

    assert len(opened) == 1
    assert app.state.link_store is None
