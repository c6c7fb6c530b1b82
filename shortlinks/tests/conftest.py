import pytest
from fastapi.testclient import TestClient

from shortlinks.main import create_app
from shortlinks.db.Models.models import Base
from shortlinks.db.Connection.database import build_engine
from shortlinks.db.repository import LinkStore


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite so concurrent tests use real pooled connections."""
    engine = build_engine(f"sqlite:///{tmp_path / 'links.db'}", busy_timeout=5.0)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return LinkStore(engine)


@pytest.fixture
def client(store):
    """Creates a test client bound to the fixture store."""
    with TestClient(create_app(store)) as test_client:
        yield test_client


@pytest.fixture
def sample_urls():
    """Provides sample URLs for testing."""
    return [
        "https://example.com/test1",
        "https://google.com/search?q=test",
        "https://github.com/user/repo",
    ]


@pytest.fixture
def codes_in_order():
    """Factory for id generators that hand out the given codes in order."""
    def make(*codes):
        remaining = iter(codes)
        return lambda: next(remaining)
    return make
