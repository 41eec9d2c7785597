import os

os.environ["ENV"] = "test"

import pytest  # noqa: E402

import app.models  # noqa: E402,F401  (registers tables on Base.metadata)
from app.core.dedup_cache import DedupCache  # noqa: E402
from app.db import Base, db_manager  # noqa: E402

pytest_plugins = [
    "tests.fixtures.forum_fixtures",
]


@pytest.fixture(scope="function")
def db():
    """Fresh schema per test on the test database."""
    engine = db_manager.engine
    Base.metadata.create_all(engine)
    session = db_manager.session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def channel_cache():
    return DedupCache()
