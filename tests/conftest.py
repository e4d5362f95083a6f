import os
import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path so 'app', 'config', and 'musiclib' import correctly
_TESTS_DIR = os.path.dirname(__file__)
_ROOT_DIR = os.path.abspath(os.path.join(_TESTS_DIR, os.pardir))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from tests.support import factories as test_factories
from tests.support.stubs import AI_TEST_URL


@pytest.fixture
def sqlite_url(tmp_path_factory):
    """A fresh SQLite file per test."""
    db_dir = tmp_path_factory.mktemp("db")
    db_path = Path(db_dir) / "test.sqlite"
    return f"sqlite:///{db_path.as_posix()}"


@pytest.fixture
def app(sqlite_url):
    import app as app_module

    application = app_module.create_app(
        {
            "TESTING": True,
            "DATABASE_URL": sqlite_url,
            "AI_API_URL": AI_TEST_URL,
        }
    )
    yield application
    application.extensions["database"].dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def database(app):
    return app.extensions["database"]


@pytest.fixture
def song_service(app):
    return app.extensions["song_service"]


@pytest.fixture
def artist_service(app):
    return app.extensions["artist_service"]


@pytest.fixture
def playlist_service(app):
    return app.extensions["playlist_service"]


@pytest.fixture
def stats_service(app):
    return app.extensions["stats_service"]


@pytest.fixture
def db_session(database):
    session = database.new_session()
    test_factories.set_session(session)
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        test_factories.reset_session()


@pytest.fixture
def factories(db_session):
    yield test_factories
