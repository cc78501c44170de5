"""Shared pytest fixtures for SEO Monitor tests."""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Ensure project root is on sys.path so 'seo_monitor' is importable.
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

TEST_EMAIL = "owner@example.com"
TEST_PASSWORD = "correct-horse"


@pytest.fixture(autouse=True)
def _reset_db_engine():
    """Autouse fixture: reset the global DB engine before and after every test.

    This prevents cross-test pollution when tests create their own in-memory
    databases.
    """
    from seo_monitor.database import reset_engine
    reset_engine()
    yield
    reset_engine()


@pytest.fixture()
def test_db():
    """Provide an in-memory SQLite database with all tables created.

    Yields a database URL string. The engine is automatically torn down
    after the test by the autouse ``_reset_db_engine`` fixture.
    """
    from seo_monitor.database import init_db
    db_url = "sqlite:///:memory:"
    init_db(database_url=db_url, echo=False)
    yield db_url


@pytest.fixture()
def store(test_db):
    """A RecordStore over the in-memory database."""
    from seo_monitor.store import RecordStore
    return RecordStore()


@pytest.fixture()
def auth(store):
    """An AuthService with a registered, signed-in user."""
    from seo_monitor.auth import AuthService
    service = AuthService(store)
    service.sign_up(TEST_EMAIL, TEST_PASSWORD)
    service.sign_in_with_password(TEST_EMAIL, TEST_PASSWORD)
    return service


@pytest.fixture()
def spy_store(store):
    """The real store wrapped in a MagicMock so calls can be asserted."""
    return MagicMock(wraps=store)


@pytest.fixture()
def store_failing_on(store):
    """Factory: a store double whose inserts into one collection fail.

    Inserts into every other collection reach the real database, so the
    rows committed before the failure can be inspected afterwards.
    """
    from seo_monitor.store import StoreError

    def _make(collection: str, error: Exception | None = None):
        double = MagicMock(wraps=store)

        def _insert(name, rows):
            if name == collection:
                raise error or StoreError("simulated " + collection + " failure")
            return store.insert(name, rows)

        double.insert.side_effect = _insert
        return double

    return _make
