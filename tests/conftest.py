"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Tables are created before each test and
dropped after it, so no test data persists.
"""

import pytest
from fastapi.testclient import TestClient

from bookkeeping.api.dependencies import get_db
from bookkeeping.main import create_app
from bookkeeping.store import LedgerStore


# SQLite file database: no external infrastructure needed, and
# unlike :memory: it is shared by every connection in the pool.
TEST_DATABASE_URL = "sqlite:///./test.db"

test_store = LedgerStore(TEST_DATABASE_URL)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    test_store.create_schema()
    yield
    test_store.drop_schema()


@pytest.fixture
def store():
    return test_store


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = test_store.session()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """
    Provide a test client wired to the test store.

    get_db is overridden so endpoints share the test's session
    and tests can inspect what the API wrote.
    """
    app = create_app(test_store)

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
