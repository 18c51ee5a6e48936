"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports.

Integration fixtures run against an in-memory SQLite database so the suite
needs no external services. Each test gets a fresh, empty database.
"""

import sys
import uuid
from pathlib import Path
from types import SimpleNamespace
from typing import Generator

import pytest

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from api.dependencies import get_db, get_current_user_id
from domain.models import create_db_engine, create_session_factory, init_database
from main import create_app
from test_fixtures import TEST_DATABASE_URL, make_settings


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """TestClient over a real application with a fresh in-memory database"""
    app = create_app(make_settings())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_client():
    """
    Factory for TestClients over apps built with overridden settings.

    Usage:
        strict = make_client(password_min_length=8)
    """
    started = []

    def _make(**overrides) -> TestClient:
        test_client = TestClient(create_app(make_settings(**overrides)))
        test_client.__enter__()
        started.append(test_client)
        return test_client

    yield _make
    for test_client in started:
        test_client.__exit__(None, None, None)


@pytest.fixture
def stub_user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def stub_client(stub_user_id) -> Generator[TestClient, None, None]:
    """
    TestClient whose database and session gate are replaced by stubs.

    Used with monkeypatched services to test the HTTP contract alone. The
    lifespan is not started, so no engine is ever created.
    """
    app = create_app(make_settings())
    app.dependency_overrides[get_db] = lambda: SimpleNamespace()
    app.dependency_overrides[get_current_user_id] = lambda: stub_user_id
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """
    Database session over a fresh in-memory schema for repository and
    service tests.
    """
    engine = create_db_engine(TEST_DATABASE_URL)
    init_database(engine)
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
