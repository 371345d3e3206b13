"""Pytest configuration and fixtures."""

import pytest
from decimal import Decimal
from typing import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tableside.db.base import Base
from tableside.main import app
# Import all models to ensure they're registered with Base.metadata
from tableside.models import *
from tableside.services import MenuService, TableService
from tableside.store import MemoryStore, SqlStore, Store, get_store

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(params=["memory", "sql"])
def store(request) -> Store:
    """Every store-backed test runs against both implementations."""
    if request.param == "memory":
        return MemoryStore()
    return SqlStore(request.getfixturevalue("db_session"))


@pytest.fixture(scope="function")
def client(store: Store) -> Generator[TestClient, None, None]:
    """Create a test client wired to the test store."""
    app.dependency_overrides[get_store] = lambda: store
    # Disable rate limiter during tests to avoid flaky failures
    from tableside.core.rate_limit import limiter
    limiter.enabled = False
    # Don't raise server exceptions so we can test error status codes
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture
def menu(store: Store) -> dict:
    """Two dishes priced 100 and 50, plus one that is out of stock."""
    service = MenuService(store)
    return {
        "curry": service.create_item(name="Paneer Curry", price=Decimal("100.00"), category="main-course"),
        "lassi": service.create_item(name="Sweet Lassi", price=Decimal("50.00"), category="beverages"),
        "special": service.create_item(
            name="Chef Special", price=Decimal("400.00"), category="main-course", in_stock=False
        ),
    }


@pytest.fixture
def tables(store: Store) -> dict:
    """Tables 3 and 5 with four seats each."""
    service = TableService(store)
    return {number: service.add_table(number, seats=4) for number in (3, 5)}
