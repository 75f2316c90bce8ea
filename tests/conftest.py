# tests/conftest.py

import os

# Settings are read at import time, so the environment must be ready first.
os.environ["ENV"] = "local"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL_LOCAL", "sqlite://")
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from unittest.mock import MagicMock
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from starlette.testclient import TestClient

from hackathon_service.main import app
from hackathon_service.api import deps
from hackathon_service.db.seed import seed_lookups
from hackathon_service.models import Base
from hackathon_service.services.dashboard_cache import DashboardCache
from hackathon_service.services.identity_provider import IdentityProviderClient


# --- Test Database Setup ---
@pytest.fixture(scope="function")
def engine(tmp_path):
    """A fresh SQLite file per test; the API runs endpoints on worker threads."""
    test_engine = create_engine(
        f"sqlite:///{tmp_path / 'hackathon_test.db'}",
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(test_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        # SQLite only honours ON DELETE CASCADE with this pragma
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db(session_factory):
    session = session_factory()
    seed_lookups(session)
    yield session
    session.close()


# --- Mock Dependencies Setup ---
@pytest.fixture(scope="function")
def redis_mock():
    """A Redis stand-in that always misses the cache and accepts every write."""
    redis = MagicMock()
    redis.get.return_value = None
    redis.scan_iter.return_value = []
    return redis


@pytest.fixture(scope="function")
def cache(redis_mock):
    return DashboardCache(redis_mock, ttl_seconds=60)


@pytest.fixture(scope="function")
def identity_provider():
    return MagicMock(spec=IdentityProviderClient)


# --- Test Client Fixtures ---
@pytest.fixture(scope="function")
def client(db, session_factory, redis_mock, identity_provider):
    """
    Provides a TestClient backed by the SQLite test database. Authentication
    is real: requests carry JWTs signed with the test secret.
    """

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[deps.get_db] = override_get_db
    app.dependency_overrides[deps.get_session_factory] = lambda: session_factory
    app.dependency_overrides[deps.get_redis] = lambda: redis_mock
    app.dependency_overrides[deps.get_identity_provider] = lambda: identity_provider

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
