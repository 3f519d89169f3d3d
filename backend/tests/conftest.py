import os

# Settings are read at import time; give the test run its own values.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-at-least-32-characters")
os.environ.setdefault("ENVIRONMENT", "test")

import fakeredis
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from app.main import app
from app.core.database import Base, get_db
from app.core.limiter import limiter

# In-memory SQLite — StaticPool ensures one shared DB across all connections
SQLALCHEMY_DATABASE_URL = "sqlite://"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    database = TestingSessionLocal()
    try:
        yield database
    finally:
        database.close()


@pytest.fixture(autouse=True)
def _disable_rate_limiter():
    """Disable the per-IP auth limiter so rapid test requests don't return 429."""
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def redis_server():
    """Fake Redis server; set ``connected = False`` to simulate an outage."""
    return fakeredis.FakeServer()


@pytest.fixture
def redis_store(redis_server):
    """Synchronous client on the same fake server, for inspecting cooldown keys."""
    return fakeredis.FakeRedis(server=redis_server, decode_responses=True)


@pytest.fixture
def use_fake_redis(redis_server, monkeypatch):
    monkeypatch.setattr(
        "app.main.create_redis_client",
        lambda: fakeredis.FakeAsyncRedis(server=redis_server, decode_responses=True),
    )


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(use_fake_redis):
    Base.metadata.create_all(bind=engine)
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)
