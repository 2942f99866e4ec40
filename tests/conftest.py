"""
Test configuration and fixtures.

Provides:
- Fresh in-memory SQLite schema per test (foreign keys enforced)
- User/admin factories that issue real bearer tokens
- HTTPX AsyncClient fixtures (anonymous, user, admin)
- Mocked outbound HTTP for the AI and reference proxies
"""
import os
import uuid
from dataclasses import dataclass, field
from typing import AsyncGenerator, Callable, Generator

# Must be set before the app (and its rate limiter) is imported
os.environ["TESTING"] = "1"
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.pop("REDIS_URL", None)

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from syariahos.core import cache
from syariahos.core.deps import get_db
from syariahos.db.base import Base
from syariahos.db.enums import Role
from syariahos.db.models import User
from syariahos.db.session import enable_sqlite_foreign_keys
from syariahos.main import app
from syariahos.services import http_client, session_service, user_service

TEST_PASSWORD = "password123"


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture(scope="function")
def db(engine) -> Generator[Session, None, None]:
    """Session on a freshly created schema, dropped after the test."""
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()
    Base.metadata.drop_all(engine)


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


# =============================================================================
# User Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    user: User
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture
def make_user(db: Session) -> Callable[..., TestAuth]:
    """Factory: create a user (with default categories) and a bearer token."""

    def _make(role: Role = Role.USER, name: str = "Test User", email: str | None = None) -> TestAuth:
        user = user_service.create_user(
            db,
            name=name,
            email=email or f"{role.value}-{uuid.uuid4().hex[:8]}@test.com",
            password=TEST_PASSWORD,
            role=role,
        )
        token = session_service.issue_token(db, user)
        db.commit()
        return TestAuth(user=user, token=token)

    return _make


@pytest.fixture
def test_auth(make_user) -> TestAuth:
    return make_user()


@pytest.fixture
def admin_auth(make_user) -> TestAuth:
    return make_user(role=Role.ADMIN, name="Admin User")


# =============================================================================
# Client Fixtures
# =============================================================================

def _client(headers: dict[str, str] | None = None) -> AsyncClient:
    return AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=headers or {},
    )


@pytest.fixture
def override_db(db: Session):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def client(override_db) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated client for public endpoints."""
    async with _client() as c:
        yield c


@pytest.fixture
async def authed_client(override_db, test_auth: TestAuth) -> AsyncGenerator[AsyncClient, None]:
    """Client carrying a regular user's bearer token."""
    async with _client(test_auth.headers) as c:
        yield c


@pytest.fixture
async def admin_client(override_db, admin_auth: TestAuth) -> AsyncGenerator[AsyncClient, None]:
    """Client carrying an admin's bearer token."""
    async with _client(admin_auth.headers) as c:
        yield c


@pytest.fixture
def client_for(override_db) -> Callable[[TestAuth], AsyncClient]:
    """Build an extra client for another user (use as an async context manager)."""
    return lambda auth: _client(auth.headers)


# =============================================================================
# Upstream HTTP Fixtures
# =============================================================================

@dataclass
class MockUpstream:
    """
    Records outbound requests and answers them with `handler`.

    Without a handler every request gets a 500.
    """
    handler: Callable[[httpx.Request], httpx.Response] | None = None
    requests: list[httpx.Request] = field(default_factory=list)


@pytest.fixture
def upstream(monkeypatch) -> MockUpstream:
    """Route every outbound httpx call through a MockTransport."""
    mock = MockUpstream()

    def handle(request: httpx.Request) -> httpx.Response:
        mock.requests.append(request)
        if mock.handler is None:
            return httpx.Response(500)
        return mock.handler(request)

    def create_client(timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handle), timeout=timeout)

    monkeypatch.setattr(http_client, "create_client", create_client)
    return mock
