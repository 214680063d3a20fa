"""
Pytest configuration and fixtures for the test suite.

The database is an in-memory SQLite engine shared by every session of a test,
and e-mail delivery is replaced by a recording fake.
"""

import os
import uuid
from typing import AsyncGenerator, Dict, List, Tuple

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment before importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-purposes-only-32chars")
os.environ["SMTP_HOST"] = ""
os.environ["MAIL_LOG_ONLY"] = "false"

TEST_PASSWORD = "SecurePass123"


class FakeNotificationSender:
    """Records share e-mails instead of sending them."""

    def __init__(self):
        self.sent: List[Tuple[str, uuid.UUID]] = []
        self.error = None

    async def send(self, recipient_email: str, document_id: uuid.UUID) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((recipient_email, document_id))


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def db_engine():
    """Create an isolated in-memory database with all tables."""
    from app.core.db import Base
    from app.db import models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def notifier() -> FakeNotificationSender:
    return FakeNotificationSender()


@pytest_asyncio.fixture
async def create_user(db_session):
    """Factory that stores a user directly through the repository."""
    from app.db.repositories.user_repository import UserRepository
    from app.domains.identity.entities import User

    repository = UserRepository(db_session)

    async def _create(email: str = None, username: str = None):
        suffix = uuid.uuid4().hex[:8]
        user = User.create_user(
            email=email or f"user_{suffix}@example.com",
            username=username or f"user_{suffix}",
            password=TEST_PASSWORD,
        )
        return await repository.create(user)

    return _create


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def app(session_factory, notifier):
    """FastAPI application wired to the test database and fake mailer."""
    from app.main import app as fastapi_app
    from app.core.db import get_db
    from app.core.mailer import get_notification_sender

    async def override_get_db():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_notification_sender] = lambda: notifier

    yield fastapi_app

    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


@pytest_asyncio.fixture
async def register_user(async_client):
    """Register a user over HTTP and return (user json, auth headers)."""

    async def _register(email: str = None) -> Tuple[Dict, Dict[str, str]]:
        suffix = uuid.uuid4().hex[:8]
        email = email or f"user_{suffix}@example.com"

        response = await async_client.post("/auth/register", json={
            "email": email,
            "username": f"user_{suffix}",
            "password": TEST_PASSWORD,
        })
        assert response.status_code == 201, response.text
        user = response.json()

        response = await async_client.post("/auth/login", json={
            "email": email,
            "password": TEST_PASSWORD,
        })
        assert response.status_code == 200, response.text

        return user, create_auth_header(response.json()["access_token"])

    return _register


def create_auth_header(token: str) -> Dict[str, str]:
    """Create an authorization header with a bearer token."""
    return {"Authorization": f"Bearer {token}"}
