import os

# Settings are read at import time; configure the test environment first.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-at-least-32-characters")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")
os.environ.setdefault("LOG_JSON", "false")

import pytest
import pytest_asyncio
from cryptography.fernet import Fernet
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from sessionauth.core.application import create_application
from sessionauth.domain.entities.user import User  # noqa: F401  registers the users table
from sessionauth.domain.services.auth import (
    AuthGate,
    CredentialVerifier,
    LocalStrategy,
    OAuthStrategy,
    SessionCodec,
)
from sessionauth.infrastructure.dependency_injection.auth_dependencies import build_auth_gate
from sessionauth.infrastructure.repositories import UserRepository
from tests.utils.fake_oauth_client import FakeOAuthClient
from tests.utils.in_memory_repository import InMemoryUserRepository


@pytest.fixture
def fernet():
    return Fernet(Fernet.generate_key())


@pytest.fixture
def verifier():
    return CredentialVerifier(work_factor=4)


@pytest.fixture
def memory_repository():
    return InMemoryUserRepository()


@pytest.fixture
def memory_gate(memory_repository, verifier, fernet):
    """AuthGate wired around the in-memory repository."""
    return AuthGate(
        user_repository=memory_repository,
        verifier=verifier,
        local_strategy=LocalStrategy(memory_repository, verifier),
        oauth_strategy=OAuthStrategy(memory_repository, fernet),
        session_codec=SessionCodec(memory_repository),
    )


@pytest_asyncio.fixture
async def session_factory():
    """A fresh in-memory SQLite user store per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def user_repository(session_factory):
    return UserRepository(session_factory)


@pytest.fixture
def oauth_client():
    return FakeOAuthClient()


@pytest.fixture
def app(session_factory, oauth_client, fernet):
    """Application wired to the SQLite store; the lifespan is not entered."""
    application = create_application()
    application.state.auth_gate = build_auth_gate(session_factory, fernet=fernet)
    application.state.oauth_client = oauth_client
    return application


@pytest_asyncio.fixture
async def async_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
