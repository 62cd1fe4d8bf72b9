from __future__ import annotations

"""
Asynchronous Database Utilities Module

Exposes the SQLAlchemy asyncio engine and session factory backing the user
store. The user repository opens one short-lived session per operation from
``AsyncSessionFactory`` so that it can be constructed once at startup and
shared across requests.

**Security Note**: Ensure that DATABASE_URL is configured for SSL/TLS when
connecting over untrusted networks. Never log the connection URL.

Key Components:
    - engine: The asynchronous SQLAlchemy engine.
    - AsyncSessionFactory: A factory for creating asynchronous database sessions.
    - create_async_db_and_tables: Creates tables with retry logic.
    - check_database_health: Startup connectivity probe.
"""

import logging

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from sessionauth.core.config.settings import settings

logger = logging.getLogger(__name__)


def build_engine(url: str) -> AsyncEngine:
    """Create the async engine; pool options only apply to server databases."""
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=False)
    return create_async_engine(
        url,
        echo=False,
        pool_size=settings.POSTGRES_POOL_SIZE,
        max_overflow=settings.POSTGRES_MAX_OVERFLOW,
        pool_timeout=settings.POSTGRES_POOL_TIMEOUT,
        pool_pre_ping=True,
    )


engine = build_engine(settings.DATABASE_URL)

AsyncSessionFactory: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False
)


async def check_database_health(bind: AsyncEngine = engine) -> bool:
    """
    Perform a health check on the database connection.

    Returns:
        bool: True if the database answered ``SELECT 1``, False otherwise.
    """
    try:
        async with bind.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:  # noqa: BLE001
        logger.error("database_health_check_failed: %s", type(e).__name__)
        return False


@retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(OperationalError),
    reraise=True,
)
async def create_async_db_and_tables(bind: AsyncEngine = engine) -> None:
    """
    Create tables using the async engine.

    Retries with exponential backoff while the database is still starting.
    """
    logger.info("Creating async database tables")
    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Async database tables created")
