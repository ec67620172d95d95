from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from typing import Any
from urllib.parse import urlparse

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from .config import get_settings

logger = structlog.get_logger(__name__)

Base = declarative_base()


def ensure_async_url(url: str) -> str:
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def ensure_sync_url(url: str) -> str:
    """Driver-less URL for Alembic, which runs migrations synchronously."""
    if url.startswith("postgresql+asyncpg://"):
        return url.replace("postgresql+asyncpg://", "postgresql://", 1)
    if url.startswith("sqlite+aiosqlite://"):
        return url.replace("sqlite+aiosqlite://", "sqlite://", 1)
    return url


def create_async_engine_and_session(
    database_url: str,
    *,
    echo: bool = False,
    expire_on_commit: bool = False,
    autoflush: bool = False,
    **engine_kwargs: Any,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    database_url = ensure_async_url(database_url)
    if database_url.startswith("sqlite") and "poolclass" not in engine_kwargs:
        # aiosqlite connections must not outlive the event loop that opened them
        engine_kwargs["poolclass"] = NullPool
    engine = create_async_engine(database_url, echo=echo, **engine_kwargs)
    session_factory = async_sessionmaker(
        bind=engine,
        expire_on_commit=expire_on_commit,
        autoflush=autoflush,
        class_=AsyncSession,
    )
    return engine, session_factory


settings = get_settings()
DATABASE_URL = ensure_async_url(settings.PROGRAMS_DATABASE_URL)

parsed = urlparse(DATABASE_URL)
logger.info("programs_database_configured", scheme=parsed.scheme)

engine, AsyncSessionLocal = create_async_engine_and_session(DATABASE_URL, echo=settings.DEBUG)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column is stored in."""
    return datetime.now(UTC).replace(tzinfo=None)
