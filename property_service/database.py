"""
Database connection and session management.
Owns the process-wide async engine: created at startup, disposed at shutdown,
and shared read-only by every request handler through the session factory.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import text
from property_service.config import settings, normalize_database_url
from property_service.utils.exceptions import ServiceUnavailableError
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[async_sessionmaker] = None


class Base(DeclarativeBase):
    """Base class for all database models."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"


def _engine_options(database_url: str) -> Dict[str, Any]:
    """Pool and driver options for the given URL."""
    options: Dict[str, Any] = {"echo": settings.debug}

    if database_url.startswith("postgresql"):
        connect_args: Dict[str, Any] = {
            "server_settings": {
                "application_name": settings.service_name,
            }
        }
        if settings.use_ssl:
            # Encrypt without certificate verification
            connect_args["ssl"] = "require"

        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,
            pool_recycle=settings.db_pool_recycle,
            pool_timeout=settings.db_pool_timeout,
            connect_args=connect_args,
        )
    return options


def init_db_engine(database_url: Optional[str] = None) -> Optional[async_sessionmaker]:
    """
    Create the engine and session factory.
    Called once from the application lifespan; returns None when no
    database URL is configured.
    """
    global engine, AsyncSessionLocal

    url = normalize_database_url(database_url) or settings.database_url
    if not url:
        logger.warning("DATABASE_URL is not configured; store-backed endpoints are unavailable")
        return None

    if engine is not None:
        return AsyncSessionLocal

    engine = create_async_engine(url, **_engine_options(url))
    AsyncSessionLocal = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    logger.info("Database engine initialized")
    return AsyncSessionLocal


def get_session_factory() -> async_sessionmaker:
    """
    Dependency returning the shared session factory.
    Repositories open their own short-lived sessions from it.
    """
    if AsyncSessionLocal is None:
        raise ServiceUnavailableError("Database is not configured")
    return AsyncSessionLocal


async def test_database_connection() -> bool:
    """
    Test database connectivity.
    Returns True if connection is successful, False otherwise.
    """
    if AsyncSessionLocal is None:
        return False

    try:
        async with AsyncSessionLocal() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
            logger.info("Database connection successful")
            return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False


async def close_db_connection():
    """
    Close database connection.
    This should be called during application shutdown.
    """
    global engine, AsyncSessionLocal

    if engine is not None:
        await engine.dispose()
        logger.info("Database connections closed")
    engine = None
    AsyncSessionLocal = None
