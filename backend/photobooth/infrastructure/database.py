"""Database Session Manager — async engine, session scope with rollback, health checks.

Invariants:
    - A session scope rolls back on any SQLAlchemy exception before re-raising it as
      DatabaseError (core/errors.py); nothing half-written is ever committed
    - IntegrityError (duplicate slug/email racing past the service pre-checks)
      becomes ConflictError (409), not DatabaseError
    - Postgres engines use pool_pre_ping + pool_recycle; sqlite engines get no pool
      sizing (aiosqlite :memory: runs on a static pool)
    - get_db is the only way routes obtain a session

Design Decisions:
    - Singleton db_manager initialized from the FastAPI lifespan, disposed on shutdown
    - expire_on_commit=False: ORM rows stay readable after commit in async handlers
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from photobooth.core.errors import ConflictError, DatabaseError

logger = logging.getLogger(__name__)


def _engine_options(database_url: str, pool_size: int, max_overflow: int) -> dict:
    if database_url.startswith("sqlite"):
        return {}
    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


class DatabaseSessionManager:
    """Owns the async engine and hands out rollback-safe sessions."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_async_engine(
            database_url, **_engine_options(database_url, pool_size, max_overflow),
        )
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session scope: rollback + DatabaseError on failure, always closed."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.warning(f"DB constraint violated: {e.orig}")
            raise ConflictError("A record with the same unique value already exists")
        except SQLAlchemyError as e:
            await session.rollback()
            operation, message = _classify(e)
            logger.error(f"DB {operation} error: {e}")
            raise DatabaseError(message, operation)
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Run SELECT 1 (readiness probe)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


def _classify(error: SQLAlchemyError) -> tuple[str, str]:
    if isinstance(error, OperationalError):
        return "execute", "Connection or operational error"
    if isinstance(error, DBAPIError):
        return "query", "Database driver error"
    return "unknown", "Database operation failed"


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def close_db() -> None:
    global db_manager
    if db_manager:
        await db_manager.dispose()
        db_manager = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
