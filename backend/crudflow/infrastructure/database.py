"""Database Session Manager — async engine, per-call sessions, rollback + error mapping.

Invariants:
    - A session that raises is rolled back and closed before the error leaves
    - SQLAlchemy exceptions leave as DatabaseError (core/errors.py); anything else
      (domain errors, ResourceNotFoundError) propagates unchanged
    - session_scope() is the only way persistence adapters open sessions

Design Decisions:
    - Singleton db_manager created in the FastAPI lifespan, read per call by
      session_scope() (ADR: no global import side effects)
    - expire_on_commit=False: rows stay readable after commit in async code
    - Error mapping is an ordered table, most specific class first
    - SQLite URLs skip pool sizing: aiosqlite pools reject those arguments
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

from crudflow.core.errors import DatabaseError

logger = logging.getLogger(__name__)

# (exception class, user-facing message, operation) — first match wins
_ERROR_MAP: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
    (SQLAlchemyError, "Database operation failed", "unknown"),
)


def _engine_options(database_url: str, pool_size: int, max_overflow: int) -> dict:
    options: dict = {"pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
        )
    return options


def _to_database_error(exc: SQLAlchemyError) -> DatabaseError:
    # Last entry is the SQLAlchemyError fallback
    for exc_type, message, operation in _ERROR_MAP[:-1]:
        if isinstance(exc, exc_type):
            return DatabaseError(message, operation)
    _, message, operation = _ERROR_MAP[-1]
    return DatabaseError(message, operation)


class DatabaseSessionManager:
    """Owns the async engine and hands out sessions that clean up after themselves."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_async_engine(
            database_url,
            **_engine_options(database_url, pool_size, max_overflow),
        )
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            error = _to_database_error(e)
            logger.error(f"{error.message}: {e}", extra={"error_code": error.code})
            raise error from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Readiness probe: True when SELECT 1 succeeds."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """Session from the process-wide manager. Looked up per call, not at import."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
