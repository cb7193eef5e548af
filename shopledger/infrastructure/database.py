"""Database Session Manager - one async session per request, rolled back on any failure.

Invariants:
    - A request's writes land in one commit or not at all (the order cascade relies on it)
    - Unique/foreign-key violations surface as ConflictError (409), e.g. a duplicate
      order number or a second account for the same profit role
    - Other SQLAlchemy failures surface as DatabaseError (503)
    - Domain errors raised while the session is open still roll it back

Design Decisions:
    - Module-level db_manager set up in the FastAPI lifespan and disposed on shutdown
    - expire_on_commit=False: routes serialize ORM rows after committing
    - SQLite URLs (local installs, tests) get no pool sizing; the driver rejects it
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from shopledger.core.errors import ConflictError, DatabaseError, ShopLedgerError

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
    """Owns the engine and hands out request-scoped sessions."""

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
        session = self._session_factory()
        try:
            yield session
        except ShopLedgerError:
            await session.rollback()
            raise
        except IntegrityError as e:
            await session.rollback()
            logger.warning(f"Constraint violated: {e.orig}")
            raise ConflictError("The change conflicts with an existing record")
        except (OperationalError, DBAPIError) as e:
            await session.rollback()
            logger.error(f"Database unavailable: {e}")
            raise DatabaseError("Connection or driver error", "execute")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "query")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Readiness: can we run a trivial query?"""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
        except (ShopLedgerError, OSError) as e:
            logger.error(f"DB health check failed: {e}")
            return False
        return True

    async def close(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def close_db() -> None:
    global db_manager
    if db_manager is not None:
        await db_manager.close()
        db_manager = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: a session from the current db_manager."""
    if not db_manager:
        raise DatabaseError("Database not initialized", "connect")
    async with db_manager.session() as session:
        yield session
