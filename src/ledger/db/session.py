"""Database engine, sessions and transactional scopes.

A ``Database`` is constructed once by the application and passed to every
repository and service that needs it. There is no module-level engine.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import ledger.models  # noqa: F401  (registers every table on Base.metadata)
from ledger.config import Settings
from ledger.models.base import Base

logger = logging.getLogger(__name__)


class Database:
    """Handle to the local ledger store.

    The store is single-writer: ``transaction()`` scopes are serialized by an
    asyncio lock, and inside one scope every write either commits together
    or is rolled back together (including on task cancellation).
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine = create_async_engine(url, echo=echo, future=True)
        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )
        self._write_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        # Do not log SQL statement parameters outside development; they
        # contain amounts and merchant strings.
        echo = settings.db_echo if settings.app_env.lower() == "development" else False
        return cls(settings.database_url, echo=echo)

    async def create_all(self) -> None:
        """Create all tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Read-only scope. Nothing done here is committed.

        Closing the session detaches loaded objects without expiring them, so
        rows returned from this scope stay readable afterwards.
        """
        async with self.session_factory() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Atomic write scope.

        Commits when the block exits normally; rolls back on any exception,
        including ``asyncio.CancelledError``.
        """
        async with self._write_lock:
            async with self.session_factory() as session:
                try:
                    async with session.begin():
                        yield session
                except BaseException as e:
                    logger.debug(
                        "Transaction rolled back", extra={"error_type": type(e).__name__}
                    )
                    raise
