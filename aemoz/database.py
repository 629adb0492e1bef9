"""Database engine, session management and storage-call bounding."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, TypeVar

from sqlalchemy import event, text
from sqlalchemy.exc import (
    DBAPIError,
    InterfaceError,
    OperationalError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from aemoz.config.settings import DatabaseConfig

# Import models so they are attached to Base.metadata before table creation
from aemoz.models import Base
from aemoz.services.errors import Unavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _create_engine(config: DatabaseConfig, *, debug: bool) -> AsyncEngine:
    """Create an async engine with environment-appropriate pooling."""

    url = config.url
    engine_options: dict[str, Any] = {
        "echo": debug,
        "future": True,
        "pool_pre_ping": True,
    }

    if url.startswith("sqlite"):
        engine_options["poolclass"] = NullPool
    elif config.serverless:
        # Disable pooling when working with serverless databases.
        engine_options["poolclass"] = NullPool
    else:
        engine_options["pool_size"] = config.pool_size
        engine_options["pool_timeout"] = config.timeout_seconds

    if url.startswith("postgresql+asyncpg"):
        engine_options["connect_args"] = {
            "timeout": config.timeout_seconds,
            "command_timeout": config.timeout_seconds,
        }

    engine = create_async_engine(url, **engine_options)

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine.sync_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


class Database:
    """Process-wide connection pool with an explicit lifecycle.

    One instance is created by the app factory, stored on ``app.state`` and
    handed to every service. ``write_lock`` serialises draws and resets
    issued from this process; PostgreSQL table locks cover other processes.
    """

    def __init__(self, config: DatabaseConfig, *, debug: bool = False) -> None:
        self.config = config
        self.timeout = config.timeout_seconds
        self.engine: AsyncEngine = _create_engine(config, debug=debug)
        self.session_factory = async_sessionmaker(
            self.engine,
            expire_on_commit=False,
            class_=AsyncSession,
        )
        self.write_lock = asyncio.Lock()

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @asynccontextmanager
    async def session_scope(self) -> AsyncIterator[AsyncSession]:
        """Async context manager that yields a plain session."""

        async with self.session_factory() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Yield a session inside BEGIN; commit on success, roll back on any error.

        Cancellation counts as an error, so a dropped client never leaves a
        half-written transaction behind.
        """

        async with self.session_factory() as session:
            async with session.begin():
                yield session

    async def lock_tables(
        self,
        session: AsyncSession,
        *tables: str,
        mode: str = "ACCESS EXCLUSIVE",
    ) -> None:
        """Take table locks held until the transaction ends.

        Only PostgreSQL needs this; SQLite already serialises writers.
        """

        if self.dialect != "postgresql" or not tables:
            return
        await session.execute(
            text(f"LOCK TABLE {', '.join(tables)} IN {mode} MODE")
        )

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run a storage operation with a bounded timeout.

        Timeouts and connectivity failures surface as ``Unavailable``.
        """

        try:
            return await asyncio.wait_for(operation(), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("Storage operation exceeded %.1fs", self.timeout)
            raise Unavailable("Storage timed out, try again") from exc
        except (PoolTimeoutError, InterfaceError, OperationalError, OSError) as exc:
            logger.warning("Storage unavailable: %s", exc.__class__.__name__)
            raise Unavailable() from exc
        except DBAPIError as exc:
            if exc.connection_invalidated:
                logger.warning("Storage connection lost")
                raise Unavailable() from exc
            raise

    async def ping(self) -> None:
        """Round-trip a trivial query; raises ``Unavailable`` on failure."""

        async def _select_one() -> None:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))

        await self.run(_select_one)

    async def init_models(self) -> None:
        """Create database tables if they do not exist."""

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("Ensured database tables (%s).", self.dialect)

    async def dispose(self) -> None:
        """Dispose of the engine and release pooled connections."""

        await self.engine.dispose()


__all__ = ["Database"]
