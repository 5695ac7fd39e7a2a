# database.py
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from .errors import StorageError
from . import models  # noqa: F401  registers the employees table on SQLModel.metadata

logger = logging.getLogger(__name__)


def _driver_message(exc: SQLAlchemyError) -> str:
    """The underlying DBAPI error text, without SQLAlchemy's statement dump."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class EmployeeStore:
    """Owns the engine, the bounded connection pool and the schema bootstrap.

    Constructed once per process and handed to request handlers through
    ``get_store``; nothing here is a module-level singleton.
    """

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        retry_delay: float = 5.0,
        echo: bool = False,
    ):
        engine_kwargs = {"echo": echo, "pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(pool_size=pool_size, max_overflow=0, pool_recycle=3600)

        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self.retry_delay = retry_delay
        self.ready = False

    async def _create_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def initialize(self) -> int:
        """Create the employees table if missing, retrying forever on failure.

        Returns the number of attempts it took.
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                await self._create_schema()
            except Exception as exc:
                logger.error(
                    f"Error initializing database: {exc}",
                    extra={"attempt": attempt},
                )
                await asyncio.sleep(self.retry_delay)
                continue

            self.ready = True
            logger.info("Database initialized successfully", extra={"attempt": attempt})
            return attempt

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a session; database failures surface as StorageError."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as exc:
            await session.rollback()
            message = _driver_message(exc)
            logger.error(f"Database error: {message}", extra={"error_code": "DATABASE_ERROR"})
            raise StorageError(message) from exc
        finally:
            await session.close()

    async def ping(self) -> bool:
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except StorageError:
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


def get_store(request: Request) -> EmployeeStore:
    """FastAPI dependency returning the store attached to the running app."""
    return request.app.state.store
