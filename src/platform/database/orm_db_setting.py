"""
SQLAlchemy async engine and session management.

`Database` is constructed explicitly (by the DI container in production, by
fixtures in tests) and owns its engine for the process lifetime:

    database = Database(url=settings.DATABASE_URL_ASYNC, pool_size=10)
    database.initialize()          # startup
    async with database.session() as session:
        ...
    await database.dispose()       # shutdown
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql.expression import Executable

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger


class Base(DeclarativeBase):
    pass


async def flush_or_conflict(session: AsyncSession, *, message: str) -> None:
    """Flush pending writes; a unique-constraint violation surfaces as ConflictError."""
    try:
        await session.flush()
    except IntegrityError as e:
        raise ConflictError(message) from e


async def execute_or_conflict(
    session: AsyncSession, statement: Executable, *, message: str
) -> None:
    try:
        await session.execute(statement)
    except IntegrityError as e:
        raise ConflictError(message) from e


class Database:
    def __init__(self, *, url: str, echo: bool = False, **engine_kwargs: Any) -> None:
        """
        Args:
            url: SQLAlchemy async URL (postgresql+asyncpg://... or sqlite+aiosqlite://...)
            echo: Log every statement
            engine_kwargs: Pool options forwarded to create_async_engine
        """
        self._url = url
        self._echo = echo
        self._engine_kwargs = engine_kwargs
        self._engine: Optional[AsyncEngine] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    def initialize(self) -> AsyncEngine:
        """Create the engine and session maker (idempotent)"""
        if self._engine is None:
            self._engine = create_async_engine(self._url, echo=self._echo, **self._engine_kwargs)
            self._session_maker = async_sessionmaker(
                self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
            Logger.base.info(f'🔗 [DB] Engine created for {self._engine.url.render_as_string()}')
        return self._engine

    @property
    def engine(self) -> AsyncEngine:
        return self.initialize()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session context manager. Rolls back whatever is left uncommitted on exit."""
        self.initialize()
        assert self._session_maker is not None
        async with self._session_maker() as session:
            yield session

    async def create_all(self) -> None:
        """Create tables that do not exist yet (dev/test bootstrap, migrations own production)"""
        # Importing the model package registers every table on Base.metadata
        import src.service.dining.driven_adapter.model  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            Logger.base.info('🔌 [DB] Engine disposed')
        self._engine = None
        self._session_maker = None
