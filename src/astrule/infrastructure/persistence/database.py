"""Database abstraction layer using SQLAlchemy 2.0 async.

This module provides the database session management and engine configuration
for the SQL rule store. It supports SQLite (aiosqlite) and PostgreSQL
(asyncpg) drivers. A DatabaseManager is created from settings and handed to
whatever needs it; there is no process-wide instance.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from astrule.core.config import Settings, get_settings
from astrule.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class DatabaseManager:
    """Database connection and session manager.

    This class manages the async database engine and session factory.
    The engine is created lazily on first use and disposed by disconnect().
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the database manager.

        Args:
            settings: Settings to read the database URL from. Defaults to the
                cached application settings.
        """
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine.

        Returns:
            AsyncEngine: SQLAlchemy async engine instance.
        """
        if self._engine is None:
            url = self.settings.database_url
            kwargs: dict = {"echo": self.settings.db_echo}
            if url.startswith("sqlite"):
                kwargs["connect_args"] = {"check_same_thread": False}
                # An in-memory database lives only as long as its connection
                if ":memory:" in url:
                    kwargs["poolclass"] = StaticPool

            self._engine = create_async_engine(url, **kwargs)
            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.debug("Database session factory created")
        return self._session_factory

    async def create_tables(self) -> None:
        """Create all database tables.

        Creates the SQLite database directory first when needed.
        """
        # Import models so they are registered with Base.metadata
        from astrule.infrastructure.persistence.models import RuleModel  # noqa: F401

        url = self.settings.database_url
        if url.startswith("sqlite") and ":memory:" not in url:
            db_dir = Path(url.split(":///")[-1]).parent
            db_dir.mkdir(parents=True, exist_ok=True)

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created")

    async def drop_tables(self) -> None:
        """Drop all database tables.

        WARNING: This will delete all data. Only use in testing!
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            logger.warning("Database tables dropped")

    async def disconnect(self) -> None:
        """Close the database engine and all connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a transactional scope for database operations.

        Yields:
            AsyncSession: SQLAlchemy async session.

        Example:
            async with db.session() as session:
                result = await session.execute(select(RuleModel))
                rules = result.scalars().all()
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
