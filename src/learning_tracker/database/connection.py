"""Async engine and session management."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import get_settings

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owns the process-wide async engine and session factory."""

    def __init__(self):
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    def initialize(self, database_url: Optional[str] = None):
        """Create the engine. Safe to call more than once."""
        if self.engine is not None:
            return

        settings = get_settings()
        url = database_url or settings.get_database_url()

        engine_kwargs = {"echo": settings.debug, "pool_pre_ping": True}
        if url.startswith("sqlite"):
            # SQLite drivers do not accept pool sizing arguments
            engine_kwargs = {"echo": settings.debug}

        self.engine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.debug("Database engine initialized for %s", self.engine.url.render_as_string())

    async def close(self):
        """Dispose of the engine and its connection pool."""
        if self.engine is not None:
            await self.engine.dispose()
        self.engine = None
        self.session_factory = None


db_manager = DatabaseManager()


@asynccontextmanager
async def get_db_context() -> AsyncIterator[AsyncSession]:
    """Async context manager for database sessions outside of request scope."""
    if db_manager.session_factory is None:
        db_manager.initialize()

    async with db_manager.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
