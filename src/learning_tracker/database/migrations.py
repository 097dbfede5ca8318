"""Database migration utilities."""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from ..models.base import Base
from ..models.progress_log import ProgressLog  # noqa: F401
from .connection import db_manager

logger = logging.getLogger(__name__)


def _resolve_engine(engine: AsyncEngine = None) -> AsyncEngine:
    if engine is None:
        if not db_manager.engine:
            db_manager.initialize()
        engine = db_manager.engine
    return engine


async def create_tables(engine: AsyncEngine = None):
    """Create all database tables."""
    engine = _resolve_engine(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(engine: AsyncEngine = None):
    """Drop all database tables."""
    engine = _resolve_engine(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def upgrade_add_progress_logs_unique_constraint(engine: AsyncEngine = None) -> bool:
    """Migration: Enforce one progress_logs row per (user_id, date).

    Tables created by the hosted dashboard before this service existed have no
    uniqueness guarantee, and concurrent writers could have produced duplicate
    rows for the same day. Duplicates are folded into the oldest row (values
    summed) before the constraint is added.

    PostgreSQL only; other dialects get the constraint from ``create_tables``.
    Safe to run on existing databases - checks if constraint exists first.

    Returns True when the constraint was added by this call.
    """
    engine = _resolve_engine(engine)
    if engine.dialect.name != "postgresql":
        return False

    async with engine.begin() as conn:
        result = await conn.execute(text(
            "SELECT constraint_name FROM information_schema.table_constraints "
            "WHERE table_name = 'progress_logs' "
            "AND constraint_type = 'UNIQUE' "
            "AND constraint_name = 'uq_progress_logs_user_date'"
        ))
        if result.scalar_one_or_none():
            logger.info("Unique constraint uq_progress_logs_user_date already exists")
            return False

        await conn.execute(text(
            "WITH ranked AS ("
            " SELECT id, SUM(value) OVER w AS total,"
            " ROW_NUMBER() OVER (PARTITION BY user_id, date ORDER BY created_at, id) AS rn"
            " FROM progress_logs WINDOW w AS (PARTITION BY user_id, date)"
            ") "
            "UPDATE progress_logs p SET value = ranked.total "
            "FROM ranked WHERE p.id = ranked.id AND ranked.rn = 1 AND p.value <> ranked.total"
        ))
        deleted = await conn.execute(text(
            "DELETE FROM progress_logs WHERE id IN ("
            " SELECT id FROM ("
            "  SELECT id, ROW_NUMBER() OVER (PARTITION BY user_id, date ORDER BY created_at, id) AS rn"
            "  FROM progress_logs"
            " ) d WHERE d.rn > 1"
            ")"
        ))
        await conn.execute(text(
            "ALTER TABLE progress_logs "
            "ADD CONSTRAINT uq_progress_logs_user_date UNIQUE (user_id, date)"
        ))
        logger.info(
            "Added unique constraint uq_progress_logs_user_date (merged %d duplicate rows)",
            deleted.rowcount or 0,
        )
        return True
