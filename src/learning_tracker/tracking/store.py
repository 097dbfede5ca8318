"""Daily activity record store.

``ActivityStore`` is the contract the recorder and streak calculator depend
on. ``SqlActivityStore`` implements it over the ``progress_logs`` table.
"""

import abc
import logging
import uuid
from dataclasses import dataclass
from datetime import date
from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.progress_log import ProgressLog

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncContextManager[AsyncSession]]


class ActivityStoreError(Exception):
    """Persistence failure while reading or writing activity records."""


@dataclass(frozen=True)
class DailyActivity:
    """One owner's activity tally for one calendar day."""

    owner: str
    day: date
    count: int
    id: Optional[uuid.UUID] = None


class ActivityStore(abc.ABC):
    """Row-oriented store of per-owner daily activity records."""

    @abc.abstractmethod
    async def find(self, owner: str, day: date) -> Optional[DailyActivity]:
        """Return the record for (owner, day), or None."""

    @abc.abstractmethod
    async def insert(self, owner: str, day: date, count: int = 1) -> DailyActivity:
        """Create the record for (owner, day)."""

    @abc.abstractmethod
    async def update(self, record_id: uuid.UUID, count: int) -> DailyActivity:
        """Overwrite the count of an existing record."""

    @abc.abstractmethod
    async def find_all(self, owner: str) -> List[DailyActivity]:
        """Return the owner's full history, newest day first."""

    @abc.abstractmethod
    async def increment_or_create(self, owner: str, day: date) -> DailyActivity:
        """Atomically add one to (owner, day), creating it with count 1."""

    async def recent(self, owner: str, limit: int) -> List[DailyActivity]:
        """Return the ``limit`` most recent records, oldest first."""
        history = await self.find_all(owner)
        return list(reversed(history[:limit]))


def _to_activity(row: ProgressLog) -> DailyActivity:
    return DailyActivity(owner=row.user_id, day=row.date, count=row.value, id=row.id)


class SqlActivityStore(ActivityStore):
    """SQLAlchemy-backed store over ``progress_logs``.

    ``session_factory`` returns an async context manager yielding a session;
    it defaults to :func:`get_db_context`.
    """

    def __init__(self, session_factory: Optional[SessionFactory] = None):
        self._session_factory = session_factory

    def _session(self) -> AsyncContextManager[AsyncSession]:
        if self._session_factory is not None:
            return self._session_factory()
        from ..database.connection import get_db_context
        return get_db_context()

    @staticmethod
    def _increment(owner: str, day: date):
        return (
            update(ProgressLog)
            .where(ProgressLog.user_id == owner, ProgressLog.date == day)
            .values(value=ProgressLog.value + 1)
            .execution_options(synchronize_session=False)
        )

    @staticmethod
    def _select_day(owner: str, day: date):
        return select(ProgressLog).where(
            ProgressLog.user_id == owner, ProgressLog.date == day
        )

    async def find(self, owner: str, day: date) -> Optional[DailyActivity]:
        try:
            async with self._session() as session:
                row = (await session.execute(self._select_day(owner, day))).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise ActivityStoreError(f"Failed to look up activity for {day}") from e
        return _to_activity(row) if row is not None else None

    async def insert(self, owner: str, day: date, count: int = 1) -> DailyActivity:
        try:
            async with self._session() as session:
                row = ProgressLog(id=uuid.uuid4(), user_id=owner, date=day, value=count)
                session.add(row)
                await session.commit()
                return _to_activity(row)
        except SQLAlchemyError as e:
            raise ActivityStoreError(f"Failed to insert activity for {day}") from e

    async def update(self, record_id: uuid.UUID, count: int) -> DailyActivity:
        try:
            async with self._session() as session:
                row = await session.get(ProgressLog, record_id)
                if row is None:
                    raise ActivityStoreError(f"Activity record {record_id} not found")
                row.value = count
                await session.commit()
                return _to_activity(row)
        except SQLAlchemyError as e:
            raise ActivityStoreError(f"Failed to update activity record {record_id}") from e

    async def find_all(self, owner: str) -> List[DailyActivity]:
        try:
            async with self._session() as session:
                rows = (
                    await session.execute(
                        select(ProgressLog)
                        .where(ProgressLog.user_id == owner)
                        .order_by(ProgressLog.date.desc())
                    )
                ).scalars().all()
        except SQLAlchemyError as e:
            raise ActivityStoreError("Failed to fetch activity history") from e
        return [_to_activity(row) for row in rows]

    async def recent(self, owner: str, limit: int) -> List[DailyActivity]:
        try:
            async with self._session() as session:
                rows = (
                    await session.execute(
                        select(ProgressLog)
                        .where(ProgressLog.user_id == owner)
                        .order_by(ProgressLog.date.desc())
                        .limit(limit)
                    )
                ).scalars().all()
        except SQLAlchemyError as e:
            raise ActivityStoreError("Failed to fetch recent activity") from e
        return [_to_activity(row) for row in reversed(rows)]

    async def increment_or_create(self, owner: str, day: date) -> DailyActivity:
        try:
            async with self._session() as session:
                result = await session.execute(self._increment(owner, day))
                if (result.rowcount or 0) == 0:
                    session.add(ProgressLog(id=uuid.uuid4(), user_id=owner, date=day, value=1))

                try:
                    await session.commit()
                except IntegrityError:
                    # Lost the insert race to a concurrent writer; its row exists now.
                    await session.rollback()
                    logger.debug("Concurrent insert for %s, retrying as increment", day)
                    await session.execute(self._increment(owner, day))
                    await session.commit()

                row = (await session.execute(self._select_day(owner, day))).scalar_one()
                return _to_activity(row)
        except SQLAlchemyError as e:
            raise ActivityStoreError(f"Failed to record activity for {day}") from e
