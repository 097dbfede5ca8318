"""Consecutive-day streak derived from an owner's daily activity history.

The streak is recomputed from the full history on every read; nothing about
it is persisted.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ..observability.logging import owner_log_context
from .best_effort import best_effort
from .clock import Clock, SystemClock, previous_day
from .store import ActivityStore

logger = logging.getLogger(__name__)

DEFAULT_PRO_THRESHOLD = 10

LOGGED_TODAY_MESSAGE = (
    "You've logged activity today! Keep it up tomorrow to maintain your streak."
)
NOT_LOGGED_TODAY_MESSAGE = (
    "You haven't logged any activity today yet. "
    "Complete a task or add a resource to keep your streak alive!"
)


@dataclass(frozen=True)
class StreakSnapshot:
    streak: int = 0
    has_logged_today: bool = False
    pro_threshold: int = DEFAULT_PRO_THRESHOLD

    @property
    def tier(self) -> str:
        return "Pro" if self.streak > self.pro_threshold else "Starter"

    @property
    def status_message(self) -> str:
        return LOGGED_TODAY_MESSAGE if self.has_logged_today else NOT_LOGGED_TODAY_MESSAGE


def calculate_streak(
    days: Iterable[date], today: date, pro_threshold: int = DEFAULT_PRO_THRESHOLD
) -> StreakSnapshot:
    """Count consecutive active days ending today, or yesterday if today is empty.

    A run that ended before yesterday is broken and yields 0. Days older than
    the first gap are ignored.
    """
    active = set(days)
    has_logged_today = today in active
    yesterday = previous_day(today)

    if not has_logged_today and yesterday not in active:
        return StreakSnapshot(0, False, pro_threshold)

    cursor = today if has_logged_today else yesterday
    streak = 0
    while cursor in active:
        streak += 1
        cursor = previous_day(cursor)

    return StreakSnapshot(streak, has_logged_today, pro_threshold)


class StreakCalculator:
    """Reads an owner's history and derives their current streak."""

    def __init__(
        self,
        store: ActivityStore,
        clock: Optional[Clock] = None,
        pro_threshold: int = DEFAULT_PRO_THRESHOLD,
    ):
        self.store = store
        self.clock = clock or SystemClock()
        self.pro_threshold = pro_threshold

    def _empty(self) -> StreakSnapshot:
        return StreakSnapshot(pro_threshold=self.pro_threshold)

    async def compute_streak(self, owner: Optional[str]) -> StreakSnapshot:
        """Streak for ``owner``; the zero snapshot when there is no owner or the read fails."""
        if not owner:
            return self._empty()

        with owner_log_context(owner):
            snapshot = await self._compute(owner)
        return snapshot if snapshot is not None else self._empty()

    @best_effort(action="streak calculation")
    async def _compute(self, owner: str) -> Optional[StreakSnapshot]:
        history = await self.store.find_all(owner)
        return calculate_streak(
            (record.day for record in history),
            self.clock.today(),
            self.pro_threshold,
        )
