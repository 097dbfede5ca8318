"""Recent daily activity, shaped for the dashboard progress chart."""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from ..observability.logging import owner_log_context
from .best_effort import best_effort
from .store import ActivityStore

DEFAULT_RECENT_LIMIT = 7


@dataclass(frozen=True)
class ActivityPoint:
    day: date
    label: str
    count: int


def weekday_label(day: date) -> str:
    """Short English weekday name, independent of the process locale."""
    return ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")[day.weekday()]


class ActivityHistory:
    def __init__(self, store: ActivityStore):
        self.store = store

    async def recent_activity(
        self, owner: Optional[str], limit: int = DEFAULT_RECENT_LIMIT
    ) -> List[ActivityPoint]:
        """Up to ``limit`` most recent active days for ``owner``, oldest first."""
        if not owner:
            return []
        with owner_log_context(owner):
            return await self._recent(owner, limit)

    @best_effort(default=list, action="recent activity lookup")
    async def _recent(self, owner: str, limit: int) -> List[ActivityPoint]:
        records = await self.store.recent(owner, limit)
        return [
            ActivityPoint(day=r.day, label=weekday_label(r.day), count=r.count)
            for r in records
        ]
