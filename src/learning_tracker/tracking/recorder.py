"""Record that an owner did something trackable today."""

import logging
from typing import Optional

from ..observability.logging import owner_log_context
from .best_effort import best_effort
from .clock import Clock, SystemClock, day_key
from .store import ActivityStore, DailyActivity

logger = logging.getLogger(__name__)


class ActivityRecorder:
    """Maintains at most one record per owner per day, counting repeat activity.

    Recording is best-effort: a store failure is logged and ``None`` is
    returned, so the action that triggered it is never blocked.
    """

    def __init__(self, store: ActivityStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or SystemClock()

    async def record_activity(self, owner: str) -> Optional[DailyActivity]:
        if not owner:
            logger.warning("Refusing to record activity without an owner")
            return None

        with owner_log_context(owner):
            return await self._record(owner)

    @best_effort(action="activity recording")
    async def _record(self, owner: str) -> DailyActivity:
        today = self.clock.today()
        record = await self.store.increment_or_create(owner, today)
        logger.debug("Recorded activity for %s (count=%d)", day_key(today), record.count)
        return record
