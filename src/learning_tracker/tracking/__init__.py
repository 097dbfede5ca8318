"""Activity recording and streak derivation."""

from .best_effort import best_effort
from .clock import Clock, FixedClock, SystemClock, day_key, parse_day, previous_day
from .history import ActivityHistory, ActivityPoint
from .recorder import ActivityRecorder
from .store import ActivityStore, ActivityStoreError, DailyActivity, SqlActivityStore
from .streak import StreakCalculator, StreakSnapshot, calculate_streak

__all__ = [
    "best_effort",
    "Clock",
    "FixedClock",
    "SystemClock",
    "day_key",
    "parse_day",
    "previous_day",
    "ActivityHistory",
    "ActivityPoint",
    "ActivityRecorder",
    "ActivityStore",
    "ActivityStoreError",
    "DailyActivity",
    "SqlActivityStore",
    "StreakCalculator",
    "StreakSnapshot",
    "calculate_streak",
]
