"""Time sources and the canonical day format used at the store boundary."""

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional, Protocol

DAY_FORMAT = "%Y-%m-%d"


class Clock(Protocol):
    """Source of the current instant and calendar day."""

    def now(self) -> datetime: ...

    def today(self) -> date: ...


class SystemClock:
    """Wall-clock time, bucketed into days in a single zone (UTC by default)."""

    def __init__(self, tz: Optional[tzinfo] = None):
        self.tz = tz or timezone.utc

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()


class FixedClock:
    """Clock pinned to a given instant. Naive instants are taken as UTC."""

    def __init__(self, instant: datetime, tz: Optional[tzinfo] = None):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self.tz = tz or timezone.utc
        self._instant = instant

    def now(self) -> datetime:
        return self._instant.astimezone(self.tz)

    def today(self) -> date:
        return self.now().date()

    def advance(self, **delta) -> None:
        """Move the clock forward by ``timedelta(**delta)``."""
        self._instant += timedelta(**delta)


def previous_day(day: date) -> date:
    """Calendar day before ``day``; unaffected by DST transitions."""
    return day - timedelta(days=1)


def day_key(day: date) -> str:
    """Render a day as ``YYYY-MM-DD``."""
    return day.strftime(DAY_FORMAT)


def parse_day(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string. Raises ValueError on any other shape."""
    return datetime.strptime(value, DAY_FORMAT).date()
