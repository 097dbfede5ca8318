"""Test clocks and day keys."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from learning_tracker.tracking.clock import (
    FixedClock,
    SystemClock,
    day_key,
    parse_day,
    previous_day,
)


class TestDayKey:
    def test_renders_zero_padded_iso_day(self):
        assert day_key(date(2024, 1, 5)) == "2024-01-05"

    def test_parse_day_inverts_day_key(self):
        assert parse_day("2024-02-29") == date(2024, 2, 29)

    @pytest.mark.parametrize("value", ["1/10/2024", "2024-13-01", "2024-01-10T00:00:00", ""])
    def test_parse_day_rejects_other_formats(self, value):
        with pytest.raises(ValueError):
            parse_day(value)


class TestPreviousDay:
    def test_crosses_month_and_year(self):
        assert previous_day(date(2024, 1, 1)) == date(2023, 12, 31)

    def test_leap_day(self):
        assert previous_day(date(2024, 3, 1)) == date(2024, 2, 29)


class TestFixedClock:
    def test_naive_instant_is_utc(self):
        clock = FixedClock(datetime(2024, 1, 10, 8, 30))
        assert clock.now().tzinfo is not None
        assert clock.today() == date(2024, 1, 10)

    def test_midnight_boundary_splits_days(self):
        clock = FixedClock(datetime(2024, 1, 10, 23, 59, 59, tzinfo=timezone.utc))
        before = clock.today()
        clock.advance(seconds=2)
        after = clock.today()

        assert before == date(2024, 1, 10)
        assert after == date(2024, 1, 11)
        assert day_key(before) != day_key(after)

    def test_day_follows_configured_zone(self):
        instant = datetime(2024, 1, 10, 23, 30, tzinfo=timezone.utc)
        assert FixedClock(instant).today() == date(2024, 1, 10)
        assert FixedClock(instant, tz=ZoneInfo("Asia/Tokyo")).today() == date(2024, 1, 11)

    def test_yesterday_across_dst_change(self):
        # 2024-03-10 is 23 hours long in New York.
        clock = FixedClock(
            datetime(2024, 3, 11, 0, 30, tzinfo=ZoneInfo("America/New_York")),
            tz=ZoneInfo("America/New_York"),
        )
        assert previous_day(clock.today()) == date(2024, 3, 10)


class TestSystemClock:
    def test_defaults_to_utc(self):
        clock = SystemClock()
        assert clock.now().utcoffset() == timedelta(0)

    def test_today_matches_now(self):
        clock = SystemClock()
        assert clock.today() in {
            clock.now().date(),
            (clock.now() - timedelta(seconds=1)).date(),
        }
