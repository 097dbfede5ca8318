"""Test streak derivation."""

import logging
from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from learning_tracker.observability.logging import HumanReadableFormatter
from learning_tracker.tracking.clock import FixedClock
from learning_tracker.tracking.store import ActivityStoreError, DailyActivity
from learning_tracker.tracking.streak import (
    LOGGED_TODAY_MESSAGE,
    NOT_LOGGED_TODAY_MESSAGE,
    StreakCalculator,
    StreakSnapshot,
    calculate_streak,
)

D = date(2024, 1, 10)


def days_ago(*offsets):
    return [D - timedelta(days=n) for n in offsets]


class TestCalculateStreak:
    """Test the pure streak walk."""

    def test_run_ending_today(self):
        result = calculate_streak(days_ago(0, 1, 2), D)
        assert result == StreakSnapshot(3, True)

    def test_run_ending_yesterday_still_counts(self):
        result = calculate_streak(days_ago(1, 2, 3), D)
        assert result == StreakSnapshot(3, False)

    def test_gap_yesterday_breaks_streak(self):
        result = calculate_streak(days_ago(2, 3), D)
        assert result == StreakSnapshot(0, False)

    def test_no_history(self):
        assert calculate_streak([], D) == StreakSnapshot(0, False)

    def test_disconnected_history_ignored(self):
        assert calculate_streak(days_ago(0, 1, 5), D).streak == 2

    def test_today_only(self):
        assert calculate_streak([D], D) == StreakSnapshot(1, True)

    def test_duplicates_collapse(self):
        assert calculate_streak([D, D, D - timedelta(days=1)], D).streak == 2

    def test_future_days_do_not_count(self):
        assert calculate_streak([D + timedelta(days=1)], D) == StreakSnapshot(0, False)

    def test_trace_today_present(self):
        history = [date(2024, 1, 10), date(2024, 1, 9), date(2024, 1, 8), date(2024, 1, 5)]
        assert calculate_streak(history, date(2024, 1, 10)) == StreakSnapshot(3, True)

    def test_trace_today_missing(self):
        history = [date(2024, 1, 10), date(2024, 1, 9), date(2024, 1, 8), date(2024, 1, 5)]
        assert calculate_streak(history, date(2024, 1, 11)) == StreakSnapshot(3, False)

    def test_run_across_year_boundary(self):
        history = [date(2024, 1, 1), date(2023, 12, 31), date(2023, 12, 30)]
        assert calculate_streak(history, date(2024, 1, 1)).streak == 3


class TestStreakSnapshot:
    def test_tier_starter_up_to_threshold(self):
        assert StreakSnapshot(10, True).tier == "Starter"

    def test_tier_pro_above_threshold(self):
        assert StreakSnapshot(11, True).tier == "Pro"

    def test_custom_threshold(self):
        assert StreakSnapshot(4, False, pro_threshold=3).tier == "Pro"

    def test_status_message(self):
        assert StreakSnapshot(1, True).status_message == LOGGED_TODAY_MESSAGE
        assert StreakSnapshot(1, False).status_message == NOT_LOGGED_TODAY_MESSAGE


def _store_with(days):
    store = AsyncMock()
    store.find_all.return_value = [DailyActivity(owner="user-1", day=d, count=1) for d in days]
    return store


class TestStreakCalculator:
    """Test StreakCalculator against a mocked store."""

    @pytest.mark.asyncio
    async def test_compute_streak(self, clock):
        store = _store_with(days_ago(0, 1, 2, 4))
        calculator = StreakCalculator(store, clock)

        result = await calculator.compute_streak("user-1")

        assert result == StreakSnapshot(3, True)
        store.find_all.assert_awaited_once_with("user-1")

    @pytest.mark.asyncio
    async def test_missing_owner_returns_zero_without_reading(self, clock):
        store = _store_with(days_ago(0))
        calculator = StreakCalculator(store, clock)

        assert await calculator.compute_streak(None) == StreakSnapshot(0, False)
        assert await calculator.compute_streak("") == StreakSnapshot(0, False)
        store.find_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_returns_zero(self, clock, caplog):
        store = AsyncMock()
        store.find_all.side_effect = ActivityStoreError("connection refused")
        calculator = StreakCalculator(store, clock)

        result = await calculator.compute_streak("user-1")

        assert result == StreakSnapshot(0, False)
        assert "streak calculation failed" in caplog.text

    @pytest.mark.asyncio
    async def test_zero_snapshot_keeps_threshold(self, clock):
        store = AsyncMock()
        store.find_all.side_effect = RuntimeError("boom")
        calculator = StreakCalculator(store, clock, pro_threshold=3)

        result = await calculator.compute_streak("user-1")

        assert result.pro_threshold == 3

    @pytest.mark.asyncio
    async def test_uses_injected_clock(self):
        store = _store_with([date(2024, 1, 10)])
        calculator = StreakCalculator(store, FixedClock(datetime(2024, 1, 12, 12, tzinfo=timezone.utc)))

        assert (await calculator.compute_streak("user-1")).streak == 0

    @pytest.mark.asyncio
    async def test_owner_tagged_in_logs_during_read(self, clock):
        seen = []

        async def find_all(owner):
            seen.append(HumanReadableFormatter().format(
                logging.LogRecord("learning_tracker.test", logging.INFO, __file__, 1, "x", None, None)
            ))
            return []

        store = AsyncMock()
        store.find_all.side_effect = find_all

        await StreakCalculator(store, clock).compute_streak("user-1")

        assert seen[0].endswith("[owner=user-1]")
