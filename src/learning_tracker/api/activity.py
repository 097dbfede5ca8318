"""Activity logging and streak endpoints."""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ..config import get_settings
from ..security.tokens import get_current_owner
from ..tracking import (
    ActivityHistory,
    ActivityRecorder,
    ActivityStore,
    Clock,
    SqlActivityStore,
    StreakCalculator,
    SystemClock,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------


class RecordActivityResponse(BaseModel):
    recorded: bool
    day: Optional[date] = None
    count: Optional[int] = None


class StreakResponse(BaseModel):
    streak: int
    has_logged_today: bool
    tier: str
    message: str


class ActivityPointResponse(BaseModel):
    day: date
    label: str
    count: int


class RecentActivityResponse(BaseModel):
    points: List[ActivityPointResponse]


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_activity_store() -> ActivityStore:
    return SqlActivityStore()


def get_clock() -> Clock:
    return SystemClock(get_settings().get_activity_zone())


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.post("/activity", response_model=RecordActivityResponse)
async def record_activity(
    owner: Optional[str] = Depends(get_current_owner),
    store: ActivityStore = Depends(get_activity_store),
    clock: Clock = Depends(get_clock),
):
    """Count one trackable action for the caller today.

    A failed write is reported as ``recorded: false`` with status 200; the
    action that triggered it must not fail because of logging.
    """
    if owner is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    record = await ActivityRecorder(store, clock).record_activity(owner)
    if record is None:
        return RecordActivityResponse(recorded=False)
    return RecordActivityResponse(recorded=True, day=record.day, count=record.count)


@router.get("/streak", response_model=StreakResponse)
async def get_streak(
    owner: Optional[str] = Depends(get_current_owner),
    store: ActivityStore = Depends(get_activity_store),
    clock: Clock = Depends(get_clock),
):
    """Current streak. Anonymous callers get a zero streak rather than a 401."""
    settings = get_settings()
    calculator = StreakCalculator(store, clock, pro_threshold=settings.streak_pro_threshold)
    snapshot = await calculator.compute_streak(owner)
    return StreakResponse(
        streak=snapshot.streak,
        has_logged_today=snapshot.has_logged_today,
        tier=snapshot.tier,
        message=snapshot.status_message,
    )


@router.get("/activity/recent", response_model=RecentActivityResponse)
async def get_recent_activity(
    limit: Optional[int] = Query(default=None, ge=1, le=366),
    owner: Optional[str] = Depends(get_current_owner),
    store: ActivityStore = Depends(get_activity_store),
):
    """Most recent active days, oldest first, for the progress chart."""
    if limit is None:
        limit = get_settings().recent_activity_limit
    points = await ActivityHistory(store).recent_activity(owner, limit)
    return RecentActivityResponse(
        points=[
            ActivityPointResponse(day=p.day, label=p.label, count=p.count)
            for p in points
        ]
    )
