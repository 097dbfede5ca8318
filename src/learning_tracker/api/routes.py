"""Main API routes for Learning Tracker."""

from fastapi import APIRouter

from .activity import router as activity_router

# Main API router
router = APIRouter()

router.include_router(activity_router, tags=["activity"])
