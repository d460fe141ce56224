"""
Dashboard API endpoints.
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from fitledger.api.deps import get_activity_service, get_current_user_id
from fitledger.services.ledger import ActivityService

router = APIRouter()


class DashboardStatsResponse(BaseModel):
    """Dashboard snapshot response."""
    currentStreak: int
    longestStreak: int
    weeklyWorkouts: int
    totalWorkouts: int
    weightProgress: float
    currentWeight: float | None
    targetWeight: float | None


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    user_id: str = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
):
    """
    Streaks, weekly and total workout counts and weight trend.
    Recomputed on every request.
    """
    stats = await service.get_dashboard_stats(user_id)
    return DashboardStatsResponse(**stats.to_dict())
