"""
Health Metrics API endpoints.
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from fitledger.api.deps import get_activity_service, get_current_user_id
from fitledger.core.logging import get_logger
from fitledger.models import SleepQuality
from fitledger.services.ledger import ActivityService

logger = get_logger(__name__)
router = APIRouter()


# ========================================
# Request/Response Schemas
# ========================================

class CreateHealthMetricsRequest(BaseModel):
    """Request to record health metrics. Every field is optional."""
    weight: float | None = Field(None, gt=0, description="Body weight")
    sleepHours: float | None = Field(None, ge=0, le=24, description="Hours slept")
    sleepQuality: SleepQuality | None = Field(None, description="Sleep quality")
    waterIntake: int | None = Field(None, ge=0, description="Glasses of water")
    notes: str | None = None

    def to_fields(self) -> dict:
        return {
            "weight": self.weight,
            "sleep_hours": self.sleepHours,
            "sleep_quality": self.sleepQuality,
            "water_intake": self.waterIntake,
            "notes": self.notes,
        }


class HealthMetricsResponse(BaseModel):
    """Health metrics response."""
    id: str
    userId: str
    weight: float | None
    sleepHours: float | None
    sleepQuality: str | None
    waterIntake: int | None
    notes: str | None
    createdAt: int


# ========================================
# API Endpoints
# ========================================

@router.get("", response_model=list[HealthMetricsResponse])
async def list_health_metrics(
    user_id: str = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
):
    """
    Get the user's health metrics, most recent first.
    """
    metrics = await service.list_health_metrics(user_id)
    return [HealthMetricsResponse(**m.to_dict()) for m in metrics]


@router.get("/latest", response_model=HealthMetricsResponse | None)
async def get_latest_health_metrics(
    user_id: str = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
):
    """
    Get the most recent health metrics entry, or null if there is none.
    """
    metrics = await service.get_latest_health_metrics(user_id)
    if metrics is None:
        return None
    return HealthMetricsResponse(**metrics.to_dict())


@router.post("", response_model=HealthMetricsResponse, status_code=201)
async def create_health_metrics(
    request: CreateHealthMetricsRequest,
    user_id: str = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
):
    """
    Record health metrics.
    """
    metrics = await service.create_health_metrics(user_id, request.to_fields())
    return HealthMetricsResponse(**metrics.to_dict())
