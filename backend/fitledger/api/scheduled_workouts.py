"""
Scheduled Workouts API endpoints.
"""
from datetime import datetime

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from fitledger.api.deps import get_activity_service, get_current_user_id
from fitledger.core.logging import get_logger
from fitledger.services.ledger import ActivityService

logger = get_logger(__name__)
router = APIRouter()


# ========================================
# Request/Response Schemas
# ========================================

class CreateScheduledWorkoutRequest(BaseModel):
    """Request to schedule a workout."""
    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    scheduledDate: datetime = Field(..., description="When the workout is planned")
    duration: int = Field(..., gt=0, description="Planned duration in minutes")

    def to_fields(self) -> dict:
        return {
            "name": self.name,
            "type": self.type,
            "scheduled_date": _naive(self.scheduledDate),
            "duration": self.duration,
        }


class UpdateScheduledWorkoutRequest(BaseModel):
    """Partial update, typically marking the workout completed."""
    name: str | None = Field(None, min_length=1)
    type: str | None = Field(None, min_length=1)
    scheduledDate: datetime | None = None
    duration: int | None = Field(None, gt=0)
    completed: bool | None = None

    def to_fields(self) -> dict:
        data = self.model_dump(exclude_unset=True)
        if "scheduledDate" in data:
            data["scheduled_date"] = _naive(data.pop("scheduledDate"))
        return data


class ScheduledWorkoutResponse(BaseModel):
    """Scheduled workout response."""
    id: str
    userId: str
    name: str
    type: str
    scheduledDate: str
    duration: int
    completed: bool
    createdAt: int


def _naive(value: datetime | None) -> datetime | None:
    """Store server-local naive datetimes."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


# ========================================
# API Endpoints
# ========================================

@router.get("", response_model=list[ScheduledWorkoutResponse])
async def list_scheduled_workouts(
    user_id: str = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
):
    """
    Get the user's scheduled workouts, soonest first.
    """
    scheduled = await service.list_scheduled_workouts(user_id)
    return [ScheduledWorkoutResponse(**s.to_dict()) for s in scheduled]


@router.post("", response_model=ScheduledWorkoutResponse, status_code=201)
async def create_scheduled_workout(
    request: CreateScheduledWorkoutRequest,
    user_id: str = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
):
    """
    Schedule a workout.
    """
    scheduled = await service.create_scheduled_workout(user_id, request.to_fields())
    return ScheduledWorkoutResponse(**scheduled.to_dict())


@router.patch("/{scheduled_id}", response_model=ScheduledWorkoutResponse)
async def update_scheduled_workout(
    scheduled_id: str,
    request: UpdateScheduledWorkoutRequest,
    user_id: str = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
):
    """
    Update a scheduled workout.
    """
    scheduled = await service.update_scheduled_workout(
        user_id, scheduled_id, request.to_fields()
    )

    logger.info("Scheduled workout updated", scheduled_id=scheduled_id)
    return ScheduledWorkoutResponse(**scheduled.to_dict())


@router.delete("/{scheduled_id}", status_code=204)
async def delete_scheduled_workout(
    scheduled_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
):
    """
    Delete a scheduled workout.
    """
    await service.delete_scheduled_workout(user_id, scheduled_id)
    return Response(status_code=204)
