"""
Workouts API endpoints.
"""
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

class CreateWorkoutRequest(BaseModel):
    """Request to log a workout."""
    name: str = Field(..., min_length=1, description="Workout name")
    type: str = Field(..., min_length=1, description="Free-form category, e.g. Cardio")
    duration: int = Field(..., gt=0, description="Duration in minutes")
    exercises: str = Field(..., description="Exercise description")
    notes: str | None = Field(None, description="Optional notes")

    def to_fields(self) -> dict:
        return self.model_dump()


class UpdateWorkoutRequest(BaseModel):
    """Partial workout edit. Omitted fields are kept."""
    name: str | None = Field(None, min_length=1)
    type: str | None = Field(None, min_length=1)
    duration: int | None = Field(None, gt=0)
    exercises: str | None = None
    notes: str | None = None

    def to_fields(self) -> dict:
        return self.model_dump(exclude_unset=True)


class WorkoutResponse(BaseModel):
    """Workout response."""
    id: str
    userId: str
    name: str
    type: str
    duration: int
    exercises: str
    notes: str | None
    createdAt: int


# ========================================
# API Endpoints
# ========================================

@router.get("", response_model=list[WorkoutResponse])
async def list_workouts(
    user_id: str = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
):
    """
    Get the user's workouts, most recent first.
    """
    workouts = await service.list_workouts(user_id)
    return [WorkoutResponse(**w.to_dict()) for w in workouts]


@router.post("", response_model=WorkoutResponse, status_code=201)
async def create_workout(
    request: CreateWorkoutRequest,
    user_id: str = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
):
    """
    Log a workout and update the user's streak.
    """
    logger.info("Creating workout", user_id=user_id, type=request.type)

    workout = await service.create_workout(user_id, request.to_fields())

    logger.info("Workout created", workout_id=workout.id)
    return WorkoutResponse(**workout.to_dict())


@router.get("/{workout_id}", response_model=WorkoutResponse)
async def get_workout(
    workout_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
):
    """
    Get a specific workout by ID.
    """
    workout = await service.get_workout(user_id, workout_id)
    return WorkoutResponse(**workout.to_dict())


@router.patch("/{workout_id}", response_model=WorkoutResponse)
async def update_workout(
    workout_id: str,
    request: UpdateWorkoutRequest,
    user_id: str = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
):
    """
    Edit a workout. Does not recompute the streak.
    """
    workout = await service.update_workout(user_id, workout_id, request.to_fields())

    logger.info("Workout updated", workout_id=workout_id)
    return WorkoutResponse(**workout.to_dict())


@router.delete("/{workout_id}", status_code=204)
async def delete_workout(
    workout_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
):
    """
    Delete a workout. Does not recompute the streak.
    """
    await service.delete_workout(user_id, workout_id)
    return Response(status_code=204)
