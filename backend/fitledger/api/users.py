"""
User API endpoints: registration, current user and profile updates.
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from fitledger.api.deps import get_activity_service, get_current_user_id
from fitledger.core.logging import get_logger
from fitledger.services.ledger import ActivityService

logger = get_logger(__name__)
router = APIRouter()


# ========================================
# Request/Response Schemas
# ========================================

class RegisterUserRequest(BaseModel):
    """Request to register a new user."""
    username: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., min_length=3, max_length=255)
    firstName: str = Field(..., min_length=1)
    lastName: str = Field(..., min_length=1)
    fitnessGoals: list[str] = Field(default=[])
    currentWeight: float | None = Field(None, gt=0)
    targetWeight: float | None = Field(None, gt=0)
    workoutFrequency: int | None = Field(None, ge=0, le=14, description="Workouts per week")

    def to_fields(self) -> dict:
        return {
            "username": self.username,
            "email": self.email,
            "first_name": self.firstName,
            "last_name": self.lastName,
            "fitness_goals": list(self.fitnessGoals),
            "current_weight": self.currentWeight,
            "target_weight": self.targetWeight,
            "workout_frequency": self.workoutFrequency,
        }


class UpdateProfileRequest(BaseModel):
    """
    Partial profile update. Omitted fields are kept.

    Streak counters are not accepted here; unknown fields are ignored.
    """
    firstName: str | None = Field(None, min_length=1)
    lastName: str | None = Field(None, min_length=1)
    fitnessGoals: list[str] | None = None
    currentWeight: float | None = Field(None, gt=0)
    targetWeight: float | None = Field(None, gt=0)
    workoutFrequency: int | None = Field(None, ge=0, le=14)

    def to_fields(self) -> dict:
        names = {
            "firstName": "first_name",
            "lastName": "last_name",
            "fitnessGoals": "fitness_goals",
            "currentWeight": "current_weight",
            "targetWeight": "target_weight",
            "workoutFrequency": "workout_frequency",
        }
        return {
            names[key]: value
            for key, value in self.model_dump(exclude_unset=True).items()
        }


class UserResponse(BaseModel):
    """User response."""
    id: str
    username: str
    email: str
    firstName: str
    lastName: str
    fitnessGoals: list[str]
    currentWeight: float | None
    targetWeight: float | None
    workoutFrequency: int | None
    currentStreak: int
    longestStreak: int
    createdAt: int


# ========================================
# API Endpoints
# ========================================

@router.post("/users", response_model=UserResponse, status_code=201)
async def register_user(
    request: RegisterUserRequest,
    service: ActivityService = Depends(get_activity_service),
):
    """
    Register a new user.
    """
    user = await service.register_user(request.to_fields())
    return UserResponse(**user.to_dict())


@router.get("/user", response_model=UserResponse)
async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
):
    """
    Get the authenticated user.
    """
    user = await service.get_user(user_id)
    return UserResponse(**user.to_dict())


@router.patch("/user/profile", response_model=UserResponse)
async def update_profile(
    request: UpdateProfileRequest,
    user_id: str = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
):
    """
    Update the authenticated user's profile.
    """
    user = await service.update_user_profile(user_id, request.to_fields())
    return UserResponse(**user.to_dict())
