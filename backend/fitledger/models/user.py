"""
User database model.
"""
import uuid
from datetime import datetime
from sqlalchemy import String, DateTime, Float, Integer, JSON
from sqlalchemy.orm import Mapped, mapped_column

from fitledger.core.database import Base


class User(Base):
    """User profile with derived streak counters."""

    __tablename__ = "users"

    # Written only by the streak engine
    DERIVED_FIELDS = frozenset({"current_streak", "longest_streak"})

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    fitness_goals: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    current_weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    target_weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    workout_frequency: Mapped[int | None] = mapped_column(Integer, nullable=True)
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "fitnessGoals": list(self.fitness_goals or []),
            "currentWeight": self.current_weight,
            "targetWeight": self.target_weight,
            "workoutFrequency": self.workout_frequency,
            "currentStreak": self.current_streak or 0,
            "longestStreak": self.longest_streak or 0,
            "createdAt": int(self.created_at.timestamp() * 1000),
        }
