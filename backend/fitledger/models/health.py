"""
Health Metrics database model.
Every measurement is optional; a record may carry a single dimension.
"""
import uuid
from datetime import datetime
from typing import Literal
from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fitledger.core.database import Base


SleepQuality = Literal["poor", "fair", "good", "excellent"]


class HealthMetrics(Base):
    """Health metrics entry stored in database."""

    __tablename__ = "health_metrics"

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(
        String(36),
        unique=True,
        nullable=False,
        default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    sleep_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    sleep_quality: Mapped[str | None] = mapped_column(String(20), nullable=True)
    water_intake: Mapped[int | None] = mapped_column(Integer, nullable=True)  # glasses
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "weight": self.weight,
            "sleepHours": self.sleep_hours,
            "sleepQuality": self.sleep_quality,
            "waterIntake": self.water_intake,
            "notes": self.notes,
            "createdAt": int(self.created_at.timestamp() * 1000),
        }
