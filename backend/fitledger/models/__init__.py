from fitledger.models.user import User
from fitledger.models.workout import Workout, ScheduledWorkout
from fitledger.models.health import HealthMetrics, SleepQuality

__all__ = [
    "User",
    "Workout",
    "ScheduledWorkout",
    "HealthMetrics",
    "SleepQuality",
]
