"""
Activity Service - Operations exposed to the API layer.

Every operation takes the authenticated user id from the access layer and
only ever touches that user's records. A record owned by someone else is
reported exactly like a missing one.
"""
from typing import Any, Dict, List, Optional, TypeVar

from fitledger.core.errors import ConflictError, NotFoundError
from fitledger.core.logging import UnitOfWorkLogger, get_logger
from fitledger.models import HealthMetrics, ScheduledWorkout, User, Workout
from fitledger.services.ledger.dashboard import DashboardStats, StatsAggregator
from fitledger.services.ledger.locks import UserLockRegistry
from fitledger.services.ledger.store import RecordStore
from fitledger.services.ledger.streaks import StreakEngine

logger = get_logger(__name__)

OwnedT = TypeVar("OwnedT", Workout, HealthMetrics, ScheduledWorkout)


class ActivityService:
    """
    Orchestrates the record store, streak engine and stats aggregator.

    Usage:
        service = ActivityService(RecordStore(db), locks)
        workout = await service.create_workout(user_id, {"name": "Run", ...})
        stats = await service.get_dashboard_stats(user_id)
    """

    def __init__(self, store: RecordStore, locks: UserLockRegistry):
        self.store = store
        self.locks = locks
        self.streaks = StreakEngine(store)
        self.aggregator = StatsAggregator(store)
        self.uow_logger = UnitOfWorkLogger(logger)

    # ========================================
    # Users
    # ========================================

    async def register_user(self, fields: Dict[str, Any]) -> User:
        """Create a user; username and email must be unused."""
        if await self.store.get_user_by_username(fields["username"]):
            raise ConflictError("username")
        if await self.store.get_user_by_email(fields["email"]):
            raise ConflictError("email")

        user = await self.store.create_user(**fields)
        await self.store.commit()
        logger.info("User registered", user_id=user.id)
        return user

    async def get_user(self, user_id: str) -> User:
        user = await self.store.get_user(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def update_user_profile(self, user_id: str, updates: Dict[str, Any]) -> User:
        """Partial profile update. Streak counters are never taken from `updates`."""
        async with self.locks.hold(user_id):
            user = await self.store.update_user(user_id, updates)
            if user is None:
                raise NotFoundError("User", user_id)
            await self.store.commit()

        logger.info("Profile updated", user_id=user_id, fields=sorted(updates))
        return user

    # ========================================
    # Workouts
    # ========================================

    async def create_workout(self, user_id: str, fields: Dict[str, Any]) -> Workout:
        """
        Append a workout, then recompute the user's streak.

        Both steps and the commit happen under the user's lock, so no other
        request for this user sees the workout without the updated streak.
        On any failure the insert is rolled back before the error propagates.
        """
        with self.uow_logger.track("workout.create", user_id) as work:
            async with self.locks.hold(user_id):
                if await self.store.get_user(user_id) is None:
                    raise NotFoundError("User", user_id)

                try:
                    workout = await self.store.insert_workout(user_id, **fields)
                    work.step("inserted", workout_id=workout.id)

                    result = await self.streaks.recompute(user_id)
                    if result is None:
                        raise NotFoundError("User", user_id)
                    work.step(
                        "streak_recomputed",
                        current_streak=result.current_streak,
                        longest_streak=result.longest_streak,
                    )

                    await self.store.commit()
                    work.step("committed")
                except Exception:
                    await self.store.rollback()
                    work.step("rolled_back")
                    raise

        return workout

    async def list_workouts(self, user_id: str) -> List[Workout]:
        return await self.store.list_workouts_by_user(user_id)

    async def get_workout(self, user_id: str, workout_id: str) -> Workout:
        workout = await self.store.get_workout(workout_id)
        return self._owned(workout, user_id, "Workout", workout_id)

    async def update_workout(
        self,
        user_id: str,
        workout_id: str,
        updates: Dict[str, Any]
    ) -> Workout:
        """Edit a workout. Streaks are left as they are."""
        await self.get_workout(user_id, workout_id)
        workout = await self.store.update_workout(workout_id, updates)
        workout = self._owned(workout, user_id, "Workout", workout_id)
        await self.store.commit()
        return workout

    async def delete_workout(self, user_id: str, workout_id: str) -> None:
        """Hard delete. Streaks are left as they are."""
        await self.get_workout(user_id, workout_id)
        if not await self.store.delete_workout(workout_id):
            raise NotFoundError("Workout", workout_id)
        await self.store.commit()
        logger.info("Workout deleted", user_id=user_id, workout_id=workout_id)

    # ========================================
    # Health metrics
    # ========================================

    async def create_health_metrics(self, user_id: str, fields: Dict[str, Any]) -> HealthMetrics:
        metrics = await self.store.insert_health_metrics(user_id, **fields)
        await self.store.commit()
        logger.info("Health metrics recorded", user_id=user_id, metrics_id=metrics.id)
        return metrics

    async def list_health_metrics(self, user_id: str) -> List[HealthMetrics]:
        return await self.store.list_health_metrics_by_user(user_id)

    async def get_latest_health_metrics(self, user_id: str) -> Optional[HealthMetrics]:
        return await self.store.get_latest_health_metrics(user_id)

    # ========================================
    # Scheduled workouts
    # ========================================

    async def list_scheduled_workouts(self, user_id: str) -> List[ScheduledWorkout]:
        return await self.store.list_scheduled_workouts_by_user(user_id)

    async def create_scheduled_workout(
        self,
        user_id: str,
        fields: Dict[str, Any]
    ) -> ScheduledWorkout:
        scheduled = await self.store.insert_scheduled_workout(user_id, **fields)
        await self.store.commit()
        logger.info("Workout scheduled", user_id=user_id, scheduled_id=scheduled.id)
        return scheduled

    async def update_scheduled_workout(
        self,
        user_id: str,
        scheduled_id: str,
        updates: Dict[str, Any]
    ) -> ScheduledWorkout:
        existing = await self.store.get_scheduled_workout(scheduled_id)
        self._owned(existing, user_id, "Scheduled workout", scheduled_id)

        scheduled = await self.store.update_scheduled_workout(scheduled_id, updates)
        scheduled = self._owned(scheduled, user_id, "Scheduled workout", scheduled_id)
        await self.store.commit()
        return scheduled

    async def delete_scheduled_workout(self, user_id: str, scheduled_id: str) -> None:
        existing = await self.store.get_scheduled_workout(scheduled_id)
        self._owned(existing, user_id, "Scheduled workout", scheduled_id)

        if not await self.store.delete_scheduled_workout(scheduled_id):
            raise NotFoundError("Scheduled workout", scheduled_id)
        await self.store.commit()
        logger.info("Scheduled workout deleted", user_id=user_id, scheduled_id=scheduled_id)

    # ========================================
    # Dashboard
    # ========================================

    async def get_dashboard_stats(self, user_id: str) -> DashboardStats:
        user = await self.get_user(user_id)
        return await self.aggregator.dashboard(user)

    # ========================================
    # Helpers
    # ========================================

    @staticmethod
    def _owned(entity: Optional[OwnedT], user_id: str, name: str, entity_id: str) -> OwnedT:
        if entity is None or entity.user_id != user_id:
            raise NotFoundError(name, entity_id)
        return entity
