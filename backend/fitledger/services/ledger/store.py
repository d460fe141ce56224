"""
Record Store - Database operations for users and their activity records.

Owns the four collections (users, workouts, health metrics, scheduled
workouts). Every per-user listing goes through the user_id index.
"""
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fitledger.core.database import Base
from fitledger.core.logging import get_logger
from fitledger.models import HealthMetrics, ScheduledWorkout, User, Workout

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

Clock = Callable[[], datetime]

# Never changed by a partial update
IMMUTABLE_FIELDS = frozenset({"seq", "id", "user_id", "created_at"})


class RecordStore:
    """
    Database store for the activity ledger.

    Lookups on unknown identifiers return None (or False for deletes),
    never raise. Writes are flushed but not committed; the caller owns the
    transaction.

    Usage:
        store = RecordStore(db)
        workout = await store.insert_workout(user_id, name="Run", ...)
        workouts = await store.list_workouts_by_user(user_id)
    """

    def __init__(self, db: AsyncSession, clock: Clock = datetime.now):
        self.db = db
        self.clock = clock

    async def commit(self) -> None:
        """Commit everything written through this store so far."""
        await self.db.commit()

    async def rollback(self) -> None:
        """Discard everything written through this store since the last commit."""
        await self.db.rollback()

    # ========================================
    # Users
    # ========================================

    async def get_user(self, user_id: str) -> Optional[User]:
        return await self._get(User, user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def create_user(self, **fields: Any) -> User:
        """Insert a user. Streak counters always start at zero."""
        fields = _without(fields, User.DERIVED_FIELDS)
        user = await self._insert(User, fields)
        user.current_streak = 0
        user.longest_streak = 0
        await self.db.flush()
        return user

    async def update_user(self, user_id: str, updates: Dict[str, Any]) -> Optional[User]:
        """
        Partial profile update.

        Streak counters are dropped from the update; they only change
        through set_streaks.
        """
        dropped = User.DERIVED_FIELDS.intersection(updates)
        if dropped:
            logger.warning(
                "Ignoring derived fields in user update",
                user_id=user_id,
                fields=sorted(dropped),
            )
        return await self._update(User, user_id, _without(updates, User.DERIVED_FIELDS))

    async def set_streaks(
        self,
        user_id: str,
        current_streak: int,
        longest_streak: int
    ) -> Optional[User]:
        """Write both streak counters together."""
        user = await self.get_user(user_id)
        if user is None:
            return None

        user.current_streak = current_streak
        user.longest_streak = longest_streak
        await self.db.flush()
        return user

    # ========================================
    # Workouts
    # ========================================

    async def get_workout(self, workout_id: str) -> Optional[Workout]:
        return await self._get(Workout, workout_id)

    async def list_workouts_by_user(self, user_id: str) -> List[Workout]:
        """Most recent first, insertion order on ties."""
        result = await self.db.execute(
            select(Workout)
            .where(Workout.user_id == user_id)
            .order_by(Workout.created_at.desc(), Workout.seq.asc())
        )
        return list(result.scalars().all())

    async def list_workout_timestamps(self, user_id: str) -> List[datetime]:
        """created_at of every workout of a user, most recent first."""
        result = await self.db.execute(
            select(Workout.created_at)
            .where(Workout.user_id == user_id)
            .order_by(Workout.created_at.desc())
        )
        return list(result.scalars().all())

    async def count_workouts(self, user_id: str, since: Optional[datetime] = None) -> int:
        """Number of workouts of a user, optionally only those at or after `since`."""
        query = select(func.count()).select_from(Workout).where(Workout.user_id == user_id)
        if since is not None:
            query = query.where(Workout.created_at >= since)
        result = await self.db.execute(query)
        return int(result.scalar_one())

    async def insert_workout(self, user_id: str, **fields: Any) -> Workout:
        return await self._insert(Workout, {**fields, "user_id": user_id})

    async def update_workout(self, workout_id: str, updates: Dict[str, Any]) -> Optional[Workout]:
        return await self._update(Workout, workout_id, updates)

    async def delete_workout(self, workout_id: str) -> bool:
        return await self._delete(Workout, workout_id)

    # ========================================
    # Health metrics
    # ========================================

    async def get_health_metrics(self, metrics_id: str) -> Optional[HealthMetrics]:
        return await self._get(HealthMetrics, metrics_id)

    async def list_health_metrics_by_user(self, user_id: str) -> List[HealthMetrics]:
        """Most recent first, insertion order on ties."""
        result = await self.db.execute(
            select(HealthMetrics)
            .where(HealthMetrics.user_id == user_id)
            .order_by(HealthMetrics.created_at.desc(), HealthMetrics.seq.asc())
        )
        return list(result.scalars().all())

    async def get_latest_health_metrics(self, user_id: str) -> Optional[HealthMetrics]:
        """First entry of list_health_metrics_by_user, or None."""
        result = await self.db.execute(
            select(HealthMetrics)
            .where(HealthMetrics.user_id == user_id)
            .order_by(HealthMetrics.created_at.desc(), HealthMetrics.seq.asc())
            .limit(1)
        )
        return result.scalars().first()

    async def insert_health_metrics(self, user_id: str, **fields: Any) -> HealthMetrics:
        return await self._insert(HealthMetrics, {**fields, "user_id": user_id})

    # ========================================
    # Scheduled workouts
    # ========================================

    async def get_scheduled_workout(self, scheduled_id: str) -> Optional[ScheduledWorkout]:
        return await self._get(ScheduledWorkout, scheduled_id)

    async def list_scheduled_workouts_by_user(self, user_id: str) -> List[ScheduledWorkout]:
        """Soonest first, insertion order on ties."""
        result = await self.db.execute(
            select(ScheduledWorkout)
            .where(ScheduledWorkout.user_id == user_id)
            .order_by(ScheduledWorkout.scheduled_date.asc(), ScheduledWorkout.seq.asc())
        )
        return list(result.scalars().all())

    async def insert_scheduled_workout(self, user_id: str, **fields: Any) -> ScheduledWorkout:
        fields = {**fields, "user_id": user_id}
        fields.setdefault("completed", False)
        return await self._insert(ScheduledWorkout, fields)

    async def update_scheduled_workout(
        self,
        scheduled_id: str,
        updates: Dict[str, Any]
    ) -> Optional[ScheduledWorkout]:
        return await self._update(ScheduledWorkout, scheduled_id, updates)

    async def delete_scheduled_workout(self, scheduled_id: str) -> bool:
        return await self._delete(ScheduledWorkout, scheduled_id)

    # ========================================
    # Shared helpers
    # ========================================

    async def _get(self, model: Type[ModelT], entity_id: str) -> Optional[ModelT]:
        result = await self.db.execute(select(model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def _insert(self, model: Type[ModelT], fields: Dict[str, Any]) -> ModelT:
        entity = model(**_without(fields, {"seq", "id", "created_at"}))
        entity.created_at = self.clock()
        self.db.add(entity)
        await self.db.flush()

        logger.debug(
            "Inserted record",
            table=model.__tablename__,
            record_id=entity.id,
        )
        return entity

    async def _update(
        self,
        model: Type[ModelT],
        entity_id: str,
        updates: Dict[str, Any]
    ) -> Optional[ModelT]:
        entity = await self._get(model, entity_id)
        if entity is None:
            return None

        for key, value in _without(updates, IMMUTABLE_FIELDS).items():
            if not hasattr(model, key):
                raise ValueError(f"Unknown field for {model.__tablename__}: {key}")
            setattr(entity, key, value)
        await self.db.flush()

        logger.debug(
            "Updated record",
            table=model.__tablename__,
            record_id=entity_id,
        )
        return entity

    async def _delete(self, model: Type[ModelT], entity_id: str) -> bool:
        result = await self.db.execute(delete(model).where(model.id == entity_id))
        deleted = result.rowcount > 0

        if deleted:
            logger.debug(
                "Deleted record",
                table=model.__tablename__,
                record_id=entity_id,
            )
        return deleted


def _without(fields: Dict[str, Any], excluded) -> Dict[str, Any]:
    return {k: v for k, v in fields.items() if k not in excluded}
