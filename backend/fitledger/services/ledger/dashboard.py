"""
Stats Aggregator - Read-only dashboard snapshot.

Recomputed from raw records on every call; nothing is cached and nothing
is written.

Weight values come from an ordered list of sources. The first source that
has a value wins:

    currentWeight:  latest metrics record -> profile currentWeight
    latest weight:  latest metrics record -> profile currentWeight
    oldest weight:  oldest metrics record -> profile currentWeight
    targetWeight:   profile targetWeight
"""
from dataclasses import asdict, dataclass
from datetime import timedelta
from typing import List, Optional, Sequence

from fitledger.core.config import settings
from fitledger.core.logging import get_logger
from fitledger.models import HealthMetrics, User
from fitledger.services.ledger.store import Clock, RecordStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class DashboardStats:
    """Dashboard snapshot for one user."""
    currentStreak: int
    longestStreak: int
    weeklyWorkouts: int
    totalWorkouts: int
    weightProgress: float
    currentWeight: Optional[float]
    targetWeight: Optional[float]

    def to_dict(self) -> dict:
        return asdict(self)


def first_weight(*sources: Optional[float]) -> Optional[float]:
    """First source carrying a weight, in precedence order."""
    for value in sources:
        if value is not None:
            return value
    return None


def compute_weight_progress(
    metrics: Sequence[HealthMetrics],
    profile_weight: Optional[float]
) -> float:
    """
    Weight change between the oldest and latest metrics records.

    `metrics` is ordered most recent first. Returns 0.0 when there are
    fewer than two records or no profile weight to fall back on.
    """
    if len(metrics) < 2 or not profile_weight:
        return 0.0

    latest = first_weight(metrics[0].weight, profile_weight)
    oldest = first_weight(metrics[-1].weight, profile_weight)
    return round(latest - oldest, 1)


class StatsAggregator:
    """
    Builds the dashboard snapshot.

    Usage:
        aggregator = StatsAggregator(store)
        stats = await aggregator.dashboard(user)
    """

    def __init__(
        self,
        store: RecordStore,
        clock: Optional[Clock] = None,
        weekly_window_days: Optional[int] = None
    ):
        self.store = store
        self.clock = clock or store.clock
        self.weekly_window = timedelta(
            days=weekly_window_days or settings.WEEKLY_WINDOW_DAYS
        )

    async def dashboard(self, user: User) -> DashboardStats:
        """Compute the snapshot for `user`."""
        since = self.clock() - self.weekly_window
        weekly = await self.store.count_workouts(user.id, since=since)
        total = await self.store.count_workouts(user.id)
        metrics: List[HealthMetrics] = await self.store.list_health_metrics_by_user(user.id)
        latest = metrics[0] if metrics else None

        stats = DashboardStats(
            currentStreak=user.current_streak or 0,
            longestStreak=user.longest_streak or 0,
            weeklyWorkouts=weekly,
            totalWorkouts=total,
            weightProgress=compute_weight_progress(metrics, user.current_weight),
            currentWeight=first_weight(
                latest.weight if latest else None,
                user.current_weight,
            ),
            targetWeight=user.target_weight,
        )

        logger.debug(
            "Dashboard computed",
            user_id=user.id,
            weekly_workouts=stats.weeklyWorkouts,
            total_workouts=stats.totalWorkouts,
            metrics_count=len(metrics),
        )
        return stats
