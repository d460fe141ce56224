"""
Ledger module - Activity records and the statistics derived from them.

This module provides:
- Record store for users, workouts, health metrics and scheduled workouts
- Streak engine for consecutive-day workout streaks
- Stats aggregator for the dashboard snapshot
- Activity service orchestrating the above per request
"""
from fitledger.services.ledger.store import RecordStore
from fitledger.services.ledger.streaks import (
    StreakEngine,
    StreakResult,
    compute_current_streak,
)
from fitledger.services.ledger.dashboard import (
    DashboardStats,
    StatsAggregator,
    compute_weight_progress,
)
from fitledger.services.ledger.locks import UserLockRegistry
from fitledger.services.ledger.service import ActivityService

__all__ = [
    # Store
    "RecordStore",
    # Streaks
    "StreakEngine",
    "StreakResult",
    "compute_current_streak",
    # Dashboard
    "DashboardStats",
    "StatsAggregator",
    "compute_weight_progress",
    # Orchestration
    "UserLockRegistry",
    "ActivityService",
]
