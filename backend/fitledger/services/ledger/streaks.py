"""
Streak Engine - Consecutive-day workout streaks.

A day is "active" when the user logged at least one workout on it. Day
boundaries are server-local: a timestamp's calendar day is its naive date.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Set

from fitledger.core.logging import get_logger
from fitledger.services.ledger.store import Clock, RecordStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class StreakResult:
    """Streak counters after a recomputation."""
    current_streak: int
    longest_streak: int


def active_days(timestamps: Iterable[datetime]) -> Set[date]:
    """Distinct calendar days among the given timestamps."""
    return {ts.date() for ts in timestamps}


def compute_current_streak(timestamps: Iterable[datetime], today: date) -> int:
    """
    Count consecutive active days ending at `today`.

    Returns 0 when `today` has no workout; there is no grace day.
    """
    days = active_days(timestamps)
    streak = 0
    while today - timedelta(days=streak) in days:
        streak += 1
    return streak


def ratchet_longest(previous_longest: Optional[int], current_streak: int) -> int:
    """Longest streak only ever moves forward."""
    return max(previous_longest or 0, current_streak)


class StreakEngine:
    """
    Recomputes and persists a user's streak counters.

    Usage:
        engine = StreakEngine(store)
        result = await engine.recompute(user_id)
    """

    def __init__(self, store: RecordStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or store.clock

    async def recompute(self, user_id: str) -> Optional[StreakResult]:
        """
        Recompute from all of the user's workouts and write both counters.

        Returns None if the user does not exist.
        """
        user = await self.store.get_user(user_id)
        if user is None:
            logger.warning("Streak recompute for unknown user", user_id=user_id)
            return None

        timestamps = await self.store.list_workout_timestamps(user_id)
        current = compute_current_streak(timestamps, self.clock().date())
        longest = ratchet_longest(user.longest_streak, current)

        await self.store.set_streaks(user_id, current, longest)

        logger.info(
            "Streak recomputed",
            user_id=user_id,
            current_streak=current,
            longest_streak=longest,
            workout_count=len(timestamps),
        )
        return StreakResult(current_streak=current, longest_streak=longest)
