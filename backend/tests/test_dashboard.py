from datetime import timedelta

from fitledger.services.ledger.dashboard import (
    StatsAggregator,
    compute_weight_progress,
    first_weight,
)
from fitledger.models import HealthMetrics


def metrics(*weights):
    """Metrics records ordered most recent first."""
    return [HealthMetrics(weight=w) for w in weights]


def test_first_weight_precedence():
    assert first_weight(None, 180.0) == 180.0
    assert first_weight(175.0, 180.0) == 175.0
    assert first_weight(None, None) is None


def test_weight_progress_needs_two_records():
    assert compute_weight_progress([], 180.0) == 0.0
    assert compute_weight_progress(metrics(175.0), 180.0) == 0.0


def test_weight_progress_needs_profile_weight():
    assert compute_weight_progress(metrics(175.0, 178.0), None) == 0.0


def test_weight_progress_latest_minus_oldest():
    assert compute_weight_progress(metrics(175.0, 178.0), 180.0) == -3.0


def test_weight_progress_falls_back_to_profile():
    # latest record has no weight
    assert compute_weight_progress(metrics(None, 178.0), 180.0) == 2.0
    # oldest record has no weight
    assert compute_weight_progress(metrics(176.5, None), 180.0) == -3.5


def test_weight_progress_uses_ends_only():
    assert compute_weight_progress(metrics(170.0, 190.0, 172.0), 180.0) == -2.0


def test_weight_progress_rounded_to_one_decimal():
    assert compute_weight_progress(metrics(175.33, 178.0), 180.0) == -2.7


async def test_empty_user(store, user):
    stats = await StatsAggregator(store).dashboard(user)

    assert stats.currentStreak == 0
    assert stats.longestStreak == 0
    assert stats.weeklyWorkouts == 0
    assert stats.totalWorkouts == 0
    assert stats.weightProgress == 0.0
    assert stats.currentWeight == 180.0
    assert stats.targetWeight == 170.0


async def test_weight_scenario(store, user, clock):
    await store.insert_health_metrics(user.id, weight=178.0)
    clock.advance(days=1)
    await store.insert_health_metrics(user.id, weight=175.0)

    stats = await StatsAggregator(store).dashboard(user)

    assert stats.weightProgress == -3.0
    assert stats.currentWeight == 175.0
    assert stats.targetWeight == 170.0


async def test_current_weight_falls_back_when_latest_has_none(store, user, clock):
    await store.insert_health_metrics(user.id, weight=178.0)
    clock.advance(hours=1)
    await store.insert_health_metrics(user.id, water_intake=6)

    stats = await StatsAggregator(store).dashboard(user)

    assert stats.currentWeight == 180.0


async def test_weekly_window_is_inclusive_timestamp_comparison(store, user, clock):
    now = clock.now
    for delta in (timedelta(days=7), timedelta(days=7, seconds=1), timedelta(days=2)):
        clock.now = now - delta
        await store.insert_workout(user.id, name="w", type="Cardio", duration=20, exercises="-")
    clock.now = now

    stats = await StatsAggregator(store).dashboard(user)

    # exactly 7 days ago counts, one second earlier does not
    assert stats.weeklyWorkouts == 2
    assert stats.totalWorkouts == 3


async def test_dashboard_is_idempotent_and_read_only(store, user, clock):
    await store.set_streaks(user.id, 2, 5)
    await store.insert_workout(user.id, name="w", type="Cardio", duration=20, exercises="-")
    await store.insert_health_metrics(user.id, weight=179.0)

    aggregator = StatsAggregator(store)
    first = await aggregator.dashboard(user)
    second = await aggregator.dashboard(user)

    assert first == second
    assert first.currentStreak == 2
    assert first.longestStreak == 5
    refreshed = await store.get_user(user.id)
    assert (refreshed.current_streak, refreshed.longest_streak) == (2, 5)
    assert not store.db.dirty
