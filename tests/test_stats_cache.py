"""Tests for the YearStats cache."""

import pytest

from src.shared.models import Athlete
from src.shared.stats import StatsCache, compute_year_stats


class FakeClock:
    """Manually advanced time source."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return StatsCache(ttl_seconds=60, clock=clock)


def stats_for(athlete_id: int, year: int):
    return compute_year_stats([], Athlete(id=athlete_id), year)


def test_get_missing_returns_none(cache):
    """Test a cold cache misses."""
    assert cache.get(1, 2024) is None


def test_set_then_get(cache):
    """Test stats are keyed by athlete and year."""
    stats = stats_for(1, 2024)
    cache.set(stats)

    assert cache.get(1, 2024) is stats
    assert cache.get(1, 2023) is None
    assert cache.get(2, 2024) is None


def test_entries_expire(cache, clock):
    """Test entries vanish once the TTL has passed."""
    cache.set(stats_for(1, 2024))

    clock.now += 59
    assert cache.get(1, 2024) is not None

    clock.now += 1
    assert cache.get(1, 2024) is None
    assert len(cache) == 0


def test_invalidate_single_year(cache):
    """Test invalidating one year keeps the others."""
    cache.set(stats_for(1, 2024))
    cache.set(stats_for(1, 2023))

    cache.invalidate(1, 2024)

    assert cache.get(1, 2024) is None
    assert cache.get(1, 2023) is not None


def test_invalidate_athlete(cache):
    """Test invalidating an athlete drops all of their years only."""
    cache.set(stats_for(1, 2024))
    cache.set(stats_for(1, 2023))
    cache.set(stats_for(2, 2024))

    cache.invalidate(1)

    assert len(cache) == 1
    assert cache.get(2, 2024) is not None
