"""Tests for achievements, fun facts and year-over-year comparison."""

import pytest

from src.shared.models import Athlete, BiggestMonth, BiggestWeek, SportStats, YearStats
from src.shared.stats import calculate_achievements, compare_years, generate_fun_facts
from src.shared.stats.highlights import format_change


def make_stats(**fields) -> YearStats:
    return YearStats(
        year=fields.pop("year", 2024),
        athlete=Athlete(id=1),
        biggest_week=BiggestWeek(week=1, distance=0),
        biggest_month=BiggestMonth(month="N/A", distance=0),
        **fields,
    )


@pytest.fixture
def busy_year():
    """A year that unlocks most badges."""
    return make_stats(
        sport_stats=[
            SportStats(sport="Run", activity_count=150, total_distance=600_000),
            SportStats(sport="Ride", activity_count=50, longest_activity=120_000),
        ],
        longest_streak=7,
        total_elevation=4424,
        days_active=50,
        total_kudos=600,
        total_prs=10,
        countries=["Spain"],
        morning_activities=6,
        afternoon_activities=2,
        evening_activities=2,
    )


def test_achievements_unlocked_and_progress(busy_year):
    """Test each badge's unlock state and progress."""
    badges = {a.id: a for a in calculate_achievements(busy_year)}

    assert len(badges) == 10
    assert badges["marathon-month"].unlocked
    assert badges["marathon-month"].target == 42
    assert badges["century-rider"].unlocked
    assert badges["century-rider"].target == 100
    assert badges["week-warrior"].unlocked
    assert not badges["everest-climber"].unlocked
    assert badges["everest-climber"].progress == pytest.approx(50)
    assert badges["consistency-king"].progress == pytest.approx(50)
    assert badges["social-star"].unlocked
    assert badges["record-breaker"].unlocked
    assert not badges["multi-sport"].unlocked
    assert badges["multi-sport"].progress == pytest.approx(200 / 3)
    assert not badges["globe-trotter"].unlocked
    assert badges["early-bird"].unlocked


def test_achievements_progress_is_capped(busy_year):
    """Test progress never exceeds 100%."""
    assert all(0 <= a.progress <= 100 for a in calculate_achievements(busy_year))


def test_achievements_for_empty_year():
    """Test an empty year unlocks nothing and does not divide by zero."""
    badges = calculate_achievements(make_stats())

    assert [a.id for a in badges][0] == "marathon-month"
    assert not any(a.unlocked for a in badges)
    assert all(a.progress == 0 for a in badges)


def test_fun_facts_capped_at_six():
    """Test a big year yields the first six facts in order."""
    facts = generate_fun_facts(
        make_stats(
            total_distance=1_000_000,
            total_elevation=8848,
            total_time=360_000,
            total_activities=200,
        )
    )

    assert len(facts) == 6
    assert [f.icon for f in facts] == ["🏈", "🏃", "🇫🇷→🇬🇧", "🏔️", "🗼", "⏰"]
    assert facts[0].fact == "You covered the length of 10,000 football fields"
    assert facts[1].highlight == "23.7 marathons"
    assert facts[2].fact == "You could have traveled from Paris to London 2.9x"
    assert facts[3].highlight == "1.0x Everest"
    assert facts[4].fact == "You could have climbed the Eiffel Tower 27 times"


def test_fun_fact_partial_trip():
    """Test trips shorter than the route are shown as a percentage."""
    facts = generate_fun_facts(make_stats(total_distance=200_000))
    trip = next(f for f in facts if "traveled" in f.fact)

    assert trip.fact == "You could have traveled from Paris to London 58% of the way"


def test_fun_facts_for_empty_year():
    """Test an empty year has no fun facts."""
    assert generate_fun_facts(make_stats()) == []


@pytest.mark.parametrize(
    "current,previous,expected",
    [
        (120, 100, ("+20%", True)),
        (100, 100, ("+0%", True)),
        (90, 100, ("-10%", False)),
        (5, 0, ("New!", True)),
    ],
)
def test_format_change(current, previous, expected):
    """Test percent change labels."""
    assert format_change(current, previous) == expected


def test_compare_years():
    """Test headline metrics are compared with the previous year."""
    current = make_stats(
        total_activities=120, total_distance=1_500_000, total_time=360_000, days_active=90
    )
    previous = make_stats(
        year=2023,
        total_activities=100,
        total_distance=1_000_000,
        total_time=400_000,
        days_active=100,
    )

    comparisons = {c.label: c for c in compare_years(current, previous)}

    assert list(comparisons) == ["Activities", "Distance", "Time", "Elevation", "Days Active"]
    assert comparisons["Activities"].change == "+20%"
    assert comparisons["Distance"].current_display == "1500km"
    assert comparisons["Distance"].change == "+50%"
    assert comparisons["Time"].current_display == "100h"
    assert comparisons["Time"].change == "-10%"
    assert not comparisons["Time"].positive
    assert comparisons["Elevation"].change == "New!"


def test_compare_years_without_previous():
    """Test there is nothing to compare without a previous year."""
    assert compare_years(make_stats(), None) == []
