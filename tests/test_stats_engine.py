"""Tests for the year statistics engine."""

from datetime import date, datetime

import pytest

from src.shared.models import InsightType, SportStats
from src.shared.stats import (
    InsightInputs,
    compute_sport_stats,
    compute_time_preferences,
    compute_year_stats,
    generate_insights,
    longest_streak,
    week_number,
)


def test_single_activity(make_activity, athlete):
    """Test one run produces the basic totals."""
    stats = compute_year_stats(
        [make_activity(distance=5000, moving_time=1800, elapsed_time=1800)], athlete, 2024
    )

    assert stats.total_activities == 1
    assert stats.total_distance == 5000
    assert stats.total_time == 1800
    assert stats.primary_sport == "Run"
    assert stats.days_active == 1
    assert stats.longest_streak == 1
    assert stats.athlete == athlete
    assert stats.year == 2024


def test_consecutive_days_form_a_streak(make_activity, athlete):
    """Test activities on consecutive local dates form a streak."""
    activities = [
        make_activity(1, start=datetime(2024, 3, 15, 23, 30)),
        make_activity(2, start=datetime(2024, 3, 16, 0, 30)),
    ]
    assert compute_year_stats(activities, athlete, 2024).longest_streak == 2


def test_non_consecutive_days_do_not_form_a_streak(make_activity, athlete):
    """Test a gap day breaks the streak."""
    activities = [
        make_activity(1, start=datetime(2024, 3, 15, 8)),
        make_activity(2, start=datetime(2024, 3, 17, 8)),
    ]
    assert compute_year_stats(activities, athlete, 2024).longest_streak == 1


def test_longest_streak_helper():
    """Test streaks across a month boundary and with duplicates removed."""
    dates = {
        date(2024, 2, 27),
        date(2024, 2, 28),
        date(2024, 2, 29),
        date(2024, 3, 1),
        date(2024, 3, 5),
    }
    assert longest_streak(dates) == 4
    assert longest_streak(set()) == 0


def test_empty_year(athlete):
    """Test an empty year has sentinel values and twelve zeroed months."""
    stats = compute_year_stats([], athlete, 2024)

    assert stats.total_activities == 0
    assert stats.primary_sport == "None"
    assert stats.most_active_day == "N/A"
    assert stats.most_active_month == "N/A"
    assert stats.preferred_time == "N/A"
    assert stats.biggest_week.week == 0
    assert stats.biggest_month.month == "N/A"
    assert stats.longest_activity is None
    assert stats.insights == []
    assert len(stats.monthly_data) == 12
    assert all(m.activities == 0 and m.distance == 0 for m in stats.monthly_data)


def test_most_active_month_tie_goes_to_earliest(make_activity, athlete):
    """Test three single-activity months pick the first calendar month."""
    activities = [
        make_activity(1, start=datetime(2024, 7, 1, 8)),
        make_activity(2, start=datetime(2024, 4, 1, 8)),
        make_activity(3, start=datetime(2024, 1, 1, 8)),
    ]
    stats = compute_year_stats(activities, athlete, 2024)

    assert stats.most_active_month == "January"


def test_most_active_month_by_count(make_activity, athlete):
    """Test the month with the most activities wins."""
    activities = [
        make_activity(1, start=datetime(2024, 1, 1, 8)),
        make_activity(2, start=datetime(2024, 5, 1, 8)),
        make_activity(3, start=datetime(2024, 5, 2, 8)),
    ]
    assert compute_year_stats(activities, athlete, 2024).most_active_month == "May"


def test_most_active_day_tie_goes_to_sunday(make_activity, athlete):
    """Test weekday ties resolve Sunday-first."""
    activities = [
        make_activity(1, start=datetime(2024, 3, 11, 8)),  # Monday
        make_activity(2, start=datetime(2024, 3, 10, 8)),  # Sunday
    ]
    assert compute_year_stats(activities, athlete, 2024).most_active_day == "Sunday"


def test_evening_preferred_over_morning(make_activity, athlete):
    """Test one morning and two evening activities prefer evening."""
    activities = [
        make_activity(1, start=datetime(2024, 3, 15, 6)),
        make_activity(2, start=datetime(2024, 3, 16, 19)),
        make_activity(3, start=datetime(2024, 3, 17, 19)),
    ]
    stats = compute_year_stats(activities, athlete, 2024)

    assert stats.morning_activities == 1
    assert stats.evening_activities == 2
    assert stats.preferred_time == "evening"


@pytest.mark.parametrize(
    "hours,expected",
    [
        ([6, 13], "afternoon"),  # morning/afternoon tie
        ([6, 18], "evening"),  # morning/evening tie
        ([13, 18], "evening"),  # afternoon/evening tie
        ([6, 6, 13], "morning"),
        ([23, 2], "evening"),  # nothing bucketed
    ],
)
def test_time_preference_ties(make_activity, hours, expected):
    """Test sequential overwrite favors evening, then afternoon."""
    activities = [
        make_activity(i, start=datetime(2024, 3, 15, hour)) for i, hour in enumerate(hours)
    ]
    assert compute_time_preferences(activities).preferred == expected


def test_night_activities_are_not_bucketed(make_activity):
    """Test 22:00-04:59 counts toward no bucket."""
    activities = [
        make_activity(1, start=datetime(2024, 3, 15, 22)),
        make_activity(2, start=datetime(2024, 3, 15, 4, 59)),
        make_activity(3, start=datetime(2024, 3, 15, 5)),
    ]
    prefs = compute_time_preferences(activities)

    assert (prefs.morning, prefs.afternoon, prefs.evening) == (1, 0, 0)


def test_week_number_sunday_start():
    """Test weeks begin on Sunday with week 1 containing January 1st."""
    # 2024-01-01 is a Monday
    assert week_number(datetime(2024, 1, 1)) == 1
    assert week_number(datetime(2024, 1, 6)) == 1
    assert week_number(datetime(2024, 1, 7)) == 2
    assert week_number(datetime(2024, 12, 31)) == 53


def test_biggest_week_and_month(make_activity, athlete):
    """Test the week and month with the largest distance are reported."""
    activities = [
        make_activity(1, start=datetime(2024, 1, 2, 8), distance=5000),
        make_activity(2, start=datetime(2024, 1, 8, 8), distance=8000),
        make_activity(3, start=datetime(2024, 1, 9, 8), distance=4000),
        make_activity(4, start=datetime(2024, 2, 1, 8), distance=10000),
    ]
    stats = compute_year_stats(activities, athlete, 2024)

    assert stats.biggest_week.week == 2
    assert stats.biggest_week.distance == 12000
    assert stats.biggest_month.month == "January"
    assert stats.biggest_month.distance == 17000


def test_biggest_week_without_distance(make_activity, athlete):
    """Test distance-less years report week 1 with zero distance."""
    activities = [make_activity(1, start=datetime(2024, 6, 1, 8))]
    stats = compute_year_stats(activities, athlete, 2024)

    assert stats.biggest_week.week == 1
    assert stats.biggest_week.distance == 0


def test_record_activities_first_wins_on_tie(make_activity, athlete):
    """Test equal record values keep the earliest activity."""
    activities = [
        make_activity(1, distance=10000, total_elevation_gain=100, average_speed=3.0),
        make_activity(2, distance=10000, total_elevation_gain=100, average_speed=3.0),
        make_activity(3, distance=9000, total_elevation_gain=50, average_speed=2.0),
    ]
    stats = compute_year_stats(activities, athlete, 2024)

    assert stats.longest_activity.id == 1
    assert stats.biggest_climb.id == 1
    assert stats.fastest_run.id == 1


def test_fastest_run_and_ride_use_sport_substrings(make_activity, athlete):
    """Test VirtualRun counts as a run and EBikeRide as a ride."""
    activities = [
        make_activity(1, "Run", average_speed=3.0),
        make_activity(2, "VirtualRun", average_speed=3.5),
        make_activity(3, "Ride", average_speed=7.0),
        make_activity(4, "EBikeRide", average_speed=9.0),
        make_activity(5, "Swim", average_speed=1.0),
    ]
    stats = compute_year_stats(activities, athlete, 2024)

    assert stats.fastest_run.id == 2
    assert stats.fastest_ride.id == 4


def test_no_rides_means_no_fastest_ride(make_activity, athlete):
    """Test the ride record is empty without rides."""
    stats = compute_year_stats([make_activity(1, "Run")], athlete, 2024)
    assert stats.fastest_ride is None


def test_sport_stats_sorted_and_stable(make_activity):
    """Test sports sort by count with first-seen order on ties."""
    activities = [
        make_activity(1, "Swim"),
        make_activity(2, "Ride", distance=20000, average_speed=6.0, max_speed=12.0),
        make_activity(3, "Run", distance=5000, average_speed=3.0, kudos_count=4, pr_count=1),
        make_activity(4, "Run", distance=8000, average_speed=2.5, kudos_count=6),
        make_activity(5, "Ride", distance=30000, average_speed=0, max_speed=15.0),
    ]
    stats = compute_sport_stats(activities)

    assert [s.sport for s in stats] == ["Ride", "Run", "Swim"]

    ride, run, swim = stats
    assert ride.activity_count == 2
    assert ride.total_distance == 50000
    assert ride.longest_activity == 30000
    assert ride.fastest_pace == 6.0
    assert ride.max_speed == 15.0
    assert run.kudos_received == 10
    assert run.pr_count == 1
    assert run.fastest_pace == 3.0
    assert swim.fastest_pace is None


def test_locations_deduplicated_in_order(make_activity, athlete):
    """Test countries and cities keep first-seen order without blanks."""
    activities = [
        make_activity(1, location_country="Spain", location_city="Madrid"),
        make_activity(2, location_country="France", location_city=""),
        make_activity(3, location_country="Spain", location_city="Madrid"),
        make_activity(4, location_country=None, location_city="Paris"),
    ]
    stats = compute_year_stats(activities, athlete, 2024)

    assert stats.countries == ["Spain", "France"]
    assert stats.cities == ["Madrid", "Paris"]


def test_avg_weekly_activities(make_activity, athlete):
    """Test weekly average is rounded to one decimal."""
    activities = [
        make_activity(i, start=datetime(2024, 1, 1 + i % 28, 8)) for i in range(26)
    ]
    assert compute_year_stats(activities, athlete, 2024).avg_weekly_activities == 0.5


def test_totals_are_consistent(make_activity, athlete):
    """Test sport and monthly aggregates add up to the year totals."""
    activities = [
        make_activity(
            i,
            ["Run", "Ride", "Swim"][i % 3],
            start=datetime(2024, 1 + i % 12, 1 + i % 27, 6 + i % 15),
            distance=1000.0 * i,
            moving_time=60 * i,
            total_elevation_gain=float(i),
            kudos_count=i,
            pr_count=i % 2,
        )
        for i in range(1, 40)
    ]
    stats = compute_year_stats(activities, athlete, 2024)

    assert sum(s.activity_count for s in stats.sport_stats) == stats.total_activities
    assert sum(s.total_distance for s in stats.sport_stats) == pytest.approx(
        stats.total_distance
    )
    assert sum(m.activities for m in stats.monthly_data) == stats.total_activities
    assert sum(m.distance for m in stats.monthly_data) == pytest.approx(stats.total_distance)
    assert sum(m.time for m in stats.monthly_data) == stats.total_time
    assert stats.days_active <= stats.total_activities
    assert 1 <= stats.longest_streak <= stats.days_active
    assert len(stats.activity_dates) == stats.total_activities
    assert stats.total_prs == sum(a.pr_count for a in activities)


def test_computation_is_deterministic(make_activity, athlete):
    """Test the same input always yields the same snapshot."""
    activities = [
        make_activity(1, "Run", start=datetime(2024, 5, 1, 7), distance=5000),
        make_activity(2, "Ride", start=datetime(2024, 5, 2, 18), distance=20000),
    ]

    first = compute_year_stats(activities, athlete, 2024)
    second = compute_year_stats(list(activities), athlete, 2024)

    assert first == second
    assert first.to_json() == second.to_json()


# Insights


def _inputs(**overrides):
    values = {
        "total_activities": 1,
        "sport_stats": [SportStats(sport="Run", activity_count=1)],
        "days_active": 1,
        "longest_streak": 1,
        "preferred_time": "morning",
        "most_active_month": "March",
        "countries": [],
        "total_kudos": 0,
        "total_prs": 0,
    }
    values.update(overrides)
    return InsightInputs(**values)


def test_minimal_insights():
    """Test a quiet year only gets the most-active-month insight."""
    insights = generate_insights(_inputs())

    assert len(insights) == 1
    assert insights[0].type == InsightType.CONSISTENCY
    assert insights[0].icon == "📅"
    assert insights[0].message == "March was your most active month"


def test_all_insights_in_order():
    """Test every rule fires in the fixed order."""
    insights = generate_insights(
        _inputs(
            total_activities=120,
            sport_stats=[
                SportStats(sport="Run", activity_count=80),
                SportStats(sport="VirtualRide", activity_count=40),
            ],
            days_active=100,
            longest_streak=5,
            preferred_time="morning",
            countries=["Spain", "France"],
            total_kudos=150,
            total_prs=3,
        )
    )

    assert [i.type for i in insights] == [
        InsightType.TIME,
        InsightType.CONSISTENCY,
        InsightType.CONSISTENCY,
        InsightType.SPORT,
        InsightType.LOCATION,
        InsightType.ACHIEVEMENT,
        InsightType.SOCIAL,
        InsightType.CONSISTENCY,
    ]
    messages = [i.message for i in insights]
    assert messages[0] == "You prefer morning workouts"
    assert insights[0].icon == "🌅"
    assert messages[2] == "Your longest streak was 5 consecutive days"
    assert messages[3] == "You're a multi-sport athlete! Top sports: Run and Virtual Ride"
    assert messages[4] == "You worked out in 2 different countries"
    assert messages[5] == "You achieved 3 personal records this year!"
    assert messages[6] == "You received 150 kudos from the community"
    assert messages[7] == "You were active 27% of the year (100 days)"


@pytest.mark.parametrize("days,included", [(71, False), (72, True), (73, True)])
def test_active_percentage_threshold(days, included):
    """Test the active-days insight needs 20% after rounding."""
    insights = generate_insights(_inputs(days_active=days))
    assert any(i.icon == "💪" for i in insights) is included


def test_thresholds_just_below():
    """Test rules stay silent just under their thresholds."""
    insights = generate_insights(
        _inputs(total_activities=9, longest_streak=2, countries=["Spain"], total_kudos=99)
    )
    assert [i.icon for i in insights] == ["📅"]
