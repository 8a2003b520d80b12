"""Consistency, calendar and time-of-day metrics over local timestamps."""

import math
from dataclasses import dataclass
from datetime import date, datetime

from ..models import Activity, BiggestMonth, BiggestWeek, MonthlyData, TimeOfDay
from ..models.units import round_half_up

# Sunday-first, matching the weekday index used for tie-breaking
DAYS_OF_WEEK = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]

MONTHS = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

WEEKS_IN_YEAR = 52


@dataclass(frozen=True)
class ConsistencyMetrics:
    """Calendar-based consistency metrics for one year."""

    days_active: int
    longest_streak: int
    avg_weekly_activities: float
    most_active_day: str
    most_active_month: str
    biggest_week: BiggestWeek
    biggest_month: BiggestMonth


@dataclass(frozen=True)
class TimePreferences:
    """Activity counts per time-of-day bucket and the preferred bucket."""

    morning: int
    afternoon: int
    evening: int
    preferred: str


def sunday_weekday(value: date) -> int:
    """Weekday index with Sunday = 0 ... Saturday = 6."""
    return (value.weekday() + 1) % 7


def week_number(moment: datetime) -> int:
    """
    Week of the year as ceil((day_of_year + jan1_weekday + 1) / 7).

    day_of_year is 0 for January 1st and jan1_weekday is Sunday-first, so
    weeks start on Sunday and week 1 is the (possibly partial) week
    containing January 1st.
    """
    start_of_year = date(moment.year, 1, 1)
    days = (moment.date() - start_of_year).days
    return math.ceil((days + sunday_weekday(start_of_year) + 1) / 7)


def longest_streak(active_dates: set[date]) -> int:
    """
    Longest run of consecutive calendar dates.

    Returns:
        0 for no dates, otherwise at least 1
    """
    if not active_dates:
        return 0

    ordered = sorted(active_dates)
    longest = 1
    current = 1
    for previous, day in zip(ordered, ordered[1:]):
        if (day - previous).days == 1:
            current += 1
            longest = max(longest, current)
        else:
            current = 1
    return longest


def _first_max_index(values: list[float]) -> int:
    """Index of the first occurrence of the maximum value."""
    return values.index(max(values))


def compute_consistency_metrics(activities: list[Activity]) -> ConsistencyMetrics:
    """
    Compute calendar metrics from local start times.

    Ties go to the earliest weekday (Sunday first), the earliest month and
    the first week encountered.

    Args:
        activities: Non-empty list of activities for one year

    Returns:
        ConsistencyMetrics
    """
    active_dates = {a.local_date for a in activities}

    day_count = [0] * 7
    month_count = [0] * 12
    month_distance = [0.0] * 12
    week_distances: dict[int, float] = {}

    for activity in activities:
        local = activity.start_date_local
        day_count[sunday_weekday(local.date())] += 1
        month_count[local.month - 1] += 1
        month_distance[local.month - 1] += activity.distance

        week = week_number(local)
        week_distances[week] = week_distances.get(week, 0.0) + activity.distance

    biggest_week = BiggestWeek(week=1, distance=0)
    for week, distance in week_distances.items():
        if distance > biggest_week.distance:
            biggest_week = BiggestWeek(week=week, distance=distance)

    biggest_month_index = _first_max_index(month_distance)

    return ConsistencyMetrics(
        days_active=len(active_dates),
        longest_streak=longest_streak(active_dates),
        avg_weekly_activities=round_half_up(len(activities) / WEEKS_IN_YEAR, 1),
        most_active_day=DAYS_OF_WEEK[_first_max_index(day_count)],
        most_active_month=MONTHS[_first_max_index(month_count)],
        biggest_week=biggest_week,
        biggest_month=BiggestMonth(
            month=MONTHS[biggest_month_index],
            distance=month_distance[biggest_month_index],
        ),
    )


def time_of_day(hour: int) -> TimeOfDay | None:
    """Bucket a local hour; 22:00-04:59 belongs to no bucket."""
    if 5 <= hour < 12:
        return TimeOfDay.MORNING
    if 12 <= hour < 17:
        return TimeOfDay.AFTERNOON
    if 17 <= hour < 22:
        return TimeOfDay.EVENING
    return None


def compute_time_preferences(activities: list[Activity]) -> TimePreferences:
    """
    Count activities per time-of-day bucket.

    The preferred bucket starts as morning and is overwritten by afternoon,
    then by evening, whenever that bucket's count equals the maximum. Ties
    therefore favor evening over afternoon over morning.
    """
    counts = {bucket: 0 for bucket in TimeOfDay}
    for activity in activities:
        bucket = time_of_day(activity.start_date_local.hour)
        if bucket is not None:
            counts[bucket] += 1

    morning = counts[TimeOfDay.MORNING]
    afternoon = counts[TimeOfDay.AFTERNOON]
    evening = counts[TimeOfDay.EVENING]
    most = max(morning, afternoon, evening)

    preferred = TimeOfDay.MORNING
    if most == afternoon:
        preferred = TimeOfDay.AFTERNOON
    if most == evening:
        preferred = TimeOfDay.EVENING

    return TimePreferences(
        morning=morning,
        afternoon=afternoon,
        evening=evening,
        preferred=preferred.value,
    )


def compute_monthly_data(activities: list[Activity]) -> list[MonthlyData]:
    """Per-month totals; always returns all twelve months."""
    monthly = [MonthlyData(month=name) for name in MONTHS]
    for activity in activities:
        entry = monthly[activity.start_date_local.month - 1]
        entry.activities += 1
        entry.distance += activity.distance
        entry.time += activity.moving_time
        entry.elevation += activity.total_elevation_gain
    return monthly
