"""Year statistics engine: aggregates a year of activities into YearStats."""

import logging
from collections.abc import Callable

from ..models import (
    Activity,
    Athlete,
    BiggestMonth,
    BiggestWeek,
    SportStats,
    YearStats,
)
from .consistency import (
    compute_consistency_metrics,
    compute_monthly_data,
    compute_time_preferences,
)
from .insights import InsightInputs, generate_insights

logger = logging.getLogger(__name__)


def _first_max(
    activities: list[Activity], key: Callable[[Activity], float]
) -> Activity | None:
    """
    Activity with the largest key; the earliest one wins ties.

    Only a strictly greater value replaces the current best.
    """
    if not activities:
        return None
    best = activities[0]
    for activity in activities[1:]:
        if key(activity) > key(best):
            best = activity
    return best


def _unique(values: list[str | None]) -> list[str]:
    """Non-empty values, deduplicated in first-occurrence order."""
    return list(dict.fromkeys(v for v in values if v))


def compute_sport_stats(activities: list[Activity]) -> list[SportStats]:
    """
    Aggregate activities per sport category.

    Returns:
        SportStats sorted by activity count, descending; sports with equal
        counts keep the order in which they first appear
    """
    groups: dict[str, list[Activity]] = {}
    for activity in activities:
        groups.setdefault(activity.sport_type, []).append(activity)

    stats: list[SportStats] = []
    for sport, group in groups.items():
        speeds = [a.average_speed for a in group if a.average_speed > 0]
        stats.append(
            SportStats(
                sport=sport,
                activity_count=len(group),
                total_distance=sum(a.distance for a in group),
                total_time=sum(a.moving_time for a in group),
                total_elevation=sum(a.total_elevation_gain for a in group),
                longest_activity=max(a.distance for a in group),
                fastest_pace=max(speeds) if speeds else None,
                max_speed=max(a.max_speed for a in group),
                kudos_received=sum(a.kudos_count for a in group),
                pr_count=sum(a.pr_count for a in group),
            )
        )

    # sorted() is stable, so first-seen order survives among equal counts
    return sorted(stats, key=lambda s: s.activity_count, reverse=True)


def empty_year_stats(athlete: Athlete, year: int) -> YearStats:
    """YearStats for a year without activities."""
    return YearStats(
        year=year,
        athlete=athlete,
        primary_sport="None",
        most_active_day="N/A",
        most_active_month="N/A",
        biggest_week=BiggestWeek(week=0, distance=0),
        biggest_month=BiggestMonth(month="N/A", distance=0),
        preferred_time="N/A",
        monthly_data=compute_monthly_data([]),
    )


def compute_year_stats(
    activities: list[Activity],
    athlete: Athlete,
    year: int,
) -> YearStats:
    """
    Compute the full statistics snapshot for one athlete and year.

    The computation is pure and deterministic: it reads only its arguments
    and never raises for well-formed activities.

    Args:
        activities: Activities already restricted to the athlete and year
        athlete: Athlete profile, copied into the result
        year: Year the activities belong to

    Returns:
        YearStats snapshot
    """
    logger.debug(
        f"Computing {year} stats for athlete {athlete.id} from {len(activities)} activities"
    )

    if not activities:
        return empty_year_stats(athlete, year)

    total_kudos = sum(a.kudos_count for a in activities)
    total_prs = sum(a.pr_count for a in activities)

    sport_stats = compute_sport_stats(activities)
    primary_sport = sport_stats[0].sport if sport_stats else "None"

    consistency = compute_consistency_metrics(activities)
    time_preferences = compute_time_preferences(activities)

    runs = [a for a in activities if "run" in a.sport_type.lower()]
    rides = [a for a in activities if "ride" in a.sport_type.lower()]

    countries = _unique([a.location_country for a in activities])
    cities = _unique([a.location_city for a in activities])

    insights = generate_insights(
        InsightInputs(
            total_activities=len(activities),
            sport_stats=sport_stats,
            days_active=consistency.days_active,
            longest_streak=consistency.longest_streak,
            preferred_time=time_preferences.preferred,
            most_active_month=consistency.most_active_month,
            countries=countries,
            total_kudos=total_kudos,
            total_prs=total_prs,
        )
    )

    return YearStats(
        year=year,
        athlete=athlete,
        total_activities=len(activities),
        total_distance=sum(a.distance for a in activities),
        total_time=sum(a.moving_time for a in activities),
        total_elevation=sum(a.total_elevation_gain for a in activities),
        total_kudos=total_kudos,
        total_prs=total_prs,
        sport_stats=sport_stats,
        primary_sport=primary_sport,
        days_active=consistency.days_active,
        longest_streak=consistency.longest_streak,
        avg_weekly_activities=consistency.avg_weekly_activities,
        most_active_day=consistency.most_active_day,
        most_active_month=consistency.most_active_month,
        biggest_week=consistency.biggest_week,
        biggest_month=consistency.biggest_month,
        longest_activity=_first_max(activities, lambda a: a.distance),
        biggest_climb=_first_max(activities, lambda a: a.total_elevation_gain),
        fastest_run=_first_max(runs, lambda a: a.average_speed),
        fastest_ride=_first_max(rides, lambda a: a.average_speed),
        countries=countries,
        cities=cities,
        morning_activities=time_preferences.morning,
        afternoon_activities=time_preferences.afternoon,
        evening_activities=time_preferences.evening,
        preferred_time=time_preferences.preferred,
        insights=insights,
        activity_dates=[a.start_date_local for a in activities],
        monthly_data=compute_monthly_data(activities),
    )
