"""Achievement badges, fun-fact comparisons and year-over-year changes."""

from collections.abc import Callable

from pydantic import BaseModel

from ..models import YearStats
from ..models.units import round_half_up


class Achievement(BaseModel):
    """A badge unlocked by reaching a yearly target."""

    id: str
    name: str
    description: str
    icon: str
    unlocked: bool
    progress: float  # percent of target, 0-100
    target: float


class FunFact(BaseModel):
    """A playful comparison of yearly totals to everyday things."""

    icon: str
    fact: str
    highlight: str


class YearComparison(BaseModel):
    """One metric compared between two years."""

    label: str
    icon: str
    current: float
    previous: float
    current_display: str
    previous_display: str
    change: str
    positive: bool


# (from, to, meters, icon); the first pair within 0.5x-10x of the total wins
CITY_DISTANCES = [
    ("Paris", "London", 344_000, "🇫🇷→🇬🇧"),
    ("New York", "Boston", 346_000, "🗽→🏛️"),
    ("Los Angeles", "San Francisco", 617_000, "🌴→🌁"),
    ("Tokyo", "Osaka", 515_000, "🗼→🏯"),
    ("Sydney", "Melbourne", 878_000, "🦘"),
]

MARATHON_METERS = 42_195
EVEREST_METERS = 8_848
EIFFEL_TOWER_METERS = 324
FOOTBALL_FIELD_METERS = 100
CALORIES_PER_HOUR = 500
CALORIES_PER_PIZZA = 2_000
MAX_FUN_FACTS = 6


def _progress(value: float, target: float) -> float:
    return min(value / target, 1) * 100


def _badge(
    badge_id: str,
    name: str,
    description: str,
    icon: str,
    value: float,
    target: float,
    display_target: float | None = None,
) -> Achievement:
    return Achievement(
        id=badge_id,
        name=name,
        description=description,
        icon=icon,
        unlocked=value >= target,
        progress=_progress(value, target),
        target=display_target if display_target is not None else target,
    )


def calculate_achievements(stats: YearStats) -> list[Achievement]:
    """
    Evaluate the yearly badges against a YearStats snapshot.

    Returns:
        All badges, unlocked or not, in display order
    """
    run_distance = sum(
        s.total_distance for s in stats.sport_stats if "run" in s.sport.lower()
    )
    avg_monthly_run_distance = run_distance / 12

    longest_ride = max(
        (s.longest_activity for s in stats.sport_stats if "ride" in s.sport.lower()),
        default=0.0,
    )

    timed = stats.morning_activities + stats.afternoon_activities + stats.evening_activities
    morning_percent = stats.morning_activities / timed * 100 if timed > 0 else 0.0

    return [
        _badge(
            "marathon-month", "Marathon Month", "Run 42km+ in a single month", "🏃",
            avg_monthly_run_distance, 42_000, display_target=42,
        ),
        _badge(
            "century-rider", "Century Rider", "Complete a 100km+ ride", "🚴",
            longest_ride, 100_000, display_target=100,
        ),
        _badge(
            "week-warrior", "Week Warrior", "Achieve a 7-day activity streak", "🔥",
            stats.longest_streak, 7,
        ),
        _badge(
            "everest-climber", "Everest Climber",
            "Climb 8,848m total elevation (Mt. Everest height)", "⛰️",
            stats.total_elevation, EVEREST_METERS,
        ),
        _badge(
            "consistency-king", "Consistency King", "Be active for 100+ days", "👑",
            stats.days_active, 100,
        ),
        _badge(
            "social-star", "Social Star", "Receive 500+ kudos", "⭐",
            stats.total_kudos, 500,
        ),
        _badge(
            "record-breaker", "Record Breaker", "Set 10+ personal records", "🏆",
            stats.total_prs, 10,
        ),
        _badge(
            "multi-sport", "Multi-Sport Athlete", "Practice 3+ different sports", "🎯",
            len(stats.sport_stats), 3,
        ),
        _badge(
            "globe-trotter", "Globe Trotter", "Work out in 3+ countries", "🌍",
            len(stats.countries), 3,
        ),
        _badge(
            "early-bird", "Early Bird", "Do 50%+ of workouts in the morning", "🌅",
            morning_percent, 50,
        ),
    ]


def generate_fun_facts(stats: YearStats) -> list[FunFact]:
    """Compare yearly distance, elevation and time to familiar things."""
    facts: list[FunFact] = []
    total_distance = stats.total_distance
    total_elevation = stats.total_elevation
    hours = stats.total_time / 3600

    football_fields = int(round_half_up(total_distance / FOOTBALL_FIELD_METERS))
    if football_fields >= 10:
        facts.append(
            FunFact(
                icon="🏈",
                fact=f"You covered the length of {football_fields:,} football fields",
                highlight=f"{football_fields:,} fields",
            )
        )

    marathons = total_distance / MARATHON_METERS
    if marathons >= 1:
        facts.append(
            FunFact(
                icon="🏃",
                fact=f"You ran the equivalent of {marathons:.1f} marathons",
                highlight=f"{marathons:.1f} marathons",
            )
        )

    for origin, destination, meters, icon in CITY_DISTANCES:
        times = total_distance / meters
        if 0.5 <= times <= 10:
            qualifier = (
                f"{times:.1f}x" if times >= 1 else f"{int(round_half_up(times * 100))}% of the way"
            )
            facts.append(
                FunFact(
                    icon=icon,
                    fact=f"You could have traveled from {origin} to {destination} {qualifier}",
                    highlight=f"{origin} to {destination}",
                )
            )
            break

    everests = total_elevation / EVEREST_METERS
    if everests >= 0.5:
        facts.append(
            FunFact(
                icon="🏔️",
                fact=f"You climbed the equivalent of {everests:.1f}x Mount Everest",
                highlight=f"{everests:.1f}x Everest",
            )
        )

    eiffel_towers = total_elevation / EIFFEL_TOWER_METERS
    if eiffel_towers >= 5:
        towers = int(round_half_up(eiffel_towers))
        facts.append(
            FunFact(
                icon="🗼",
                fact=f"You could have climbed the Eiffel Tower {towers} times",
                highlight=f"{towers} Eiffel Towers",
            )
        )

    days = hours / 24
    if days >= 1:
        facts.append(
            FunFact(
                icon="⏰",
                fact=f"You spent {days:.1f} full days exercising",
                highlight=f"{days:.1f} days",
            )
        )

    movies = hours / 2
    if movies >= 10:
        count = int(round_half_up(movies))
        facts.append(
            FunFact(
                icon="🎬",
                fact=f"Instead of exercising, you could've watched {count} movies",
                highlight=f"{count} movies",
            )
        )

    pizzas = hours * CALORIES_PER_HOUR / CALORIES_PER_PIZZA
    if pizzas >= 10:
        count = int(round_half_up(pizzas))
        facts.append(
            FunFact(
                icon="🍕",
                fact=f"You burned approximately {count} pizzas worth of calories",
                highlight=f"{count} pizzas",
            )
        )

    per_week = stats.total_activities / 52
    if per_week >= 3:
        facts.append(
            FunFact(
                icon="📅",
                fact=f"You averaged {per_week:.1f} activities per week",
                highlight=f"{per_week:.1f} per week",
            )
        )

    return facts[:MAX_FUN_FACTS]


def format_change(current: float, previous: float) -> tuple[str, bool]:
    """
    Percent change between two values.

    Returns:
        ("New!", True) when previous is 0, else ("+12%", True) / ("-5%", False)
    """
    if previous == 0:
        return "New!", True

    change = (current - previous) / previous * 100
    sign = "+" if change >= 0 else ""
    return f"{sign}{change:.0f}%", change >= 0


_COMPARED_METRICS: list[tuple[str, str, Callable[[YearStats], float], Callable[[float], str]]] = [
    ("Activities", "🏃", lambda s: s.total_activities, lambda v: str(int(v))),
    ("Distance", "📏", lambda s: s.total_distance, lambda v: f"{v / 1000:.0f}km"),
    ("Time", "⏱️", lambda s: s.total_time, lambda v: f"{int(round_half_up(v / 3600))}h"),
    ("Elevation", "⛰️", lambda s: s.total_elevation, lambda v: f"{int(round_half_up(v))}m"),
    ("Days Active", "📅", lambda s: s.days_active, lambda v: str(int(v))),
]


def compare_years(current: YearStats, previous: YearStats | None) -> list[YearComparison]:
    """
    Compare headline totals with the previous year.

    Returns:
        One entry per metric, or an empty list when there is no previous year
    """
    if previous is None:
        return []

    comparisons: list[YearComparison] = []
    for label, icon, metric, fmt in _COMPARED_METRICS:
        now, before = metric(current), metric(previous)
        change, positive = format_change(now, before)
        comparisons.append(
            YearComparison(
                label=label,
                icon=icon,
                current=now,
                previous=before,
                current_display=fmt(now),
                previous_display=fmt(before),
                change=change,
                positive=positive,
            )
        )
    return comparisons
