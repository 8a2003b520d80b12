"""Natural-language insights derived from a year of activities."""

from dataclasses import dataclass

from ..models import Insight, InsightType, SportStats, TimeOfDay
from ..models.units import format_sport_type, round_half_up

TIME_ICONS = {
    TimeOfDay.MORNING.value: "🌅",
    TimeOfDay.AFTERNOON.value: "☀️",
    TimeOfDay.EVENING.value: "🌙",
}

MIN_ACTIVITIES_FOR_TIME_INSIGHT = 10
MIN_STREAK_FOR_INSIGHT = 3
MIN_KUDOS_FOR_INSIGHT = 100
MIN_ACTIVE_PERCENT_FOR_INSIGHT = 20
DAYS_IN_YEAR = 365


@dataclass(frozen=True)
class InsightInputs:
    """Values the insight rules read."""

    total_activities: int
    sport_stats: list[SportStats]
    days_active: int
    longest_streak: int
    preferred_time: str
    most_active_month: str
    countries: list[str]
    total_kudos: int
    total_prs: int


def generate_insights(inputs: InsightInputs) -> list[Insight]:
    """
    Build the ordered insight list.

    Rules are evaluated in a fixed order and each appends at most one insight,
    so identical inputs always produce the same list.
    """
    insights: list[Insight] = []

    if inputs.total_activities >= MIN_ACTIVITIES_FOR_TIME_INSIGHT:
        insights.append(
            Insight(
                type=InsightType.TIME,
                icon=TIME_ICONS.get(inputs.preferred_time, TIME_ICONS["evening"]),
                message=f"You prefer {inputs.preferred_time} workouts",
                highlight=inputs.preferred_time,
            )
        )

    insights.append(
        Insight(
            type=InsightType.CONSISTENCY,
            icon="📅",
            message=f"{inputs.most_active_month} was your most active month",
            highlight=inputs.most_active_month,
        )
    )

    if inputs.longest_streak >= MIN_STREAK_FOR_INSIGHT:
        insights.append(
            Insight(
                type=InsightType.CONSISTENCY,
                icon="🔥",
                message=f"Your longest streak was {inputs.longest_streak} consecutive days",
                highlight=f"{inputs.longest_streak} days",
            )
        )

    if len(inputs.sport_stats) >= 2:
        top_two = " and ".join(format_sport_type(s.sport) for s in inputs.sport_stats[:2])
        insights.append(
            Insight(
                type=InsightType.SPORT,
                icon="🏆",
                message=f"You're a multi-sport athlete! Top sports: {top_two}",
                highlight="multi-sport",
            )
        )

    if len(inputs.countries) > 1:
        count = len(inputs.countries)
        insights.append(
            Insight(
                type=InsightType.LOCATION,
                icon="🌍",
                message=f"You worked out in {count} different countries",
                highlight=f"{count} countries",
            )
        )

    if inputs.total_prs > 0:
        insights.append(
            Insight(
                type=InsightType.ACHIEVEMENT,
                icon="⚡",
                message=f"You achieved {inputs.total_prs} personal records this year!",
                highlight=f"{inputs.total_prs} PRs",
            )
        )

    if inputs.total_kudos >= MIN_KUDOS_FOR_INSIGHT:
        insights.append(
            Insight(
                type=InsightType.SOCIAL,
                icon="👏",
                message=f"You received {inputs.total_kudos} kudos from the community",
                highlight=f"{inputs.total_kudos} kudos",
            )
        )

    percentage_active = int(round_half_up(inputs.days_active / DAYS_IN_YEAR * 100))
    if percentage_active >= MIN_ACTIVE_PERCENT_FOR_INSIGHT:
        insights.append(
            Insight(
                type=InsightType.CONSISTENCY,
                icon="💪",
                message=(
                    f"You were active {percentage_active}% of the year "
                    f"({inputs.days_active} days)"
                ),
                highlight=f"{percentage_active}%",
            )
        )

    return insights
