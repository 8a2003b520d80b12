"""Derived statistics models produced by the year statistics engine."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .activity import Activity, Athlete
from .enums import InsightType


class _CamelModel(BaseModel):
    """Base for derived models serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class SportStats(_CamelModel):
    """Aggregates over all activities sharing one sport category."""

    sport: str
    activity_count: int = 0
    total_distance: float = 0.0
    total_time: int = 0
    total_elevation: float = 0.0
    longest_activity: float = 0.0
    fastest_pace: float | None = Field(
        default=None,
        description="Best average speed in m/s; None when no activity had speed",
    )
    max_speed: float | None = None
    kudos_received: int = 0
    pr_count: int = 0


class Insight(_CamelModel):
    """A natural-language highlight generated from a year of activities."""

    type: InsightType
    icon: str
    message: str
    highlight: str | None = None


class BiggestWeek(_CamelModel):
    """Week number with the largest summed distance."""

    week: int
    distance: float


class BiggestMonth(_CamelModel):
    """Month name with the largest summed distance."""

    month: str
    distance: float


class MonthlyData(_CamelModel):
    """Per-month totals for charts."""

    month: str
    activities: int = 0
    distance: float = 0.0
    time: int = 0
    elevation: float = 0.0


class YearStats(_CamelModel):
    """
    Full statistics snapshot for one athlete and one year.

    Entirely derived from an activity collection; safe to cache by
    (athlete id, year).
    """

    year: int
    athlete: Athlete

    # Overall totals
    total_activities: int = 0
    total_distance: float = 0.0
    total_time: int = 0
    total_elevation: float = 0.0
    total_kudos: int = 0
    total_prs: int = Field(default=0, alias="totalPRs")

    # Sports breakdown
    sport_stats: list[SportStats] = Field(default_factory=list)
    primary_sport: str = "None"

    # Consistency
    days_active: int = 0
    longest_streak: int = 0
    avg_weekly_activities: float = 0.0
    most_active_day: str = "N/A"
    most_active_month: str = "N/A"
    biggest_week: BiggestWeek
    biggest_month: BiggestMonth

    # Performance
    longest_activity: Activity | None = None
    biggest_climb: Activity | None = None
    fastest_run: Activity | None = None
    fastest_ride: Activity | None = None

    # Location
    countries: list[str] = Field(default_factory=list)
    cities: list[str] = Field(default_factory=list)

    # Time preferences
    morning_activities: int = 0
    afternoon_activities: int = 0
    evening_activities: int = 0
    preferred_time: str = "N/A"

    insights: list[Insight] = Field(default_factory=list)

    # Chart data
    activity_dates: list[datetime] = Field(default_factory=list)
    monthly_data: list[MonthlyData] = Field(default_factory=list)

    def to_json(self) -> str:
        """Serialize with camelCase keys for the presentation layer."""
        return self.model_dump_json(by_alias=True)
