"""Data models for Year in Sport."""

from .activity import Activity, Athlete
from .enums import InsightType, TimeOfDay
from .stats import (
    BiggestMonth,
    BiggestWeek,
    Insight,
    MonthlyData,
    SportStats,
    YearStats,
)
from .units import (
    format_distance,
    format_duration,
    format_pace,
    format_sport_type,
    meters_to_km,
    mps_to_kph,
    round_half_up,
)

__all__ = [
    # Source models
    "Activity",
    "Athlete",
    # Derived models
    "SportStats",
    "YearStats",
    "Insight",
    "BiggestWeek",
    "BiggestMonth",
    "MonthlyData",
    # Enums
    "InsightType",
    "TimeOfDay",
    # Units
    "round_half_up",
    "meters_to_km",
    "mps_to_kph",
    "format_distance",
    "format_duration",
    "format_pace",
    "format_sport_type",
]
