"""Enumeration types for statistics models."""

from enum import Enum


class InsightType(str, Enum):
    """Category tag of a generated insight."""

    TIME = "time"
    SPORT = "sport"
    CONSISTENCY = "consistency"
    LOCATION = "location"
    ACHIEVEMENT = "achievement"
    SOCIAL = "social"


class TimeOfDay(str, Enum):
    """Time-of-day bucket based on local start hour."""

    MORNING = "morning"  # 05:00 - 11:59
    AFTERNOON = "afternoon"  # 12:00 - 16:59
    EVENING = "evening"  # 17:00 - 21:59
