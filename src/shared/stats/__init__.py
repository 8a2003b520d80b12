"""Year statistics computation."""

from .cache import StatsCache
from .consistency import (
    DAYS_OF_WEEK,
    MONTHS,
    compute_consistency_metrics,
    compute_monthly_data,
    compute_time_preferences,
    longest_streak,
    week_number,
)
from .engine import compute_sport_stats, compute_year_stats, empty_year_stats
from .highlights import (
    Achievement,
    FunFact,
    YearComparison,
    calculate_achievements,
    compare_years,
    generate_fun_facts,
)
from .insights import InsightInputs, generate_insights

__all__ = [
    # Engine
    "compute_year_stats",
    "compute_sport_stats",
    "empty_year_stats",
    # Consistency
    "DAYS_OF_WEEK",
    "MONTHS",
    "compute_consistency_metrics",
    "compute_monthly_data",
    "compute_time_preferences",
    "longest_streak",
    "week_number",
    # Insights
    "InsightInputs",
    "generate_insights",
    # Highlights
    "Achievement",
    "FunFact",
    "YearComparison",
    "calculate_achievements",
    "generate_fun_facts",
    "compare_years",
    # Caching
    "StatsCache",
]
