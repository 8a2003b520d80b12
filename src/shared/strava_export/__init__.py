"""Strava data export (activities.csv / reactions.csv) import."""

from .parser import (
    ParsedExport,
    ReactionCounts,
    get_available_years,
    map_activity_type,
    parse_date,
    parse_distance,
    parse_elapsed_time,
    parse_reactions_csv,
    parse_strava_export,
    row_to_activity,
)
from .reader import read_rows, read_table
from .validation import (
    ValidationResult,
    validate_activities_csv,
    validate_reactions_csv,
)

__all__ = [
    # Parsing
    "ParsedExport",
    "ReactionCounts",
    "parse_strava_export",
    "parse_reactions_csv",
    "get_available_years",
    "row_to_activity",
    "map_activity_type",
    "parse_date",
    "parse_distance",
    "parse_elapsed_time",
    # Reading
    "read_rows",
    "read_table",
    # Validation
    "ValidationResult",
    "validate_activities_csv",
    "validate_reactions_csv",
]
