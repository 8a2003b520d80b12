"""Convert Strava data export tables into Activity models."""

import logging
import math
import re
from datetime import UTC, date, datetime

from pydantic import BaseModel, Field

from ..models import Activity
from ..models.units import round_half_up
from .reader import read_table

logger = logging.getLogger(__name__)

# Human-readable export type names -> API sport_type tokens.
# Unknown names pass through unchanged so new sports keep working.
ACTIVITY_TYPE_MAP: dict[str, str] = {
    "Run": "Run",
    "Ride": "Ride",
    "Swim": "Swim",
    "Walk": "Walk",
    "Hike": "Hike",
    "Virtual Ride": "VirtualRide",
    "Virtual Run": "VirtualRun",
    "Weight Training": "WeightTraining",
    "Yoga": "Yoga",
    "Workout": "Workout",
    "Elliptical": "Elliptical",
    "Stair-Stepper": "StairStepper",
    "Rock Climbing": "RockClimbing",
    "Nordic Ski": "NordicSki",
    "Alpine Ski": "AlpineSki",
    "Snowboard": "Snowboard",
    "Kayaking": "Kayaking",
    "Rowing": "Rowing",
    "Canoeing": "Canoeing",
    "Stand Up Paddling": "StandUpPaddling",
    "Surfing": "Surfing",
    "Windsurf": "Windsurf",
    "Kitesurf": "Kitesurf",
    "Golf": "Golf",
    "Tennis": "Tennis",
    "Pickleball": "Pickleball",
    "Soccer": "Soccer",
    "Football": "Football",
    "Basketball": "Basketball",
    "Ice Skate": "IceSkate",
    "Skateboard": "Skateboard",
    "Roller Ski": "RollerSki",
    "Inline Skate": "InlineSkate",
    "E-Bike Ride": "EBikeRide",
    "E-Mountain Bike Ride": "EMountainBikeRide",
    "Velomobile": "Velomobile",
    "Handcycle": "Handcycle",
    "Wheelchair": "Wheelchair",
}

MONTH_ABBREVIATIONS: dict[str, int] = {
    "Jan": 1,
    "Feb": 2,
    "Mar": 3,
    "Apr": 4,
    "May": 5,
    "Jun": 6,
    "Jul": 7,
    "Aug": 8,
    "Sep": 9,
    "Oct": 10,
    "Nov": 11,
    "Dec": 12,
}

# Formats the export has used for "Activity Date"
_NATIVE_DATE_FORMATS = (
    "%b %d, %Y, %I:%M:%S %p",
    "%b %d, %Y %I:%M:%S %p",
    "%Y-%m-%d %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
)

_DAY_MONTH_YEAR = re.compile(r"(\d{1,2})\s+(\w+)\s+(\d{4}),?\s+(\d{1,2}):(\d{2}):(\d{2})")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_PLAIN_SECONDS = re.compile(r"^\d+(\.\d+)?$")

REACTION_ID_COLUMNS = ("activity_id", "activityid", "activity id")


class ReactionCounts(BaseModel):
    """Social counters for one activity from reactions.csv."""

    kudos: int = 0
    comments: int = 0


class ParsedExport(BaseModel):
    """Activities from an export, restricted to one year, with reactions merged."""

    activities: list[Activity] = Field(default_factory=list)
    reactions: dict[int, ReactionCounts] = Field(default_factory=dict)
    athlete_name: str = "Athlete"
    year: int


def _parse_int(value: str | None) -> int | None:
    """Parse a leading integer, ignoring trailing garbage ("12abc" -> 12)."""
    if not value:
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def _parse_float(value: str | None) -> float | None:
    """Parse a leading decimal number, ignoring trailing garbage."""
    if not value:
        return None
    match = _LEADING_FLOAT.match(value)
    if not match:
        return None
    parsed = float(match.group(1))
    return parsed if math.isfinite(parsed) else None


def _first(row: dict[str, str], *columns: str) -> str:
    """Return the first non-empty value among columns."""
    for column in columns:
        value = row.get(column)
        if value:
            return value
    return ""


def map_activity_type(activity_type: str) -> str:
    """Map an export type name ("Virtual Ride") to its token ("VirtualRide")."""
    return ACTIVITY_TYPE_MAP.get(activity_type, activity_type)


def parse_elapsed_time(time_str: str | None) -> int:
    """
    Parse an export duration to whole seconds.

    Accepts plain seconds ("1800", "1800.4") or colon-delimited "H:MM:SS" /
    "MM:SS". Anything else yields 0.
    """
    if not time_str:
        return 0

    if _PLAIN_SECONDS.match(time_str):
        seconds = float(time_str)
    else:
        try:
            parts = [float(p) if p.strip() else 0.0 for p in time_str.split(":")]
        except ValueError:
            return 0

        if len(parts) == 3:
            seconds = parts[0] * 3600 + parts[1] * 60 + parts[2]
        elif len(parts) == 2:
            seconds = parts[0] * 60 + parts[1]
        else:
            return 0

    # float() accepts "nan" and "inf", and long digit strings overflow to inf
    if not math.isfinite(seconds):
        return 0
    return int(round_half_up(seconds))


def parse_distance(distance_str: str | None) -> float:
    """Parse a distance in meters, stripping thousands separators; bad input -> 0."""
    if not distance_str:
        return 0.0
    value = _parse_float(distance_str.replace(",", ""))
    return value if value is not None else 0.0


def parse_date(date_str: str | None) -> datetime:
    """
    Parse an export timestamp.

    Tries ISO 8601 and the export's usual layouts first, then the
    "25 Dec 2024, 08:30:00" pattern. Unparseable input falls back to the
    current time rather than raising.

    Returns:
        Naive wall-clock datetime, or an aware one when the input had an offset
    """
    if date_str:
        try:
            return datetime.fromisoformat(date_str.replace("Z", "+00:00"))
        except ValueError:
            pass

        for fmt in _NATIVE_DATE_FORMATS:
            try:
                return datetime.strptime(date_str, fmt)
            except ValueError:
                continue

        match = _DAY_MONTH_YEAR.search(date_str)
        if match:
            day, month_str, year, hour, minute, second = match.groups()
            month = MONTH_ABBREVIATIONS.get(month_str, 1)
            try:
                return datetime(
                    int(year), month, int(day), int(hour), int(minute), int(second)
                )
            except ValueError:
                pass

    logger.debug(f"Unparseable activity date {date_str!r}, using current time")
    return datetime.now()


def _split_timestamps(parsed: datetime) -> tuple[datetime, datetime]:
    """Return (UTC instant, local wall clock) for a parsed export date."""
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC), parsed
    return parsed.astimezone(UTC), parsed.replace(tzinfo=None)


def _optional_measure(value: str | None) -> float | None:
    """Optional positive measure (heart rate): absent, zero, negative or bad -> None."""
    parsed = _parse_float(value)
    return parsed if parsed is not None and parsed > 0 else None


def row_to_activity(row: dict[str, str], index: int = 0) -> Activity:
    """
    Convert one activities.csv row into an Activity.

    Args:
        row: Header -> value mapping for the row
        index: Row position, used to synthesize an id when the row has none

    Returns:
        Activity with kudos/comments left at 0 (filled from reactions.csv)
    """
    elapsed_time = parse_elapsed_time(_first(row, "Elapsed Time", "Elapsed Time.1"))
    moving_time = parse_elapsed_time(row.get("Moving Time")) or elapsed_time
    distance = parse_distance(_first(row, "Distance", "Distance.1"))

    activity_id = _parse_int(row.get("Activity ID"))
    if activity_id is None:
        activity_id = -(index + 1)
        logger.debug(f"Row {index} has no activity id, using {activity_id}")

    average_speed = _parse_float(row.get("Average Speed"))
    if not average_speed:
        average_speed = distance / moving_time if moving_time > 0 else 0.0

    start_date, start_date_local = _split_timestamps(parse_date(row.get("Activity Date")))
    raw_type = row.get("Activity Type", "")

    return Activity(
        id=activity_id,
        name=row.get("Activity Name") or "Untitled Activity",
        type=raw_type or "Workout",
        sport_type=map_activity_type(raw_type),
        start_date=start_date,
        start_date_local=start_date_local,
        distance=max(distance, 0.0),
        moving_time=max(moving_time, 0),
        elapsed_time=max(elapsed_time, 0),
        total_elevation_gain=max(_parse_float(row.get("Elevation Gain")) or 0.0, 0.0),
        average_speed=max(average_speed, 0.0),
        max_speed=max(_parse_float(row.get("Max Speed")) or 0.0, 0.0),
        average_heartrate=_optional_measure(row.get("Average Heart Rate")),
        max_heartrate=_optional_measure(_first(row, "Max Heart Rate", "Max Heart Rate.1")),
    )


def parse_reactions_csv(csv_text: str) -> dict[int, ReactionCounts]:
    """
    Parse reactions.csv into kudos/comment counts keyed by activity id.

    Rows without an integer activity id are skipped.
    """
    reactions: dict[int, ReactionCounts] = {}

    for row in read_table(csv_text):
        lowered = {key.lower(): value for key, value in row.items()}
        raw_id = next((lowered[c] for c in REACTION_ID_COLUMNS if c in lowered), None)
        activity_id = _parse_int(raw_id)
        if activity_id is None:
            continue
        reactions[activity_id] = ReactionCounts(
            kudos=max(_parse_int(lowered.get("kudos_count")) or 0, 0),
            comments=max(_parse_int(lowered.get("comment_count")) or 0, 0),
        )

    return reactions


def parse_strava_export(
    activities_csv: str,
    reactions_csv: str | None = None,
    year: int | None = None,
) -> ParsedExport:
    """
    Parse a Strava data export into activities for one year.

    Args:
        activities_csv: Contents of activities.csv
        reactions_csv: Optional contents of reactions.csv
        year: Target year (default: current year); filtered on local time

    Returns:
        ParsedExport with reaction counts merged into matching activities
    """
    target_year = year or date.today().year

    rows = read_table(activities_csv)
    reactions = parse_reactions_csv(reactions_csv) if reactions_csv else {}

    activities: list[Activity] = []
    for index, row in enumerate(rows):
        activity = row_to_activity(row, index)
        if activity.year != target_year:
            continue

        reaction = reactions.get(activity.id)
        if reaction is not None:
            activity = activity.model_copy(
                update={
                    "kudos_count": reaction.kudos,
                    "comment_count": reaction.comments,
                }
            )
        activities.append(activity)

    logger.info(
        f"Parsed {len(activities)} of {len(rows)} export rows for {target_year} "
        f"({len(reactions)} reaction rows)"
    )

    return ParsedExport(activities=activities, reactions=reactions, year=target_year)


def get_available_years(activities_csv: str) -> list[int]:
    """
    List the distinct years present in activities.csv, newest first.

    Years before 2000 or after the current year are ignored.
    """
    current_year = date.today().year
    years = {
        parse_date(row.get("Activity Date")).year for row in read_table(activities_csv)
    }
    return sorted((y for y in years if 2000 <= y <= current_year), reverse=True)
