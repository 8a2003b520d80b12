"""Up-front validation of uploaded Strava export files."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .reader import read_rows

# Required columns for activities.csv (matched case-insensitively)
REQUIRED_ACTIVITY_COLUMNS = [
    "Activity ID",
    "Activity Date",
    "Activity Type",
    "Elapsed Time",
    "Distance",
]

# Accepted spellings of the activity id column in reactions.csv
ACTIVITY_ID_COLUMN_VARIANTS = ("activity_id", "activityid", "activity id")

NOT_AN_EXPORT_WARNING = (
    "This doesn't look like a Strava activities export. "
    "Make sure you're uploading the correct file."
)


class ValidationResult(BaseModel):
    """Outcome of validating an uploaded file; do not parse when invalid."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def validate_activities_csv(csv_text: str) -> ValidationResult:
    """
    Validate an activities.csv export before parsing.

    Args:
        csv_text: Raw file contents

    Returns:
        ValidationResult with errors (blocking) and warnings (informational)
    """
    if not csv_text or not csv_text.strip():
        return ValidationResult(is_valid=False, errors=["File is empty"])

    rows = read_rows(csv_text)
    if len(rows) < 2:
        return ValidationResult(
            is_valid=False,
            errors=["File must have a header row and at least one data row"],
        )

    errors: list[str] = []
    warnings: list[str] = []

    headers = [h.lower() for h in rows[0]]

    missing = [col for col in REQUIRED_ACTIVITY_COLUMNS if col.lower() not in headers]
    if missing:
        errors.append(f"Missing required columns: {', '.join(missing)}")

    if not any("activity" in h or "strava" in h for h in headers):
        warnings.append(NOT_AN_EXPORT_WARNING)

    valid_rows = sum(1 for row in rows[1:] if any(row))
    if valid_rows == 0:
        errors.append("No activity data found in the file")

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def validate_reactions_csv(csv_text: str) -> ValidationResult:
    """
    Validate a reactions.csv export before parsing.

    Args:
        csv_text: Raw file contents

    Returns:
        ValidationResult; invalid when empty or the activity id column is missing
    """
    if not csv_text or not csv_text.strip():
        return ValidationResult(is_valid=False, errors=["File is empty"])

    rows = read_rows(csv_text)
    headers = [h.lower() for h in rows[0]]

    errors: list[str] = []
    if not any(h in ACTIVITY_ID_COLUMN_VARIANTS for h in headers):
        errors.append("Missing required column: activity_id")

    return ValidationResult(is_valid=not errors, errors=errors)
