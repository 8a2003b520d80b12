"""Activity and athlete data models."""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator


class Activity(BaseModel):
    """
    Represents a single exercise session in the Strava activity shape.

    Both ingestion paths (live Strava API and data export import) produce this
    model. All distances are in meters, all durations in seconds and speeds in
    meters per second.
    """

    # Identity
    id: int = Field(description="Activity identifier, unique within a data set")
    name: str = Field(
        default="Untitled Activity",
        description="Activity title",
    )
    sport_type: str = Field(
        description="Sport category token (Run, Ride, VirtualRide, ...)",
    )
    type: str = Field(
        default="Workout",
        description="Raw activity type string as reported by the source",
    )

    # Timestamps
    start_date: datetime = Field(description="Start time as a UTC instant")
    start_date_local: datetime = Field(
        description="Start time as local wall-clock time (naive)",
    )
    timezone: str = Field(default="", description="Source timezone label")

    # Measures
    distance: float = Field(default=0.0, description="Distance in meters", ge=0)
    moving_time: int = Field(default=0, description="Moving time in seconds", ge=0)
    elapsed_time: int = Field(default=0, description="Elapsed time in seconds", ge=0)
    total_elevation_gain: float = Field(
        default=0.0,
        description="Elevation gain in meters",
        ge=0,
    )
    average_speed: float = Field(
        default=0.0,
        description="Average speed in meters per second",
        ge=0,
    )
    max_speed: float = Field(default=0.0, description="Max speed in meters per second")
    average_heartrate: float | None = Field(default=None, ge=0)
    max_heartrate: float | None = Field(default=None, ge=0)

    # Social & achievements
    kudos_count: int = Field(default=0, ge=0)
    comment_count: int = Field(default=0, ge=0)
    athlete_count: int = Field(default=1, ge=0)
    photo_count: int = Field(default=0, ge=0)
    pr_count: int = Field(default=0, ge=0)
    achievement_count: int = Field(default=0, ge=0)
    workout_type: int | None = None

    # Location
    location_city: str | None = None
    location_state: str | None = None
    location_country: str | None = None
    start_latlng: tuple[float, float] | None = None
    end_latlng: tuple[float, float] | None = None

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator("start_date_local")
    @classmethod
    def drop_local_offset(cls, v: datetime) -> datetime:
        """Keep local time as wall-clock; Strava suffixes it with a bogus 'Z'."""
        return v.replace(tzinfo=None)

    @field_validator("start_latlng", "end_latlng", mode="before")
    @classmethod
    def empty_latlng_is_none(cls, v: object) -> object:
        """Strava sends [] for activities without GPS."""
        if isinstance(v, (list, tuple)) and len(v) == 0:
            return None
        return v

    @property
    def year(self) -> int:
        """Calendar year of the local start time."""
        return self.start_date_local.year

    @property
    def local_date(self) -> date:
        """Calendar date of the local start time."""
        return self.start_date_local.date()


class Athlete(BaseModel):
    """Athlete profile as returned by the Strava API."""

    id: int
    username: str | None = None
    firstname: str = ""
    lastname: str = ""
    city: str | None = None
    state: str | None = None
    country: str | None = None
    profile: str | None = Field(default=None, description="Profile image URL")
    profile_medium: str | None = None
    premium: bool = False
    created_at: str | None = None

    model_config = {"extra": "ignore"}

    @property
    def full_name(self) -> str:
        """First and last name joined, or username as a fallback."""
        name = f"{self.firstname} {self.lastname}".strip()
        return name or self.username or "Athlete"
