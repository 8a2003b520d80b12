"""Strava API client for fetching athlete profiles and activities."""

import logging
import time
from datetime import datetime
from typing import Any, cast

import httpx

from ..models import Activity, Athlete

logger = logging.getLogger(__name__)


class StravaAPIClient:
    """
    Client for the Strava v3 REST API.

    Handles authentication headers, pagination and parsing into models.
    """

    BASE_URL = "https://www.strava.com/api/v3"
    MAX_PER_PAGE = 200

    def __init__(self, access_token: str, page_delay: float = 0.1) -> None:
        """
        Initialize API client with access token.

        Args:
            access_token: Valid Strava OAuth access token
            page_delay: Seconds to pause between pages to stay under rate limits
        """
        self.access_token = access_token
        self.page_delay = page_delay
        self._client: httpx.Client | None = None

    def __enter__(self) -> "StravaAPIClient":
        """Context manager entry."""
        self._client = httpx.Client(
            base_url=self.BASE_URL,
            headers={
                "Authorization": f"Bearer {self.access_token}",
                "Accept": "application/json",
            },
            timeout=30.0,
        )
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        if self._client:
            self._client.close()
            self._client = None

    @property
    def client(self) -> httpx.Client:
        """Get HTTP client, raising error if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "StravaAPIClient must be used as a context manager "
                "(use 'with StravaAPIClient(...) as client:')"
            )
        return self._client

    def get_athlete(self) -> dict[str, Any]:
        """
        Fetch the authenticated athlete's profile.

        Raises:
            httpx.HTTPStatusError: If API request fails
        """
        logger.info("Fetching athlete profile")

        response = self.client.get("/athlete")
        response.raise_for_status()

        athlete = cast(dict[str, Any], response.json())
        logger.info(f"Retrieved athlete {athlete.get('id')}")
        return athlete

    def get_activities(
        self,
        after: int,
        before: int,
        page: int = 1,
        per_page: int = MAX_PER_PAGE,
    ) -> list[dict[str, Any]]:
        """
        Fetch one page of activities between two epoch timestamps.

        Args:
            after: Only activities starting after this Unix time
            before: Only activities starting before this Unix time
            page: Page number (1-indexed)
            per_page: Activities per page (max 200)

        Returns:
            List of activity dictionaries from the Strava API

        Raises:
            httpx.HTTPStatusError: If API request fails
        """
        params = {
            "after": after,
            "before": before,
            "page": page,
            "per_page": min(per_page, self.MAX_PER_PAGE),
        }

        logger.info(f"Fetching activities page {page}")

        response = self.client.get("/athlete/activities", params=params)
        response.raise_for_status()

        activities = cast(list[dict[str, Any]], response.json())
        logger.info(f"Retrieved {len(activities)} activities from API")
        return activities

    def get_all_activities_for_year(
        self, year: int, per_page: int = MAX_PER_PAGE
    ) -> list[dict[str, Any]]:
        """
        Fetch every activity in a calendar year (handles pagination).

        Pages are requested until one comes back shorter than per_page.

        Args:
            year: Calendar year to fetch
            per_page: Activities per page

        Returns:
            All activity dictionaries for the year
        """
        after = int(datetime(year, 1, 1).timestamp())
        before = int(datetime(year, 12, 31, 23, 59, 59).timestamp())

        logger.info(f"Fetching all activities for {year}")

        all_activities: list[dict[str, Any]] = []
        page = 1

        while True:
            activities = self.get_activities(after, before, page=page, per_page=per_page)
            all_activities.extend(activities)

            if len(activities) < per_page:
                break

            page += 1
            time.sleep(self.page_delay)

        logger.info(f"Retrieved total of {len(all_activities)} activities for {year}")
        return all_activities

    def parse_activity(self, activity_data: dict[str, Any]) -> Activity:
        """
        Parse Strava activity data into Activity model.

        Raises:
            ValidationError: If activity data is invalid
        """
        return Activity(**activity_data)

    def parse_athlete(self, athlete_data: dict[str, Any]) -> Athlete:
        """
        Parse Strava athlete data into Athlete model.

        Raises:
            ValidationError: If athlete data is invalid
        """
        return Athlete(**athlete_data)

    def fetch_year(
        self, year: int, per_page: int = MAX_PER_PAGE
    ) -> tuple[Athlete, list[Activity]]:
        """Fetch the athlete and their activities for a year, as models."""
        athlete = self.parse_athlete(self.get_athlete())
        activities = [
            self.parse_activity(data)
            for data in self.get_all_activities_for_year(year, per_page=per_page)
        ]
        # The after/before window uses server-local time; keep local-year activities only
        return athlete, [a for a in activities if a.year == year]
