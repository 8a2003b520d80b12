"""Shared fixtures for tests."""

from datetime import datetime

import pytest

from src.shared.models import Activity, Athlete


def _make_activity(
    activity_id: int = 1,
    sport_type: str = "Run",
    start: datetime = datetime(2024, 3, 15, 8, 0, 0),
    **fields,
) -> Activity:
    return Activity(
        id=activity_id,
        sport_type=sport_type,
        start_date=start,
        start_date_local=start,
        **fields,
    )


@pytest.fixture
def make_activity():
    """Build an Activity whose local and UTC start share the same wall clock."""
    return _make_activity


@pytest.fixture
def athlete():
    """Sample athlete."""
    return Athlete(id=42, firstname="Jane", lastname="Doe")
