"""Unit conversion and display formatting utilities."""

import math
import re

# Conversion constants
METERS_PER_KM = 1000.0
MPS_TO_KPH = 3.6


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round with halves going toward positive infinity.

    Python's round() uses banker's rounding; display values and derived
    statistics round .5 up (2.5 -> 3, -2.5 -> -2).

    Args:
        value: Number to round
        digits: Decimal places to keep

    Returns:
        Rounded value
    """
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def meters_to_km(meters: float) -> float:
    """Convert meters to kilometers."""
    return meters / METERS_PER_KM


def mps_to_kph(meters_per_second: float) -> float:
    """Convert meters per second to kilometers per hour."""
    return meters_per_second * MPS_TO_KPH


def format_distance(meters: float) -> str:
    """
    Format a distance for display.

    Args:
        meters: Distance in meters

    Returns:
        "12.3 km" for 1000 m and above, otherwise whole meters ("850 m")
    """
    if meters >= METERS_PER_KM:
        return f"{meters_to_km(meters):.1f} km"
    return f"{int(round_half_up(meters))} m"


def format_duration(seconds: float) -> str:
    """
    Format a duration as hours and minutes.

    Args:
        seconds: Duration in seconds

    Returns:
        "3h 25m", or "25m" when under an hour
    """
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_sport_type(sport_type: str) -> str:
    """Convert a sport token to title text (VirtualRide -> Virtual Ride)."""
    spaced = re.sub(r"([A-Z])", r" \1", sport_type)
    if spaced:
        spaced = spaced[0].upper() + spaced[1:]
    return spaced.strip()


def format_pace(meters_per_second: float, is_run: bool) -> str:
    """
    Format a speed the way each sport reads it.

    Args:
        meters_per_second: Average speed
        is_run: Runs use pace per kilometer, everything else km/h

    Returns:
        "4:41 /km" for runs, "27.4 km/h" otherwise; "-" for runs without speed
    """
    if not is_run:
        return f"{mps_to_kph(meters_per_second):.1f} km/h"

    if meters_per_second <= 0:
        return "-"

    seconds_per_km = METERS_PER_KM / meters_per_second
    minutes = int(seconds_per_km // 60)
    seconds = int(round_half_up(seconds_per_km % 60))
    if seconds == 60:
        minutes += 1
        seconds = 0
    return f"{minutes}:{seconds:02d} /km"
