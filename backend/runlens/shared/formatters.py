"""
Formatting utilities for display.

Used by the analysis API to render durations, paces and distances.
"""

import math

from runlens.shared.constants import EMPTY_PACE, METERS_PER_KM


def pace_from_rate(meters_per_second: float) -> str:
    """
    Format speed as pace per kilometer, 'M:SS'.

    Args:
        meters_per_second: Speed in m/s

    Returns:
        Formatted string (e.g., '5:30'), or '--:--' when the
        speed is zero (no pace can be derived)
    """
    if not math.isfinite(meters_per_second) or meters_per_second <= 0:
        return EMPTY_PACE

    seconds_per_km = METERS_PER_KM / meters_per_second
    minutes = math.floor(seconds_per_km / 60)
    seconds = math.floor(seconds_per_km % 60)

    return f"{minutes}:{seconds:02d}"


def duration_to_clock(seconds: float) -> str:
    """
    Format a duration as 'Xh Ym Zs' (hours omitted when zero).

    Args:
        seconds: Duration in seconds (fractions are dropped)

    Returns:
        Formatted string (e.g., '1h 5m 3s' or '42m 7s')
    """
    if seconds < 0:
        return "—"

    total = int(seconds)
    h = total // 3600
    m = (total % 3600) // 60
    s = total % 60

    if h > 0:
        return f"{h}h {m}m {s}s"
    return f"{m}m {s}s"


def format_distance_km(meters: float) -> str:
    """
    Format distance in kilometers with two decimals.

    Args:
        meters: Distance in meters

    Returns:
        Formatted string (e.g., '12.35 km')
    """
    return f"{meters / METERS_PER_KM:.2f} km"
