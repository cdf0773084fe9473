"""
Unified constants for activity analysis.

Single source of truth for thresholds and Strava stream naming
across the application.
"""

from enum import Enum


# Speed at or above which a sample interval counts as running (m/s).
# 2.2 m/s is a 7:34 /km pace.
DEFAULT_RUNNING_THRESHOLD_MPS: float = 2.2

METERS_PER_KM: float = 1000.0

# Placeholder shown when pace cannot be computed
EMPTY_PACE: str = "--:--"


class StreamKey(str, Enum):
    """
    Stream types from Strava API.

    These are Strava's naming conventions, used as query keys
    for /activities/{id}/streams and as keys of the response.
    """
    TIME = "time"
    DISTANCE = "distance"
    VELOCITY_SMOOTH = "velocity_smooth"
    HEARTRATE = "heartrate"
    ALTITUDE = "altitude"
    LATLNG = "latlng"


# Streams requested for an activity by default
DEFAULT_STREAM_KEYS: list[str] = [key.value for key in StreamKey]
