"""
Shared utilities (NOT business logic).

Usage:
    from runlens.shared import pace_from_rate, duration_to_clock
    from runlens.shared.constants import DEFAULT_RUNNING_THRESHOLD_MPS
"""
from .formatters import (
    pace_from_rate,
    duration_to_clock,
    format_distance_km,
)
from .constants import (
    DEFAULT_RUNNING_THRESHOLD_MPS,
    DEFAULT_STREAM_KEYS,
    EMPTY_PACE,
    METERS_PER_KM,
    StreamKey,
)

__all__ = [
    # Formatters
    "pace_from_rate",
    "duration_to_clock",
    "format_distance_km",
    # Constants
    "DEFAULT_RUNNING_THRESHOLD_MPS",
    "DEFAULT_STREAM_KEYS",
    "EMPTY_PACE",
    "METERS_PER_KM",
    "StreamKey",
]
