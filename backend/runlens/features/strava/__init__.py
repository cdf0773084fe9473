"""
Strava integration module.

Usage:
    from runlens.features.strava import StravaClient

Components:
- StravaClient: OAuth, activity list and activity streams
- ActivitySummary: activity list entry
"""

from .client import (
    StravaClient,
    StravaError,
    StravaAPIError,
    StravaAuthError,
    StravaNotFoundError,
    StravaRateLimitError,
    token_expired,
)
from .schemas import ActivitySummary

__all__ = [
    "StravaClient",
    "StravaError",
    "StravaAPIError",
    "StravaAuthError",
    "StravaNotFoundError",
    "StravaRateLimitError",
    "token_expired",
    "ActivitySummary",
]
