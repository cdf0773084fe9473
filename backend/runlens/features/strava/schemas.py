"""
Strava activity schemas.

Only the summary fields the activity list shows are kept; anything
else Strava sends is ignored.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from runlens.shared.formatters import pace_from_rate


class ActivitySummary(BaseModel):
    """One entry of GET /athlete/activities."""
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    type: str
    distance: float  # meters
    moving_time: int  # seconds
    elapsed_time: int  # seconds
    total_elevation_gain: float = 0.0  # meters
    start_date: str
    start_date_local: Optional[str] = None
    timezone: Optional[str] = None
    average_speed: float = 0.0  # m/s
    max_speed: float = 0.0  # m/s
    average_heartrate: Optional[float] = None
    max_heartrate: Optional[float] = None
    elev_high: Optional[float] = None
    elev_low: Optional[float] = None

    # Derived
    average_pace: str = ""

    @classmethod
    def from_strava(cls, data: dict) -> "ActivitySummary":
        """Build from a raw Strava activity dict, adding the min/km pace."""
        summary = cls.model_validate(data)
        summary.average_pace = pace_from_rate(summary.average_speed)
        return summary
