"""
Run/walk analysis schemas.

Pydantic schemas for API request/response serialization.
"""

from pydantic import BaseModel, Field
from typing import Optional, List

from runlens.shared.formatters import (
    pace_from_rate,
    duration_to_clock,
    format_distance_km,
)

from .models import ActivityState, Segment, SegmentationResult


class AnalysisRequest(BaseModel):
    """Raw streams to analyze (flat shape, parallel arrays)."""
    time: List[float] = Field(..., description="Seconds since start")
    velocity_smooth: List[float] = Field(..., description="Speed in m/s")
    threshold_mps: Optional[float] = Field(
        default=None,
        description="Running threshold; configured default if omitted"
    )


class SegmentSchema(BaseModel):
    """Single run or walk segment."""
    state: ActivityState
    start_index: int
    end_index: int
    duration_s: float
    distance_m: float
    pace: str

    @classmethod
    def from_segment(cls, segment: Segment) -> "SegmentSchema":
        return cls(
            state=segment.state,
            start_index=segment.start_index,
            end_index=segment.end_index,
            duration_s=segment.duration,
            distance_m=round(segment.distance, 1),
            pace=pace_from_rate(segment.average_rate),
        )


class AnalysisResponse(BaseModel):
    """Run/walk breakdown of one activity."""
    activity_id: Optional[int] = None
    threshold_mps: float
    has_data: bool = Field(..., description="False when there were no samples")
    sample_count: int

    running_time_s: float
    running_time: str
    walking_time_s: float
    walking_time: str
    running_distance_m: float
    running_distance: str
    avg_running_rate_mps: float
    avg_running_pace: str
    running_segment_count: int

    segments: List[SegmentSchema] = Field(default_factory=list)

    @classmethod
    def from_result(
        cls,
        result: SegmentationResult,
        activity_id: Optional[int] = None,
        include_segments: bool = True
    ) -> "AnalysisResponse":
        return cls(
            activity_id=activity_id,
            threshold_mps=result.threshold,
            has_data=not result.is_empty,
            sample_count=result.sample_count,
            running_time_s=result.fast_duration,
            running_time=duration_to_clock(result.fast_duration),
            walking_time_s=result.slow_duration,
            walking_time=duration_to_clock(result.slow_duration),
            running_distance_m=round(result.fast_distance, 1),
            running_distance=format_distance_km(result.fast_distance),
            avg_running_rate_mps=round(result.average_fast_rate, 3),
            avg_running_pace=pace_from_rate(result.average_fast_rate),
            running_segment_count=result.fast_segment_count,
            segments=[SegmentSchema.from_segment(s) for s in result.segments] if include_segments else [],
        )
