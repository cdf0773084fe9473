"""
Types for run/walk segmentation.

This module contains only dataclasses and enums, so it can be imported
by the classifier, the stream adapter and the API schemas alike.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple
import math

from .exceptions import InvalidSample


class ActivityState(str, Enum):
    """Movement state of a sample interval."""
    FAST = "fast"   # running
    SLOW = "slow"   # walking / standing


# bool is an int subclass; True must not pass as 1 second or 1 m/s
def _is_finite_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


@dataclass(frozen=True, slots=True)
class Sample:
    """
    A single (time, rate) observation from an activity stream.

    Attributes:
        time: Seconds since activity start. Non-decreasing across a sequence.
        rate: Instantaneous speed in meters/second, >= 0.
    """
    time: float
    rate: float

    def __post_init__(self):
        if not _is_finite_number(self.time):
            raise InvalidSample(f"time must be a finite number, got {self.time!r}")
        if not _is_finite_number(self.rate):
            raise InvalidSample(f"rate must be a finite number, got {self.rate!r}")
        if self.rate < 0:
            raise InvalidSample(f"rate must be >= 0, got {self.rate!r}")


@dataclass(frozen=True, slots=True)
class Segment:
    """
    A maximal run of contiguous intervals sharing one state.

    Indices refer to the input sample sequence; end_index is inclusive.
    """
    state: ActivityState
    start_index: int
    end_index: int
    duration: float
    distance: float

    @property
    def sample_count(self) -> int:
        return self.end_index - self.start_index + 1

    @property
    def average_rate(self) -> float:
        """Plain distance / duration speed over the segment (m/s)."""
        if self.duration <= 0:
            return 0.0
        return self.distance / self.duration


@dataclass(frozen=True)
class SegmentationResult:
    """
    Aggregate run/walk statistics for one activity.

    Durations are in the same unit as Sample.time (seconds),
    distances in meters.
    """
    threshold: float
    fast_duration: float = 0.0
    slow_duration: float = 0.0
    fast_distance: float = 0.0
    slow_distance: float = 0.0
    fast_weighted_rate_sum: float = 0.0
    fast_segment_count: int = 0
    segments: Tuple[Segment, ...] = field(default_factory=tuple)

    @property
    def average_fast_rate(self) -> float:
        """Distance-weighted average rate over FAST intervals (m/s)."""
        if self.fast_distance <= 0:
            return 0.0
        return self.fast_weighted_rate_sum / self.fast_distance

    @property
    def total_duration(self) -> float:
        return self.fast_duration + self.slow_duration

    @property
    def sample_count(self) -> int:
        return sum(s.sample_count for s in self.segments)

    @property
    def is_empty(self) -> bool:
        """True when there was no data to classify."""
        return not self.segments

    def duration(self, state: ActivityState) -> float:
        """Total duration spent in the given state."""
        if state == ActivityState.FAST:
            return self.fast_duration
        return self.slow_duration

    def distance(self, state: ActivityState) -> float:
        """Total distance covered in the given state."""
        if state == ActivityState.FAST:
            return self.fast_distance
        return self.slow_distance

    def segments_of(self, state: ActivityState) -> list[Segment]:
        return [s for s in self.segments if s.state == state]
