"""
Run/Walk Segment Classifier

Turns an activity's velocity stream into running (FAST) and walking
(SLOW) segments and aggregates time, distance and pace per state.

Each interval between consecutive samples is classified by the speed
at its closing sample: speed >= threshold means running. Contiguous
intervals in the same state are merged into one Segment.

Quirks kept so results match the numbers the dashboard has always shown:
- The first sample has no predecessor and is credited with a fixed
  interval of 1 second.
- The average running rate weights each interval's speed by
  speed * distance (not by distance alone).
"""

from concurrent.futures import ThreadPoolExecutor
import logging
import math
from typing import Dict, Hashable, List, Mapping, Optional, Sequence

from runlens.shared.constants import DEFAULT_RUNNING_THRESHOLD_MPS

from .exceptions import InvalidConfiguration, InvalidSample
from .models import ActivityState, Sample, Segment, SegmentationResult

logger = logging.getLogger(__name__)


# Duration credited to the first sample (it has no predecessor)
FIRST_INTERVAL_DURATION = 1.0


class SegmentClassifier:
    """
    Classifies sample intervals into FAST/SLOW by a fixed rate threshold.

    Instances hold only the validated threshold, so one classifier can
    be shared between threads.

    Usage:
        classifier = SegmentClassifier(threshold=2.2)
        result = classifier.classify(samples)
        result.fast_duration, result.average_fast_rate
    """

    def __init__(self, threshold: float = DEFAULT_RUNNING_THRESHOLD_MPS):
        """
        Args:
            threshold: Rate (m/s) at or above which an interval is FAST

        Raises:
            InvalidConfiguration: If threshold is negative or not finite
        """
        self.threshold = validate_threshold(threshold)

    @classmethod
    def from_settings(cls) -> "SegmentClassifier":
        """Create classifier with the configured running threshold."""
        from runlens.config import settings
        return cls(threshold=settings.running_threshold_mps)

    def state_for(self, rate: float) -> ActivityState:
        """Classify a single rate. The threshold itself counts as FAST."""
        if rate >= self.threshold:
            return ActivityState.FAST
        return ActivityState.SLOW

    def classify(self, samples: Sequence[Sample]) -> SegmentationResult:
        """
        Classify a sample sequence in a single pass.

        Args:
            samples: Ordered samples of one activity (may be empty)

        Returns:
            SegmentationResult; all zeros for empty input

        Raises:
            InvalidSample: If an element is not a Sample or time decreases
        """
        validate_samples(samples)

        fast_duration = 0.0
        slow_duration = 0.0
        fast_distance = 0.0
        slow_distance = 0.0
        weighted_rate_sum = 0.0
        fast_segment_count = 0
        in_fast_segment = False

        segments: List[Segment] = []
        current_state: Optional[ActivityState] = None
        current_start = 0
        current_duration = 0.0
        current_distance = 0.0

        for i, sample in enumerate(samples):
            if i > 0:
                duration = sample.time - samples[i - 1].time
            else:
                duration = FIRST_INTERVAL_DURATION
            distance = sample.rate * duration
            state = self.state_for(sample.rate)

            if state == ActivityState.FAST:
                fast_duration += duration
                fast_distance += distance
                weighted_rate_sum += sample.rate * distance
                if not in_fast_segment:
                    fast_segment_count += 1
                    in_fast_segment = True
            else:
                slow_duration += duration
                slow_distance += distance
                in_fast_segment = False

            if state != current_state:
                if current_state is not None:
                    segments.append(Segment(
                        state=current_state,
                        start_index=current_start,
                        end_index=i - 1,
                        duration=current_duration,
                        distance=current_distance,
                    ))
                current_state = state
                current_start = i
                current_duration = 0.0
                current_distance = 0.0

            current_duration += duration
            current_distance += distance

        if current_state is not None:
            segments.append(Segment(
                state=current_state,
                start_index=current_start,
                end_index=len(samples) - 1,
                duration=current_duration,
                distance=current_distance,
            ))

        result = SegmentationResult(
            threshold=self.threshold,
            fast_duration=fast_duration,
            slow_duration=slow_duration,
            fast_distance=fast_distance,
            slow_distance=slow_distance,
            fast_weighted_rate_sum=weighted_rate_sum,
            fast_segment_count=fast_segment_count,
            segments=tuple(segments),
        )

        logger.debug(
            f"Classified {len(samples)} samples at {self.threshold} m/s: "
            f"{fast_segment_count} running segments, "
            f"run={fast_duration:.0f}s walk={slow_duration:.0f}s"
        )
        return result


# =============================================================================
# Validation
# =============================================================================

def validate_threshold(threshold: float) -> float:
    """Return threshold as float or raise InvalidConfiguration."""
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        raise InvalidConfiguration(f"threshold must be a number, got {threshold!r}")
    if not math.isfinite(threshold):
        raise InvalidConfiguration(f"threshold must be finite, got {threshold!r}")
    if threshold < 0:
        raise InvalidConfiguration(f"threshold must be >= 0, got {threshold!r}")
    return float(threshold)


def validate_samples(samples: Sequence[Sample]) -> None:
    """
    Check the whole sequence before anything is accumulated.

    Sample fields are validated on construction; this adds the
    sequence-level rule that time never goes backwards. Equal
    timestamps are allowed (zero-width interval).
    """
    previous: Optional[Sample] = None
    for i, sample in enumerate(samples):
        if not isinstance(sample, Sample):
            raise InvalidSample(f"sample {i} is not a Sample: {sample!r}")
        if previous is not None and sample.time < previous.time:
            raise InvalidSample(
                f"time decreases at sample {i}: {sample.time} < {previous.time}"
            )
        previous = sample


# =============================================================================
# Functional API
# =============================================================================

def classify(
    samples: Sequence[Sample],
    threshold: float = DEFAULT_RUNNING_THRESHOLD_MPS
) -> SegmentationResult:
    """
    Classify samples into run/walk segments.

    Args:
        samples: Ordered samples of one activity
        threshold: Rate (m/s) at or above which an interval is FAST

    Returns:
        SegmentationResult

    Raises:
        InvalidConfiguration: Bad threshold
        InvalidSample: Malformed or non-monotonic samples
    """
    return SegmentClassifier(threshold).classify(samples)


def classify_many(
    batches: Mapping[Hashable, Sequence[Sample]],
    threshold: float = DEFAULT_RUNNING_THRESHOLD_MPS,
    max_workers: Optional[int] = None
) -> Dict[Hashable, SegmentationResult]:
    """
    Classify several activities in parallel.

    Activities are independent, so each one is a separate task; samples
    within one activity are never split across workers. The first
    failing activity's error propagates.

    Args:
        batches: Activity id -> samples
        threshold: Shared rate threshold (m/s)
        max_workers: Thread pool size (None = configured analysis_max_workers)

    Returns:
        Activity id -> SegmentationResult, in the order of batches
    """
    classifier = SegmentClassifier(threshold)
    if not batches:
        return {}

    if max_workers is None:
        from runlens.config import settings
        max_workers = settings.analysis_max_workers

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            activity_id: executor.submit(classifier.classify, samples)
            for activity_id, samples in batches.items()
        }
        results = {activity_id: future.result() for activity_id, future in futures.items()}

    logger.info(f"Classified {len(results)} activities at {classifier.threshold} m/s")
    return results
