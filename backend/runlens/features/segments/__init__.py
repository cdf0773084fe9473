"""
Run/walk segmentation module.

Usage:
    from runlens.features.segments import classify, samples_from_streams

    samples = samples_from_streams(streams_json)
    result = classify(samples, threshold=2.2)

Components:
- SegmentClassifier: FAST/SLOW interval classification and aggregation
- samples_from_streams: Strava streams -> Sample list
- AnalysisResponse: API view of a SegmentationResult
"""

from .exceptions import SegmentationError, InvalidConfiguration, InvalidSample
from .models import ActivityState, Sample, Segment, SegmentationResult
from .classifier import (
    SegmentClassifier,
    classify,
    classify_many,
    validate_threshold,
    validate_samples,
    FIRST_INTERVAL_DURATION,
)
from .streams import samples_from_streams
from .schemas import AnalysisRequest, AnalysisResponse, SegmentSchema

__all__ = [
    # Errors
    "SegmentationError",
    "InvalidConfiguration",
    "InvalidSample",
    # Models
    "ActivityState",
    "Sample",
    "Segment",
    "SegmentationResult",
    # Classifier
    "SegmentClassifier",
    "classify",
    "classify_many",
    "validate_threshold",
    "validate_samples",
    "FIRST_INTERVAL_DURATION",
    # Streams
    "samples_from_streams",
    # Schemas
    "AnalysisRequest",
    "AnalysisResponse",
    "SegmentSchema",
]
