"""
Segmentation errors.

Both are raised before any accumulation starts, so callers never
receive a partially computed result.
"""


class SegmentationError(ValueError):
    """Base segmentation error."""
    pass


class InvalidConfiguration(SegmentationError):
    """Threshold is negative or not a finite number."""
    pass


class InvalidSample(SegmentationError):
    """Sample data is malformed (NaN, negative rate, time going backwards)."""
    pass
