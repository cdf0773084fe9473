"""
Strava stream adapter.

Zips the parallel `time` and velocity arrays returned by
GET /activities/{id}/streams into Sample values.

Accepted shapes:
- key_by_type=true:  {"time": {"data": [...]}, "velocity_smooth": {"data": [...]}}
- list (default):    [{"type": "time", "data": [...]}, ...]
- flat:              {"time": [...], "velocity_smooth": [...]}
"""

import logging
from typing import Any, List, Optional

from runlens.shared.constants import StreamKey

from .exceptions import InvalidSample
from .models import Sample

logger = logging.getLogger(__name__)


def _stream_data(streams: Any, key: str) -> Optional[list]:
    """Extract the data array for one stream type, or None if absent."""
    if isinstance(streams, list):
        for stream in streams:
            if isinstance(stream, dict) and stream.get("type") == key:
                return stream.get("data")
        return None

    if isinstance(streams, dict):
        stream = streams.get(key)
        if isinstance(stream, dict):
            return stream.get("data")
        return stream

    raise InvalidSample(f"Unsupported streams payload: {type(streams).__name__}")


def samples_from_streams(
    streams: Any,
    rate_key: str = StreamKey.VELOCITY_SMOOTH.value,
    time_key: str = StreamKey.TIME.value
) -> List[Sample]:
    """
    Build samples from Strava activity streams.

    A missing time or rate stream means the activity has no usable
    data (manual entry, treadmill without GPS) and yields an empty
    list rather than an error.

    Args:
        streams: Decoded JSON from the streams endpoint
        rate_key: Stream to use as rate (m/s)
        time_key: Stream to use as time (s)

    Returns:
        List of Sample in stream order

    Raises:
        InvalidSample: Streams of different length or bad values
    """
    times = _stream_data(streams, time_key)
    rates = _stream_data(streams, rate_key)

    if times is None or rates is None:
        missing = time_key if times is None else rate_key
        logger.info(f"Stream '{missing}' not present, no samples to analyze")
        return []

    if not isinstance(times, list) or not isinstance(rates, list):
        raise InvalidSample("Stream data must be arrays")

    if len(times) != len(rates):
        raise InvalidSample(
            f"Stream length mismatch: {time_key}={len(times)}, {rate_key}={len(rates)}"
        )

    samples = []
    for i, (t, v) in enumerate(zip(times, rates)):
        if isinstance(t, bool) or isinstance(v, bool) \
                or not isinstance(t, (int, float)) or not isinstance(v, (int, float)):
            raise InvalidSample(f"Non-numeric value at index {i}: time={t!r}, rate={v!r}")
        try:
            samples.append(Sample(time=float(t), rate=float(v)))
        except InvalidSample as e:
            raise InvalidSample(f"Sample {i}: {e}") from e

    return samples
