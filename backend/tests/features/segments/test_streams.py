"""
Tests for the Strava stream adapter.
"""

import pytest

from runlens.features.segments import InvalidSample, Sample, samples_from_streams


TIME = [0, 1, 2, 4]
VELOCITY = [0.0, 2.5, 3.1, 1.0]
EXPECTED = [Sample(0, 0.0), Sample(1, 2.5), Sample(2, 3.1), Sample(4, 1.0)]


class TestStreamShapes:
    """All three payload shapes produce the same samples."""

    def test_key_by_type(self):
        streams = {
            "time": {"data": TIME, "series_type": "distance", "original_size": 4, "resolution": "high"},
            "velocity_smooth": {"data": VELOCITY, "series_type": "distance", "original_size": 4, "resolution": "high"},
            "heartrate": {"data": [120, 130, 140, 150]},
        }
        assert samples_from_streams(streams) == EXPECTED

    def test_list_of_streams(self):
        streams = [
            {"type": "distance", "data": [0, 2.5, 5.6, 7.6]},
            {"type": "time", "data": TIME},
            {"type": "velocity_smooth", "data": VELOCITY},
        ]
        assert samples_from_streams(streams) == EXPECTED

    def test_flat_arrays(self):
        assert samples_from_streams({"time": TIME, "velocity_smooth": VELOCITY}) == EXPECTED

    def test_custom_rate_key(self):
        streams = {"time": TIME, "speed": VELOCITY}
        assert samples_from_streams(streams, rate_key="speed") == EXPECTED


class TestMissingData:
    """Absent streams mean no data, not bad data."""

    def test_missing_velocity_stream(self):
        assert samples_from_streams({"time": {"data": TIME}}) == []

    def test_missing_time_stream(self):
        assert samples_from_streams([{"type": "velocity_smooth", "data": VELOCITY}]) == []

    def test_empty_payload(self):
        assert samples_from_streams({}) == []
        assert samples_from_streams([]) == []

    def test_empty_arrays(self):
        assert samples_from_streams({"time": [], "velocity_smooth": []}) == []


class TestMalformedStreams:
    """Bad data raises InvalidSample."""

    def test_length_mismatch(self):
        with pytest.raises(InvalidSample, match="length mismatch"):
            samples_from_streams({"time": [0, 1, 2], "velocity_smooth": [1.0, 2.0]})

    def test_null_value(self):
        with pytest.raises(InvalidSample, match="index 1"):
            samples_from_streams({"time": [0, 1], "velocity_smooth": [1.0, None]})

    def test_string_value(self):
        with pytest.raises(InvalidSample):
            samples_from_streams({"time": [0, "1"], "velocity_smooth": [1.0, 2.0]})

    def test_negative_velocity(self):
        with pytest.raises(InvalidSample, match="Sample 1"):
            samples_from_streams({"time": [0, 1], "velocity_smooth": [1.0, -2.0]})

    def test_data_not_a_list(self):
        with pytest.raises(InvalidSample):
            samples_from_streams({"time": {"data": 5}, "velocity_smooth": {"data": [1.0]}})

    def test_unsupported_payload(self):
        with pytest.raises(InvalidSample):
            samples_from_streams("time,velocity")
