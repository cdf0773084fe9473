"""
Tests for analysis API routes.

Strava is replaced with an in-memory fake via dependency override.
"""

import pytest
from fastapi.testclient import TestClient

from runlens.main import app
from runlens.api.v1.routes.strava import get_strava_client
from runlens.features.strava import StravaAuthError, StravaNotFoundError, StravaRateLimitError, StravaAPIError


STREAMS = {
    "time": {"data": [0, 1, 2, 3, 4]},
    "velocity_smooth": {"data": [1.0, 1.0, 3.0, 3.0, 1.0]},
}


class FakeStravaClient:
    """Records calls and returns canned responses."""

    def __init__(self, streams=None, error=None):
        self.streams = STREAMS if streams is None else streams
        self.error = error
        self.refreshed_with = None
        self.stream_calls = []

    async def refresh_token(self, refresh_token):
        self.refreshed_with = refresh_token
        return {"access_token": "fresh", "refresh_token": "r2", "expires_at": 4_000_000_000}

    async def get_activity_streams(self, access_token, activity_id, keys=None):
        self.stream_calls.append((access_token, activity_id))
        if self.error:
            raise self.error
        return self.streams


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def fake_strava():
    fake = FakeStravaClient()
    app.dependency_overrides[get_strava_client] = lambda: fake
    return fake


def login(client, expires_at="4000000000"):
    client.cookies.set("strava_access_token", "tok")
    client.cookies.set("strava_refresh_token", "r1")
    client.cookies.set("strava_expires_at", expires_at)


# =============================================================================
# Test POST /analysis
# =============================================================================

class TestAnalyzeStreams:
    """Tests for POST /api/v1/analysis."""

    def test_reference_example(self, client):
        response = client.post("/api/v1/analysis", json={
            "time": [0, 1, 2, 3, 4],
            "velocity_smooth": [1.0, 1.0, 3.0, 3.0, 1.0],
            "threshold_mps": 2.2,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["has_data"] is True
        assert data["sample_count"] == 5
        assert data["running_time_s"] == 2
        assert data["walking_time_s"] == 3
        assert data["running_time"] == "0m 2s"
        assert data["running_segment_count"] == 1
        assert data["avg_running_rate_mps"] == pytest.approx(3.0)
        assert data["avg_running_pace"] == "5:33"
        assert [s["state"] for s in data["segments"]] == ["slow", "fast", "slow"]

    def test_default_threshold_from_settings(self, client):
        response = client.post("/api/v1/analysis", json={
            "time": [0, 1],
            "velocity_smooth": [2.2, 2.2],
        })

        assert response.status_code == 200
        assert response.json()["threshold_mps"] == 2.2
        assert response.json()["running_time_s"] == 2

    def test_empty_streams_is_no_data(self, client):
        response = client.post("/api/v1/analysis", json={"time": [], "velocity_smooth": []})

        assert response.status_code == 200
        data = response.json()
        assert data["has_data"] is False
        assert data["running_time_s"] == 0
        assert data["avg_running_pace"] == "--:--"

    def test_without_segments(self, client):
        response = client.post(
            "/api/v1/analysis?include_segments=false",
            json={"time": [0, 1], "velocity_smooth": [3.0, 3.0]},
        )

        assert response.status_code == 200
        assert response.json()["segments"] == []
        assert response.json()["running_segment_count"] == 1

    def test_decreasing_time_is_bad_data(self, client):
        response = client.post("/api/v1/analysis", json={
            "time": [0, 5, 3],
            "velocity_smooth": [3.0, 3.0, 3.0],
        })

        assert response.status_code == 422
        assert response.json()["detail"].startswith("Could not analyze activity")

    def test_length_mismatch_is_bad_data(self, client):
        response = client.post("/api/v1/analysis", json={
            "time": [0, 1, 2],
            "velocity_smooth": [3.0],
        })

        assert response.status_code == 422

    def test_negative_threshold_rejected(self, client):
        response = client.post("/api/v1/analysis", json={
            "time": [0],
            "velocity_smooth": [3.0],
            "threshold_mps": -1,
        })

        assert response.status_code == 400
        assert "threshold" in response.json()["detail"]


# =============================================================================
# Test GET /activities/{id}/analysis
# =============================================================================

class TestAnalyzeActivity:
    """Tests for GET /api/v1/activities/{id}/analysis."""

    def test_requires_tokens(self, client, fake_strava):
        response = client.get("/api/v1/activities/42/analysis")

        assert response.status_code == 401
        assert fake_strava.stream_calls == []

    def test_analyzes_fetched_streams(self, client, fake_strava):
        login(client)
        response = client.get("/api/v1/activities/42/analysis")

        assert response.status_code == 200
        data = response.json()
        assert data["activity_id"] == 42
        assert data["running_segment_count"] == 1
        assert data["walking_time_s"] == 3
        assert fake_strava.stream_calls == [("tok", 42)]
        assert fake_strava.refreshed_with is None

    def test_threshold_query(self, client, fake_strava):
        login(client)
        response = client.get("/api/v1/activities/42/analysis?threshold_mps=0.5")

        assert response.status_code == 200
        assert response.json()["walking_time_s"] == 0

    def test_negative_threshold_query_rejected(self, client, fake_strava):
        login(client)
        response = client.get("/api/v1/activities/42/analysis?threshold_mps=-1")

        assert response.status_code == 400
        assert fake_strava.stream_calls == []

    def test_refreshes_expired_token(self, client, fake_strava):
        login(client, expires_at="1000")
        response = client.get("/api/v1/activities/42/analysis")

        assert response.status_code == 200
        assert fake_strava.refreshed_with == "r1"
        assert fake_strava.stream_calls == [("fresh", 42)]
        cookies = {
            header.split("=", 1)[0]: header
            for header in response.headers.get_list("set-cookie")
        }
        assert cookies["strava_access_token"].startswith("strava_access_token=fresh;")
        assert cookies["strava_refresh_token"].startswith("strava_refresh_token=r2;")
        assert cookies["strava_expires_at"].startswith("strava_expires_at=4000000000;")
        assert "Max-Age=31536000" in cookies["strava_refresh_token"]
        assert "Max-Age=31536000" in cookies["strava_expires_at"]
        assert "Max-Age=31536000" not in cookies["strava_access_token"]
        for header in cookies.values():
            assert "HttpOnly" in header
            assert "Path=/" in header

    def test_activity_without_velocity_is_no_data(self, client, fake_strava):
        fake_strava.streams = {"time": {"data": [0, 1, 2]}}
        login(client)
        response = client.get("/api/v1/activities/42/analysis")

        assert response.status_code == 200
        assert response.json()["has_data"] is False

    def test_malformed_streams(self, client, fake_strava):
        fake_strava.streams = {"time": {"data": [0, 1]}, "velocity_smooth": {"data": [1.0]}}
        login(client)
        response = client.get("/api/v1/activities/42/analysis")

        assert response.status_code == 422

    @pytest.mark.parametrize("error,status", [
        (StravaAuthError("expired"), 401),
        (StravaNotFoundError("gone"), 404),
        (StravaRateLimitError("slow down"), 429),
        (StravaAPIError("boom"), 502),
    ])
    def test_strava_errors(self, client, fake_strava, error, status):
        fake_strava.error = error
        login(client)
        response = client.get("/api/v1/activities/42/analysis")

        assert response.status_code == status


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
