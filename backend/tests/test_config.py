"""
Tests for application settings.
"""

import pytest
from pydantic import ValidationError

from runlens.config import Settings


class TestSettings:
    """Tests for Settings validation."""

    def test_defaults(self):
        s = Settings(_env_file=None)

        assert s.running_threshold_mps == 2.2
        assert s.strava_api_url == "https://www.strava.com/api/v3"
        assert s.strava_authorize_url == "https://www.strava.com/oauth/authorize"
        assert s.base_url == "http://localhost:8000"
        assert s.frontend_url == "http://localhost:3000"

    def test_cors_origins_from_comma_string(self):
        s = Settings(_env_file=None, cors_origins="http://a.test, http://b.test")

        assert s.cors_origins == ["http://a.test", "http://b.test"]

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, running_threshold_mps=-1)

    def test_strava_secret_alias(self, monkeypatch):
        monkeypatch.setenv("STRAVA_SECRET", "shh")

        assert Settings(_env_file=None).strava_client_secret == "shh"
