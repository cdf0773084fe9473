"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, ConfigDict

from runlens.shared.constants import DEFAULT_RUNNING_THRESHOLD_MPS


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === URLs ===
    base_url: str = Field(
        default="http://localhost:8000",
        description="Public URL of this API (OAuth callback is built from it)"
    )
    frontend_url: str = Field(
        default="http://localhost:3000",
        description="Where the browser is sent after Strava login"
    )

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # === Strava ===
    strava_client_id: Optional[str] = Field(default=None)
    strava_client_secret: Optional[str] = Field(
        default=None,
        validation_alias="strava_secret"  # Also accept STRAVA_SECRET
    )
    strava_api_url: str = Field(
        default="https://www.strava.com/api/v3",
        description="Strava REST API base URL"
    )
    strava_oauth_url: str = Field(
        default="https://www.strava.com/oauth/token",
        description="Strava token endpoint"
    )
    strava_authorize_url: str = Field(
        default="https://www.strava.com/oauth/authorize",
        description="Strava OAuth consent page"
    )
    http_timeout_seconds: float = Field(default=20.0, gt=0)

    # === Analysis ===
    running_threshold_mps: float = Field(
        default=DEFAULT_RUNNING_THRESHOLD_MPS,
        ge=0,
        description="Speed (m/s) at or above which an interval counts as running"
    )
    analysis_max_workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="Thread pool size for batch classification (None = executor default)"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept 'debug', 'Info', etc."""
        return v.upper()

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Global settings instance
settings = Settings()
