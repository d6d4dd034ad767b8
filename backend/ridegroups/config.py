"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field, field_validator, ConfigDict


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./ridegroups.db",
        description="Database connection URL"
    )

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:5000"],
        description="Allowed CORS origins"
    )

    # === Public URLs ===
    base_url: str = Field(
        default="http://localhost:5000",
        description="Public URL of this API (used to build OAuth callbacks)"
    )
    frontend_url: str = Field(
        default="http://localhost:5000",
        description="Where browsers land after an OAuth callback"
    )

    # === Sessions ===
    session_cookie_name: str = Field(default="session_id")
    session_ttl_days: int = Field(default=30)

    # === Outbound provider calls ===
    provider_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for every Strava/Google HTTP call"
    )

    # === Strava ===
    strava_client_id: Optional[str] = Field(default=None)
    strava_client_secret: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("strava_client_secret", "strava_secret"),
    )
    strava_redirect_uri: Optional[str] = Field(default=None)

    # === Google ===
    google_client_id: Optional[str] = Field(default=None)
    google_client_secret: Optional[str] = Field(default=None)
    google_redirect_uri: Optional[str] = Field(default=None)

    @field_validator('database_url')
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Render/Railway postgres:// URL to postgresql://"""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    @property
    def strava_callback_url(self) -> str:
        """Redirect URI registered with Strava."""
        if self.strava_redirect_uri:
            return self.strava_redirect_uri
        return f"{self.base_url.rstrip('/')}/api/v1/strava/callback"

    @property
    def google_callback_url(self) -> str:
        """Redirect URI registered with Google."""
        if self.google_redirect_uri:
            return self.google_redirect_uri
        return f"{self.base_url.rstrip('/')}/api/v1/auth/google/callback"

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
