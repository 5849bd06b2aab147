"""Runtime configuration for the hotel web frontend.

Settings are read from environment variables once per process and cached.
Tests call reset_settings() after changing the environment.
"""

import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_API_URL = "http://localhost:8080/api"

# Sent on every backend call as x-app-version
BUILD_VERSION = "1.0.1"

NOTIFICATION_AUTO_HIDE_MS = 6000
CANCELLATION_REDIRECT_SECONDS = 3


class Settings(BaseModel):
    """Frontend settings resolved from the environment."""

    model_config = ConfigDict(frozen=True)

    api_url: str = Field(default=DEFAULT_API_URL, description="Backend REST base URL")
    app_version: str = Field(default=BUILD_VERSION)
    environment: str = Field(default="dev", description="Selects SSM parameter paths")
    stripe_publishable_key: str | None = Field(
        default=None,
        description="Publishable key; falls back to SSM when unset",
    )
    public_base_url: str = Field(default="http://localhost:8000")
    session_cookie_name: str = Field(default="hotel_session")
    session_ttl_seconds: int = Field(default=86400, ge=60)
    api_timeout_seconds: float = Field(default=10.0, gt=0)
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    @property
    def stripe_publishable_key_parameter(self) -> str:
        """SSM path holding the Stripe publishable key."""
        return f"/hotel/{self.environment}/stripe/publishable_key"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, keeping defaults for unset ones."""
        values: dict[str, object] = {}
        mapping = {
            "API_URL": "api_url",
            "APP_VERSION": "app_version",
            "ENVIRONMENT": "environment",
            "STRIPE_PUBLISHABLE_KEY": "stripe_publishable_key",
            "PUBLIC_BASE_URL": "public_base_url",
            "SESSION_COOKIE_NAME": "session_cookie_name",
            "SESSION_TTL_SECONDS": "session_ttl_seconds",
            "API_TIMEOUT_SECONDS": "api_timeout_seconds",
        }
        for env_name, field_name in mapping.items():
            value = os.environ.get(env_name)
            if value:
                values[field_name] = value

        origins = os.environ.get("CORS_ORIGINS")
        if origins:
            values["cors_origins"] = [o.strip() for o in origins.split(",") if o.strip()]

        return cls.model_validate(values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings (singleton pattern)."""
    return Settings.from_env()


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
