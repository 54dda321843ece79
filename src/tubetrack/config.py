"""Configuration using Pydantic Settings.

Values can be overridden via environment variables prefixed with TUBETRACK_:
- TUBETRACK_APP_KEY=<TfL application key>
- TUBETRACK_FEED_TIMEOUT_SECONDS=15
- TUBETRACK_NEARBY_MAX_DISTANCE_METERS=2000
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

TFL_API_BASE = "https://api.tfl.gov.uk"


class Settings(BaseSettings):
    """Engine configuration.

    Environment variables prefixed with TUBETRACK_.
    """

    model_config = SettingsConfigDict(env_prefix="TUBETRACK_", frozen=True)

    api_base_url: str = TFL_API_BASE
    app_key: Optional[str] = None

    feed_timeout_seconds: float = Field(default=15.0, gt=0)
    directory_timeout_seconds: float = Field(default=10.0, gt=0)
    location_timeout_seconds: float = Field(default=10.0, gt=0)
    location_max_age_seconds: float = Field(default=60.0, ge=0)

    nearby_limit: int = Field(default=10, gt=0)
    nearby_max_distance_meters: float = Field(default=2000.0, gt=0)

    station_codes_path: Optional[Path] = None
    log_level: str = "INFO"


def load_settings(**overrides) -> Settings:
    """Build settings from the environment plus explicit overrides.

    Raises:
        ConfigurationError: If a value fails validation.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        errors = e.errors()
        setting = str(errors[0]["loc"][0]) if errors and errors[0]["loc"] else ""
        raise ConfigurationError(
            f"Invalid configuration for '{setting}'", cause=e, setting_name=setting
        ) from e


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings, loaded once."""
    return load_settings()


def reset_settings() -> None:
    """Clear the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
