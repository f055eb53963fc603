"""Application configuration pulled from environment variables via pydantic."""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the weather lookup service."""
    model_config = SettingsConfigDict(env_prefix="WEATHER_", extra="ignore")

    data_source: str = "openweather"  # options: openweather
    api_key: str | None = None
    base_url: str = "https://api.openweathermap.org/data/2.5"
    geocoding_url: str = "https://api.openweathermap.org/geo/1.0/direct"
    units: str = "metric"  # metric, imperial, or anything else for Kelvin

    geocode_limit: int = Field(default=5, ge=1, le=5)
    geocode_country_code: str = "IN"
    geocode_country_name: str = "India"

    connect_timeout_seconds: float = Field(default=10.0, gt=0)
    read_timeout_seconds: float = Field(default=30.0, gt=0)

    cache_max_size: int = Field(default=100, ge=1)
    cache_ttl_seconds: int = Field(default=1800, ge=1)

    search_history_size: int = Field(default=5, ge=1)
    session_secret_key: str = Field(default="dev-only-session-secret-change-me", min_length=16)
    log_level: str = "INFO"

    @field_validator("base_url", "geocoding_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")

    @field_validator("units", mode="after")
    @classmethod
    def normalize_units(cls, v: str) -> str:
        return v.strip().lower()


settings = Settings()


if __name__ == "__main__":
    logger.logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4, exclude={'api_key', 'session_secret_key'})}")
