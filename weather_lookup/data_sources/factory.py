"""Factory helpers for choosing a weather data source at startup."""

from __future__ import annotations

from weather_lookup import config
from weather_lookup.data_sources.base import CallableWeatherDataSource, WeatherDataSource
from weather_lookup.data_sources.openweather_client import (
    fetch_air_pollution,
    fetch_current_weather,
    fetch_forecast,
    fetch_geocoding,
)
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/factory")


DEFAULT_SOURCE_NAME = "openweather"


def build_data_source(settings: config.Settings | None = None) -> WeatherDataSource:
    """Instantiate the configured weather data source."""
    settings = settings or config.settings
    source = (settings.data_source or DEFAULT_SOURCE_NAME).lower()

    if source == "openweather":
        if not settings.api_key:
            logger.warning("No OpenWeatherMap API key configured; upstream calls will be rejected")
        logger.info(f"Using OpenWeatherMap data source at {settings.base_url}")
        return CallableWeatherDataSource(
            geocoding=fetch_geocoding,
            current_weather=fetch_current_weather,
            forecast=fetch_forecast,
            air_pollution=fetch_air_pollution,
        )

    raise ValueError(f"Unknown weather data source '{source}'")
