"""Interfaces and helpers for weather data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol

from weather_lookup.data_sources.schemas import (
    AirPollutionPayload,
    CurrentWeatherPayload,
    ForecastPayload,
    GeocodingCandidate,
)


class WeatherDataSource(Protocol):
    """Interface for anything that can geocode a city and provide weather for it."""

    def fetch_geocoding(self, query: str, *, limit: int = 5) -> List[GeocodingCandidate]:
        """Return candidate places for a free-text query."""
        ...

    def fetch_current_weather(
        self,
        latitude: float,
        longitude: float,
        *,
        units: Optional[str] = None,
    ) -> CurrentWeatherPayload:
        """Return the current weather payload."""
        ...

    def fetch_forecast(
        self,
        latitude: float,
        longitude: float,
        *,
        units: Optional[str] = None,
    ) -> ForecastPayload:
        """Return the 3-hourly forecast payload."""
        ...

    def fetch_air_pollution(self, latitude: float, longitude: float) -> AirPollutionPayload:
        """Return the air-pollution payload."""
        ...


@dataclass
class CallableWeatherDataSource(WeatherDataSource):
    """Wrap four callables so they can be swapped for different backends."""

    geocoding: Callable[..., List[GeocodingCandidate]]
    current_weather: Callable[..., CurrentWeatherPayload]
    forecast: Callable[..., ForecastPayload]
    air_pollution: Callable[..., AirPollutionPayload]

    def fetch_geocoding(self, *args, **kwargs) -> List[GeocodingCandidate]:
        """Delegate to the configured geocoding callable."""
        return self.geocoding(*args, **kwargs)

    def fetch_current_weather(self, *args, **kwargs) -> CurrentWeatherPayload:
        """Delegate to the configured current-weather callable."""
        return self.current_weather(*args, **kwargs)

    def fetch_forecast(self, *args, **kwargs) -> ForecastPayload:
        """Delegate to the configured forecast callable."""
        return self.forecast(*args, **kwargs)

    def fetch_air_pollution(self, *args, **kwargs) -> AirPollutionPayload:
        """Delegate to the configured air-pollution callable."""
        return self.air_pollution(*args, **kwargs)
