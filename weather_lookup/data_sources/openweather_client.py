"""Helpers for fetching geocoding, weather, forecast and air-quality data from OpenWeatherMap."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import requests
from pydantic import TypeAdapter

from weather_lookup import config
from weather_lookup.data_sources.schemas import (
    AirPollutionPayload,
    CurrentWeatherPayload,
    ForecastPayload,
    GeocodingCandidate,
)
from weather_lookup.errors import UpstreamUnavailableError
from utils.logging_utils import get_tagged_logger, mask_url

logger = get_tagged_logger(__name__, tag="openweather_client")

# One attempt per call; no retry adapter is mounted.
session = requests.Session()

_CANDIDATES = TypeAdapter(List[GeocodingCandidate])


def _timeout() -> Tuple[float, float]:
    """(connect, read) timeout pair applied to every request."""
    return (config.settings.connect_timeout_seconds, config.settings.read_timeout_seconds)


def _get_json(url: str, params: Dict[str, Any], *, context: str) -> Any:
    """GET `url` with the API key attached and return the decoded JSON body."""
    params = {**params, "appid": config.settings.api_key or ""}
    prepared = requests.Request("GET", url, params=params).prepare()
    logger.debug(f"Upstream request {context}: {mask_url(prepared.url or url)}")

    resp = session.get(url, params=params, timeout=_timeout())
    resp.raise_for_status()
    data = resp.json()
    if data is None:
        raise UpstreamUnavailableError("No response received from API")
    return data


def fetch_geocoding(query: str, *, limit: int = 5) -> List[GeocodingCandidate]:
    """Return up to `limit` places matching the free-text `query`, best first."""
    data = _get_json(config.settings.geocoding_url, {"q": query, "limit": limit}, context="geocoding")
    return _CANDIDATES.validate_python(data)


def fetch_current_weather(latitude: float, longitude: float, *, units: Optional[str] = None) -> CurrentWeatherPayload:
    """Fetch current conditions for the given coordinates."""
    params = {"lat": latitude, "lon": longitude, "units": units or config.settings.units}
    data = _get_json(f"{config.settings.base_url}/weather", params, context="weather_current")
    return CurrentWeatherPayload.model_validate(data)


def fetch_forecast(latitude: float, longitude: float, *, units: Optional[str] = None) -> ForecastPayload:
    """Fetch the 3-hourly, ~5 day forecast for the given coordinates."""
    params = {"lat": latitude, "lon": longitude, "units": units or config.settings.units}
    data = _get_json(f"{config.settings.base_url}/forecast", params, context="forecast")
    return ForecastPayload.model_validate(data)


def fetch_air_pollution(latitude: float, longitude: float) -> AirPollutionPayload:
    """Fetch the current air-pollution reading for the given coordinates."""
    params = {"lat": latitude, "lon": longitude}
    data = _get_json(f"{config.settings.base_url}/air_pollution", params, context="air_pollution")
    return AirPollutionPayload.model_validate(data)
