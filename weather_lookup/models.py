"""Canonical records produced by the lookup pipeline.

All records are frozen: a `WeatherResult` is assembled once per lookup and the
cache hands out the same data for as long as the entry lives.
"""
from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

ICON_URL_TEMPLATE = "https://openweathermap.org/img/wn/{icon}@2x.png"

CARDINAL_DIRECTIONS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)

CELSIUS = "Celsius"
FAHRENHEIT = "Fahrenheit"
KELVIN = "Kelvin"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(value + 0.5))


class ErrorKind(str, Enum):
    """Why a lookup produced an error result."""
    EMPTY_INPUT = "empty_input"
    NOT_FOUND = "not_found"
    UPSTREAM = "upstream"


@dataclass(frozen=True)
class Location:
    """A resolved place (WGS84 coordinates)."""
    name: str
    latitude: float
    longitude: float
    country: Optional[str] = None
    region: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.region:
            return f"{self.name}, {self.region}"
        return self.name


@dataclass(frozen=True)
class CurrentConditions:
    """Current weather at a location. Missing provider fields stay None."""
    temperature_unit: str
    temperature: Optional[float] = None
    feels_like: Optional[float] = None
    humidity: Optional[int] = None
    pressure: Optional[int] = None
    wind_speed: Optional[float] = None
    wind_direction: Optional[int] = None
    visibility: Optional[int] = None
    cloudiness: Optional[int] = None
    condition: Optional[str] = None
    icon: Optional[str] = None
    sunrise: Optional[int] = None  # epoch seconds
    sunset: Optional[int] = None  # epoch seconds

    @property
    def temperature_celsius(self) -> Optional[float]:
        if self.temperature is None:
            return None
        if self.temperature_unit == CELSIUS:
            return self.temperature
        if self.temperature_unit == FAHRENHEIT:
            return (self.temperature - 32) * 5 / 9
        return self.temperature - 273.15

    @property
    def temperature_fahrenheit(self) -> Optional[float]:
        if self.temperature is None:
            return None
        if self.temperature_unit == FAHRENHEIT:
            return self.temperature
        celsius = self.temperature_celsius
        return celsius * 9 / 5 + 32

    @property
    def icon_url(self) -> Optional[str]:
        if self.icon is None:
            return None
        return ICON_URL_TEMPLATE.format(icon=self.icon)

    @property
    def wind_direction_cardinal(self) -> Optional[str]:
        """16-point compass label for `wind_direction`."""
        if self.wind_direction is None:
            return None
        return CARDINAL_DIRECTIONS[round_half_up(self.wind_direction / 22.5) % 16]

    @property
    def sunrise_at(self) -> Optional[dt.datetime]:
        return _epoch_to_utc(self.sunrise)

    @property
    def sunset_at(self) -> Optional[dt.datetime]:
        return _epoch_to_utc(self.sunset)


@dataclass(frozen=True)
class HourlySample:
    """One forecast step (typically 3 hours)."""
    time: dt.datetime
    temperature: Optional[float] = None
    condition: Optional[str] = None
    icon: Optional[str] = None
    humidity: Optional[int] = None
    wind_speed: Optional[float] = None
    precipitation: int = 0  # mm


@dataclass(frozen=True)
class DailySummary:
    """Per-calendar-day roll-up of hourly samples."""
    date: dt.date
    min_temperature: Optional[float]
    max_temperature: Optional[float]
    condition: Optional[str]
    icon: Optional[str]
    humidity: int
    wind_speed: float
    precipitation: int


@dataclass(frozen=True)
class AirQuality:
    """AQI value with its category label and display color."""
    index: int
    category: str
    color: str
    components: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class WeatherResult:
    """Everything a caller needs to render one city's weather.

    When `error_message` is set, every weather field is unusable; error results
    are built with `failure()` and carry no location or conditions at all.
    """
    location: Optional[Location] = None
    current: Optional[CurrentConditions] = None
    air_quality: Optional[AirQuality] = None
    hourly: Tuple[HourlySample, ...] = ()
    daily: Tuple[DailySummary, ...] = ()
    fetched_at: Optional[dt.datetime] = None
    cached: bool = False
    response_time_ms: Optional[int] = None
    error_message: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @property
    def is_valid(self) -> bool:
        return not self.error_message

    @property
    def temperature_unit(self) -> Optional[str]:
        return self.current.temperature_unit if self.current else None

    @classmethod
    def failure(cls, message: str, kind: ErrorKind, *, response_time_ms: Optional[int] = None) -> "WeatherResult":
        return cls(
            fetched_at=dt.datetime.now(dt.timezone.utc),
            cached=False,
            response_time_ms=response_time_ms,
            error_message=message,
            error_kind=kind,
        )


def _epoch_to_utc(value: Optional[int]) -> Optional[dt.datetime]:
    if value is None:
        return None
    return dt.datetime.fromtimestamp(value, tz=dt.timezone.utc)
