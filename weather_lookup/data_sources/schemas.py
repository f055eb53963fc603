"""Pydantic schemas for OpenWeatherMap payloads.

The provider sends numbers as ints or floats depending on the value, and any
nested block may be missing. Every numeric leaf is decoded through
`coerce_number`, so a field is either a clean number or None; nested blocks
default to None instead of failing the whole payload.
"""
from __future__ import annotations

import math
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def coerce_number(value: Any) -> Optional[float]:
    """Return `value` as a float, or None if it is not a usable number."""
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (OverflowError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def coerce_whole_number(value: Any) -> Optional[int]:
    """Like `coerce_number`, truncated toward zero."""
    number = coerce_number(value)
    if number is None:
        return None
    return int(number)


LenientFloat = Annotated[Optional[float], BeforeValidator(coerce_number)]
LenientInt = Annotated[Optional[int], BeforeValidator(coerce_whole_number)]


class _PayloadModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GeocodingCandidate(_PayloadModel):
    """One match from the direct geocoding endpoint."""
    name: Optional[str] = None
    lat: float
    lon: float
    country: Optional[str] = None
    state: Optional[str] = None


class Coord(_PayloadModel):
    lat: LenientFloat = None
    lon: LenientFloat = None


class SysBlock(_PayloadModel):
    country: Optional[str] = None
    sunrise: LenientInt = None
    sunset: LenientInt = None


class MainBlock(_PayloadModel):
    temp: LenientFloat = None
    feels_like: LenientFloat = None
    humidity: LenientInt = None
    pressure: LenientInt = None


class WindBlock(_PayloadModel):
    speed: LenientFloat = None
    deg: LenientInt = None


class CloudsBlock(_PayloadModel):
    cloudiness: LenientInt = Field(default=None, alias="all")


class RainBlock(_PayloadModel):
    three_hours: LenientInt = Field(default=None, alias="3h")


class Condition(_PayloadModel):
    main: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None


class CurrentWeatherPayload(_PayloadModel):
    """Response of `/weather`."""
    name: Optional[str] = None
    coord: Optional[Coord] = None
    sys: Optional[SysBlock] = None
    main: Optional[MainBlock] = None
    wind: Optional[WindBlock] = None
    clouds: Optional[CloudsBlock] = None
    visibility: LenientInt = None
    weather: Optional[List[Condition]] = None

    @property
    def first_condition(self) -> Optional[Condition]:
        return self.weather[0] if self.weather else None


class ForecastItem(_PayloadModel):
    dt: LenientInt = None
    main: Optional[MainBlock] = None
    wind: Optional[WindBlock] = None
    rain: Optional[RainBlock] = None
    weather: Optional[List[Condition]] = None


class ForecastPayload(_PayloadModel):
    """Response of `/forecast` (3-hourly steps, ~5 days)."""
    items: Optional[List[ForecastItem]] = Field(default=None, alias="list")


class AirMain(_PayloadModel):
    aqi: LenientInt = None


class AirEntry(_PayloadModel):
    dt: LenientInt = None
    main: Optional[AirMain] = None
    components: Dict[str, LenientFloat] = Field(default_factory=dict)


class AirPollutionPayload(_PayloadModel):
    """Response of `/air_pollution`; the first entry is the current reading."""
    items: Optional[List[AirEntry]] = Field(default=None, alias="list")
