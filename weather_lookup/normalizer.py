"""Map the provider's current-weather payload into `CurrentConditions`."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from weather_lookup.data_sources.schemas import CurrentWeatherPayload
from weather_lookup.errors import UpstreamUnavailableError
from weather_lookup.models import CELSIUS, FAHRENHEIT, KELVIN, CurrentConditions


@dataclass(frozen=True)
class ReportedPlace:
    """Location metadata as the weather endpoint reports it (all optional)."""
    name: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True)
class NormalizedWeather:
    conditions: CurrentConditions
    reported: ReportedPlace


def temperature_unit_label(units: Optional[str]) -> str:
    """Unit label matching the unit system the provider was asked for."""
    normalized = (units or "").strip().lower()
    if normalized == "metric":
        return CELSIUS
    if normalized == "imperial":
        return FAHRENHEIT
    return KELVIN


def normalize_current_weather(payload: Optional[CurrentWeatherPayload], *, units: Optional[str]) -> NormalizedWeather:
    """Flatten a current-weather payload; missing blocks leave fields unset."""
    if payload is None:
        raise UpstreamUnavailableError("No response received from API")

    main = payload.main
    wind = payload.wind
    sys = payload.sys
    coord = payload.coord
    condition = payload.first_condition

    conditions = CurrentConditions(
        temperature_unit=temperature_unit_label(units),
        temperature=main.temp if main else None,
        feels_like=main.feels_like if main else None,
        humidity=main.humidity if main else None,
        pressure=main.pressure if main else None,
        wind_speed=wind.speed if wind else None,
        wind_direction=wind.deg if wind else None,
        visibility=payload.visibility,
        cloudiness=payload.clouds.cloudiness if payload.clouds else None,
        condition=condition.description if condition else None,
        icon=condition.icon if condition else None,
        sunrise=sys.sunrise if sys else None,
        sunset=sys.sunset if sys else None,
    )
    reported = ReportedPlace(
        name=payload.name,
        country=sys.country if sys else None,
        latitude=coord.lat if coord else None,
        longitude=coord.lon if coord else None,
    )
    return NormalizedWeather(conditions=conditions, reported=reported)
