"""HTTP API for city weather lookups."""

import datetime as dt
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel, ConfigDict

from .config import settings
from .history import update_search_history
from .models import ErrorKind, WeatherResult
from .weather_service import WeatherLookupService, build_weather_service
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="api")

HISTORY_SESSION_KEY = "search_history"

NOT_FOUND_HINT = "Try using format: City, CountryCode (e.g., Nanded,IN or Mumbai, India)"
GENERIC_ERROR = "An unexpected error occurred. Please try again."

router = APIRouter()

_service: Optional[WeatherLookupService] = None


def get_weather_service() -> WeatherLookupService:
    """Process-wide lookup service (and therefore one shared cache)."""
    global _service
    if _service is None:
        _service = build_weather_service(settings)
    return _service


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class LocationOut(_FromAttributes):
    """Resolved place."""
    name: str
    display_name: str
    country: Optional[str] = None
    region: Optional[str] = None
    latitude: float
    longitude: float


class CurrentConditionsOut(_FromAttributes):
    """Current weather plus display helpers."""
    temperature_unit: str
    temperature: Optional[float] = None
    temperature_celsius: Optional[float] = None
    temperature_fahrenheit: Optional[float] = None
    feels_like: Optional[float] = None
    humidity: Optional[int] = None
    pressure: Optional[int] = None
    wind_speed: Optional[float] = None
    wind_direction: Optional[int] = None
    wind_direction_cardinal: Optional[str] = None
    visibility: Optional[int] = None
    cloudiness: Optional[int] = None
    condition: Optional[str] = None
    icon: Optional[str] = None
    icon_url: Optional[str] = None
    sunrise_at: Optional[dt.datetime] = None
    sunset_at: Optional[dt.datetime] = None


class HourlySampleOut(_FromAttributes):
    time: dt.datetime
    temperature: Optional[float] = None
    condition: Optional[str] = None
    icon: Optional[str] = None
    humidity: Optional[int] = None
    wind_speed: Optional[float] = None
    precipitation: int = 0


class DailySummaryOut(_FromAttributes):
    date: dt.date
    min_temperature: Optional[float] = None
    max_temperature: Optional[float] = None
    condition: Optional[str] = None
    icon: Optional[str] = None
    humidity: int
    wind_speed: float
    precipitation: int


class AirQualityOut(_FromAttributes):
    index: int
    category: str
    color: str
    components: Dict[str, float] = {}


class WeatherResponse(_FromAttributes):
    """Successful lookup payload."""
    location: LocationOut
    current: CurrentConditionsOut
    air_quality: Optional[AirQualityOut] = None
    hourly: list[HourlySampleOut] = []
    daily: list[DailySummaryOut] = []
    fetched_at: dt.datetime
    cached: bool
    response_time_ms: Optional[int] = None


class HistoryResponse(BaseModel):
    """Recently searched cities, most recent first."""
    history: list[str]


def user_facing_error(result: WeatherResult, city: Optional[str]) -> tuple[int, str]:
    """Map an error result to (HTTP status, message shown to the user)."""
    if result.error_kind == ErrorKind.EMPTY_INPUT:
        return status.HTTP_400_BAD_REQUEST, "Please enter a city name"
    if result.error_kind == ErrorKind.NOT_FOUND:
        return status.HTTP_404_NOT_FOUND, f"City not found: {(city or '').strip()}. {NOT_FOUND_HINT}"
    return status.HTTP_502_BAD_GATEWAY, GENERIC_ERROR


@router.get("/weather", response_model=WeatherResponse)
def get_weather(
    request: Request,
    city: Optional[str] = Query(default=None),
    service: WeatherLookupService = Depends(get_weather_service),
):
    """Look up weather for `city` and remember it in the session history."""
    logger.info(f"Weather request received for city={city!r}")
    result = service.lookup(city)
    if not result.is_valid:
        status_code, detail = user_facing_error(result, city)
        logger.warning(f"Weather lookup failed for city={city!r}: {result.error_message}")
        raise HTTPException(status_code=status_code, detail=detail)

    request.session[HISTORY_SESSION_KEY] = update_search_history(
        request.session.get(HISTORY_SESSION_KEY),
        city,
        limit=settings.search_history_size,
    )
    return WeatherResponse.model_validate(result)


@router.get("/history", response_model=HistoryResponse)
def get_history(request: Request):
    """Return the session's recent searches."""
    return HistoryResponse(history=list(request.session.get(HISTORY_SESSION_KEY, [])))
