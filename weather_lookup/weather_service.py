"""End-to-end city weather lookup: resolve, fetch, normalize, cache."""
from __future__ import annotations

import datetime as dt
import time
from dataclasses import replace
from typing import Callable, Optional

import requests

from weather_lookup import config
from weather_lookup.air_quality import extract_air_quality
from weather_lookup.cache import WeatherCache
from weather_lookup.data_sources import WeatherDataSource, build_data_source
from weather_lookup.errors import EmptyInputError, NotFoundError, UpstreamUnavailableError
from weather_lookup.forecast import ForecastSeries, aggregate_forecast
from weather_lookup.models import AirQuality, ErrorKind, Location, WeatherResult
from weather_lookup.normalizer import NormalizedWeather, ReportedPlace, normalize_current_weather
from weather_lookup.resolver import CoordinateResolver
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="weather_service")


class WeatherLookupService:
    """
    Assemble a `WeatherResult` for a city name.

    Current weather is mandatory; forecast and air quality are best-effort and
    degrade to empty/absent data. Upstream calls run one after another. `lookup`
    never raises: every failure becomes an error-flagged result.
    """

    def __init__(
        self,
        data_source: WeatherDataSource,
        *,
        cache: Optional[WeatherCache] = None,
        resolver: Optional[CoordinateResolver] = None,
        units: str = "metric",
        forecast_tz: Optional[dt.tzinfo] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._data_source = data_source
        self._cache = cache
        self._resolver = resolver or CoordinateResolver(data_source)
        self._units = units
        self._forecast_tz = forecast_tz
        self._clock = clock

    @property
    def cache(self) -> Optional[WeatherCache]:
        return self._cache

    def lookup(self, city_name: Optional[str]) -> WeatherResult:
        """Return weather for `city_name`, served from cache when fresh.

        Only successful results are cached; an error result is recomputed on
        the next call for the same city.
        """
        started = self._clock()
        if city_name is None or not city_name.strip():
            logger.warning(f"Invalid city name provided: {city_name!r}")
            return WeatherResult.failure(str(EmptyInputError()), ErrorKind.EMPTY_INPUT, response_time_ms=0)

        city = city_name.strip()
        if self._cache is not None:
            hit = self._cache.get(city)
            if hit is not None:
                logger.info(f"Serving weather for {city} from cache")
                return replace(hit, cached=True)

        try:
            result = self._fetch(city, started)
        except Exception as exc:
            logger.error(f"Unexpected failure looking up {city}: {exc}", exc_info=True)
            return WeatherResult.failure(
                f"Error fetching weather data: {exc}",
                ErrorKind.UPSTREAM,
                response_time_ms=self._elapsed_ms(started),
            )

        if self._cache is not None and result.is_valid:
            self._cache.put(city, result)
        return result

    def _elapsed_ms(self, started: float) -> int:
        return int((self._clock() - started) * 1000)

    def _fetch(self, city: str, started: float) -> WeatherResult:
        logger.info(f"Fetching weather data for {city}")

        try:
            location = self._resolver.resolve(city)
        except NotFoundError as exc:
            logger.error(f"City not found: {city}")
            return WeatherResult.failure(str(exc), ErrorKind.NOT_FOUND, response_time_ms=self._elapsed_ms(started))

        try:
            normalized = self._fetch_current(location)
        except UpstreamUnavailableError as exc:
            if exc.status_code == 404:
                logger.error(f"Provider has no weather for {city} ({location.latitude}, {location.longitude})")
                return WeatherResult.failure(
                    f"City not found: {city}", ErrorKind.NOT_FOUND, response_time_ms=self._elapsed_ms(started)
                )
            logger.error(f"Error fetching weather data for {city}: {exc}")
            return WeatherResult.failure(
                f"Error fetching weather data: {exc}",
                ErrorKind.UPSTREAM,
                response_time_ms=self._elapsed_ms(started),
            )

        forecast = self._fetch_forecast(location)
        air_quality = self._fetch_air_quality(location)

        result = WeatherResult(
            location=_merge_location(location, normalized.reported),
            current=normalized.conditions,
            air_quality=air_quality,
            hourly=forecast.hourly,
            daily=forecast.daily,
            fetched_at=dt.datetime.now(dt.timezone.utc),
            cached=False,
            response_time_ms=self._elapsed_ms(started),
        )
        logger.info(
            f"Fetched weather data for {city}: {len(result.hourly)} hourly, {len(result.daily)} daily, "
            f"aqi={'yes' if air_quality is not None else 'no'}, {result.response_time_ms} ms"
        )
        return result

    def _fetch_current(self, location: Location) -> NormalizedWeather:
        try:
            payload = self._data_source.fetch_current_weather(
                location.latitude, location.longitude, units=self._units
            )
            return normalize_current_weather(payload, units=self._units)
        except UpstreamUnavailableError:
            raise
        except requests.HTTPError as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            raise UpstreamUnavailableError(str(exc), status_code=status_code) from exc
        except Exception as exc:
            raise UpstreamUnavailableError(str(exc)) from exc

    def _fetch_forecast(self, location: Location) -> ForecastSeries:
        try:
            payload = self._data_source.fetch_forecast(location.latitude, location.longitude, units=self._units)
            return aggregate_forecast(payload, tz=self._forecast_tz)
        except Exception as exc:
            logger.warning(f"Failed to fetch forecast data for ({location.latitude}, {location.longitude}): {exc}")
            return ForecastSeries()

    def _fetch_air_quality(self, location: Location) -> Optional[AirQuality]:
        try:
            payload = self._data_source.fetch_air_pollution(location.latitude, location.longitude)
            return extract_air_quality(payload)
        except Exception as exc:
            logger.warning(f"Failed to fetch AQI data for ({location.latitude}, {location.longitude}): {exc}")
            return None


def _merge_location(resolved: Location, reported: ReportedPlace) -> Location:
    """Resolved data wins; the weather payload only fills a missing country."""
    if resolved.country or not reported.country:
        return resolved
    return replace(resolved, country=reported.country)


def build_weather_service(settings: config.Settings | None = None) -> WeatherLookupService:
    """Wire data source, resolver, and cache from configuration."""
    settings = settings or config.settings
    data_source = build_data_source(settings)
    resolver = CoordinateResolver(
        data_source,
        country_code=settings.geocode_country_code,
        country_name=settings.geocode_country_name,
        limit=settings.geocode_limit,
    )
    cache = WeatherCache(max_size=settings.cache_max_size, ttl_seconds=settings.cache_ttl_seconds)
    return WeatherLookupService(data_source, cache=cache, resolver=resolver, units=settings.units)
