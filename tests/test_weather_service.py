import datetime as dt
import threading
import unittest

import requests

from weather_lookup.cache import WeatherCache
from weather_lookup.data_sources.base import CallableWeatherDataSource
from weather_lookup.data_sources.schemas import (
    AirPollutionPayload,
    CurrentWeatherPayload,
    ForecastPayload,
    GeocodingCandidate,
)
from weather_lookup.models import ErrorKind
from weather_lookup.weather_service import WeatherLookupService

JAN_1 = 1704067200


def _current_payload():
    return CurrentWeatherPayload.model_validate(
        {
            "name": "London",
            "sys": {"country": "GB"},
            "main": {"temp": 11.5, "feels_like": 10, "humidity": 80, "pressure": 1012},
            "wind": {"speed": 3.6, "deg": 200},
            "weather": [{"description": "light rain", "icon": "10d"}],
        }
    )


def _forecast_payload():
    return ForecastPayload.model_validate(
        {
            "list": [
                {
                    "dt": JAN_1 + i * 3 * 3600,
                    "main": {"temp": 8 + i, "humidity": 70},
                    "wind": {"speed": 2},
                    "weather": [{"description": "clouds", "icon": "04d"}],
                }
                for i in range(4)
            ]
        }
    )


def _air_payload():
    return AirPollutionPayload.model_validate({"list": [{"main": {"aqi": 42}, "components": {"pm2_5": 9.1}}]})


class FakeProvider:
    """Counts calls and returns canned payloads unless told to fail."""

    def __init__(self):
        self.calls = {"geocoding": 0, "current": 0, "forecast": 0, "air": 0}
        self.geocode_country = None
        self.current_error = None
        self.forecast_error = None
        self.air_error = None
        self.current_hook = None

    def geocoding(self, query, *, limit=5):
        self.calls["geocoding"] += 1
        return [GeocodingCandidate(name="London", lat=51.5, lon=-0.12, country=self.geocode_country, state="England")]

    def current_weather(self, lat, lon, *, units=None):
        self.calls["current"] += 1
        if self.current_hook is not None:
            self.current_hook()
        if self.current_error is not None:
            raise self.current_error
        return _current_payload()

    def forecast(self, lat, lon, *, units=None):
        self.calls["forecast"] += 1
        if self.forecast_error is not None:
            raise self.forecast_error
        return _forecast_payload()

    def air_pollution(self, lat, lon):
        self.calls["air"] += 1
        if self.air_error is not None:
            raise self.air_error
        return _air_payload()

    def source(self):
        return CallableWeatherDataSource(
            geocoding=self.geocoding,
            current_weather=self.current_weather,
            forecast=self.forecast,
            air_pollution=self.air_pollution,
        )


class FakeTimer:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def _http_error(status_code):
    response = requests.Response()
    response.status_code = status_code
    return requests.HTTPError(f"{status_code} Client Error", response=response)


class TestWeatherLookupService(unittest.TestCase):
    def setUp(self):
        self.provider = FakeProvider()
        self.timer = FakeTimer()
        self.cache = WeatherCache(max_size=10, ttl_seconds=1800, timer=self.timer)
        self.service = WeatherLookupService(
            self.provider.source(), cache=self.cache, forecast_tz=dt.timezone.utc
        )

    def test_blank_input_makes_no_calls(self):
        for value in (None, "", "   "):
            result = self.service.lookup(value)
            self.assertFalse(result.is_valid)
            self.assertEqual(result.error_kind, ErrorKind.EMPTY_INPUT)
            self.assertEqual(result.error_message, "City name cannot be empty")
        self.assertEqual(sum(self.provider.calls.values()), 0)

    def test_successful_lookup(self):
        result = self.service.lookup("London")

        self.assertTrue(result.is_valid)
        self.assertFalse(result.cached)
        self.assertEqual(result.location.name, "London")
        self.assertEqual(result.location.country, "GB")
        self.assertEqual(result.current.temperature, 11.5)
        self.assertEqual(result.temperature_unit, "Celsius")
        self.assertEqual(len(result.hourly), 4)
        self.assertEqual(len(result.daily), 1)
        self.assertEqual(result.air_quality.category, "Good")
        self.assertIsNotNone(result.fetched_at)
        self.assertIsNotNone(result.response_time_ms)

    def test_resolved_country_wins_over_reported(self):
        self.provider.geocode_country = "CA"
        result = self.service.lookup("London")
        self.assertEqual(result.location.country, "CA")

    def test_forecast_failure_is_soft(self):
        self.provider.forecast_error = RuntimeError("forecast down")
        result = self.service.lookup("London")
        self.assertTrue(result.is_valid)
        self.assertEqual(result.hourly, ())
        self.assertEqual(result.daily, ())
        self.assertIsNotNone(result.air_quality)

    def test_air_quality_failure_is_soft(self):
        self.provider.air_error = _http_error(500)
        result = self.service.lookup("London")
        self.assertTrue(result.is_valid)
        self.assertIsNone(result.air_quality)
        self.assertEqual(len(result.daily), 1)

    def test_unresolvable_city_is_not_found(self):
        self.provider.geocoding = lambda query, *, limit=5: []
        service = WeatherLookupService(self.provider.source(), cache=self.cache)
        result = service.lookup("Xyzzyville")
        self.assertEqual(result.error_kind, ErrorKind.NOT_FOUND)
        self.assertEqual(result.error_message, "City not found: Xyzzyville")
        self.assertEqual(self.provider.calls["current"], 0)

    def test_current_weather_failure_is_upstream(self):
        self.provider.current_error = requests.ConnectionError("connection refused")
        result = self.service.lookup("London")
        self.assertFalse(result.is_valid)
        self.assertEqual(result.error_kind, ErrorKind.UPSTREAM)
        self.assertTrue(result.error_message.startswith("Error fetching weather data: "))
        self.assertEqual(self.provider.calls["forecast"], 0)

    def test_current_weather_404_is_not_found(self):
        self.provider.current_error = _http_error(404)
        result = self.service.lookup("London")
        self.assertEqual(result.error_kind, ErrorKind.NOT_FOUND)
        self.assertEqual(result.error_message, "City not found: London")

    def test_cache_hit_is_case_insensitive(self):
        first = self.service.lookup("london")
        second = self.service.lookup("  London ")

        self.assertFalse(first.cached)
        self.assertTrue(second.cached)
        self.assertEqual(second.current, first.current)
        self.assertEqual(self.provider.calls["current"], 1)
        self.assertEqual(self.provider.calls["geocoding"], 1)

    def test_expired_entry_triggers_new_fetch(self):
        self.service.lookup("London")
        self.timer.now = 1801
        result = self.service.lookup("London")
        self.assertFalse(result.cached)
        self.assertEqual(self.provider.calls["current"], 2)

    def test_error_results_are_not_cached(self):
        self.provider.current_error = _http_error(503)
        self.assertFalse(self.service.lookup("London").is_valid)
        self.provider.current_error = None
        result = self.service.lookup("London")
        self.assertTrue(result.is_valid)
        self.assertFalse(result.cached)
        self.assertEqual(self.provider.calls["current"], 2)

    def test_concurrent_misses_for_same_city_both_fetch(self):
        barrier = threading.Barrier(2, timeout=5)
        self.provider.current_hook = barrier.wait
        results = []

        def worker():
            results.append(self.service.lookup("London"))

        threads = [threading.Thread(target=worker) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(self.provider.calls["current"], 2)
        self.assertTrue(all(r.is_valid for r in results))
        self.assertTrue(self.service.lookup("London").cached)

    def test_works_without_cache(self):
        service = WeatherLookupService(self.provider.source())
        service.lookup("London")
        service.lookup("London")
        self.assertEqual(self.provider.calls["current"], 2)


if __name__ == "__main__":
    unittest.main()
