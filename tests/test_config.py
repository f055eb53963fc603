import os
import unittest

from pydantic import ValidationError

from weather_lookup.config import Settings


class TestConfig(unittest.TestCase):
    def _with_env(self, name, value):
        previous = os.environ.get(name)
        os.environ[name] = value

        def restore():
            if previous is None:
                os.environ.pop(name, None)
            else:
                os.environ[name] = previous

        self.addCleanup(restore)

    def test_settings_defaults(self):
        previous = os.environ.pop("WEATHER_CACHE_TTL_SECONDS", None)
        try:
            s = Settings()
            self.assertEqual(s.cache_ttl_seconds, 1800)
            self.assertEqual(s.cache_max_size, 100)
            self.assertEqual(s.units, "metric")
            self.assertEqual(s.geocode_limit, 5)
            self.assertEqual((s.connect_timeout_seconds, s.read_timeout_seconds), (10.0, 30.0))
        finally:
            if previous is not None:
                os.environ["WEATHER_CACHE_TTL_SECONDS"] = previous

    def test_settings_env_override(self):
        self._with_env("WEATHER_BASE_URL", "http://example.com/data/2.5/")
        self._with_env("WEATHER_UNITS", " Imperial ")
        s = Settings()
        self.assertEqual(s.base_url, "http://example.com/data/2.5")
        self.assertEqual(s.units, "imperial")

    def test_geocode_limit_is_bounded(self):
        self._with_env("WEATHER_GEOCODE_LIMIT", "10")
        with self.assertRaises(ValidationError):
            Settings()


if __name__ == "__main__":
    unittest.main()
