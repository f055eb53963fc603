import unittest

from weather_lookup.air_quality import classify_aqi, extract_air_quality
from weather_lookup.data_sources.schemas import AirPollutionPayload


class TestClassifyAqi(unittest.TestCase):
    def test_category_boundaries(self):
        cases = [
            (0, "Good", "#00E400"),
            (50, "Good", "#00E400"),
            (51, "Moderate", "#FFFF00"),
            (100, "Moderate", "#FFFF00"),
            (101, "Unhealthy for Sensitive Groups", "#FF7E00"),
            (150, "Unhealthy for Sensitive Groups", "#FF7E00"),
            (151, "Unhealthy", "#FF0000"),
            (200, "Unhealthy", "#FF0000"),
            (201, "Very Unhealthy", "#8F3F97"),
            (300, "Very Unhealthy", "#8F3F97"),
            (301, "Hazardous", "#7E0023"),
            (999, "Hazardous", "#7E0023"),
        ]
        for index, category, color in cases:
            with self.subTest(index=index):
                self.assertEqual(classify_aqi(index), (category, color))


class TestExtractAirQuality(unittest.TestCase):
    def test_uses_first_entry(self):
        payload = AirPollutionPayload.model_validate(
            {
                "list": [
                    {"main": {"aqi": 3}, "components": {"pm2_5": 12.5, "o3": None}},
                    {"main": {"aqi": 5}, "components": {}},
                ]
            }
        )
        aq = extract_air_quality(payload)
        self.assertEqual(aq.index, 3)
        self.assertEqual(aq.category, "Good")
        self.assertEqual(aq.components, {"pm2_5": 12.5})

    def test_missing_index_gives_none(self):
        for raw in ({}, {"list": []}, {"list": [{}]}, {"list": [{"main": {}}]}, {"list": [{"main": {"aqi": "x"}}]}):
            with self.subTest(raw=raw):
                self.assertIsNone(extract_air_quality(AirPollutionPayload.model_validate(raw)))
        self.assertIsNone(extract_air_quality(None))


if __name__ == "__main__":
    unittest.main()
