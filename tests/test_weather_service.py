# tests/test_weather_service.py
import random
import unittest
from datetime import datetime
from unittest.mock import patch

import httpx

from config.settings import settings
from wardrobe_project.services import weather_service

OPENWEATHER_PAYLOAD = {
    "weather": [{"main": "Rain", "description": "light rain"}],
    "main": {"temp": 12.6, "feels_like": 10.2, "humidity": 81, "pressure": 1009},
    "wind": {"speed": 5.0},
}


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestRealWeather(unittest.IsolatedAsyncioTestCase):

    async def test_parses_openweathermap_payload(self):
        seen = {}

        def handler(request):
            seen.update(request.url.params)
            return httpx.Response(200, json=OPENWEATHER_PAYLOAD)

        with patch.object(settings, "OPENWEATHER_API_KEY", "test-key"):
            async with _client(handler) as client:
                weather = await weather_service.get_real_weather(31.2, 121.5, client=client)

        self.assertEqual(seen["appid"], "test-key")
        self.assertEqual(seen["units"], "metric")
        self.assertEqual(seen["lat"], "31.2")
        self.assertEqual(weather.temperature, 13)
        self.assertEqual(weather.condition, "Rainy")
        self.assertEqual(weather.description, "light rain, feels like 10°C")
        self.assertEqual(weather.humidity, 81)
        self.assertEqual(weather.wind_speed, 18)
        self.assertEqual(weather.pressure, 1009)
        self.assertEqual(weather.source, "openweathermap")

    async def test_missing_api_key(self):
        with patch.object(settings, "OPENWEATHER_API_KEY", None):
            with self.assertRaises(weather_service.WeatherServiceError):
                await weather_service.get_real_weather(0, 0)

    async def test_http_error(self):
        with patch.object(settings, "OPENWEATHER_API_KEY", "test-key"):
            async with _client(lambda request: httpx.Response(401, json={"message": "bad key"})) as client:
                with self.assertRaises(weather_service.WeatherServiceError):
                    await weather_service.get_real_weather(0, 0, client=client)

    async def test_bad_payload(self):
        with patch.object(settings, "OPENWEATHER_API_KEY", "test-key"):
            async with _client(lambda request: httpx.Response(200, json={"weather": []})) as client:
                with self.assertRaises(weather_service.WeatherServiceError):
                    await weather_service.get_real_weather(0, 0, client=client)

    async def test_non_json_reply(self):
        with patch.object(settings, "OPENWEATHER_API_KEY", "test-key"):
            async with _client(lambda request: httpx.Response(200, text="<html>gateway</html>")) as client:
                with self.assertRaises(weather_service.WeatherServiceError):
                    await weather_service.get_real_weather(0, 0, client=client)

    async def test_weather_info_falls_back_on_non_json_reply(self):
        with patch.object(settings, "OPENWEATHER_API_KEY", "test-key"):
            async with _client(lambda request: httpx.Response(200, text="<html>gateway</html>")) as client:
                weather = await weather_service.get_weather_info(30.0, 120.0, client=client)
        self.assertEqual(weather.source, "estimated")

    async def test_weather_info_falls_back_to_estimate(self):
        with patch.object(settings, "OPENWEATHER_API_KEY", None):
            weather = await weather_service.get_weather_info(30.0, 120.0)
        self.assertEqual(weather.source, "estimated")

    async def test_weather_info_without_location(self):
        weather = await weather_service.get_weather_info()
        self.assertEqual(weather.temperature, 22)
        self.assertEqual(weather.condition, "Sunny")
        self.assertEqual(weather.source, "default")


class TestEstimatedWeather(unittest.TestCase):

    def test_translate_condition(self):
        self.assertEqual(weather_service.translate_condition("Clear", "clear sky"), "Sunny")
        self.assertEqual(weather_service.translate_condition("Smoke", "smoke"), "smoke")
        self.assertEqual(weather_service.translate_condition("", ""), "Unknown")

    def test_summer_day_at_reference_latitude(self):
        weather = weather_service.generate_intelligent_weather(30.0, now=datetime(2024, 7, 1, 12), rng=random.Random(4))
        # 28 base, +3 daytime, noise within +-3
        self.assertGreaterEqual(weather.temperature, 28)
        self.assertLessEqual(weather.temperature, 34)
        self.assertIn(weather.condition, weather_service.SEASONAL_CONDITIONS["summer"])
        self.assertEqual(weather.source, "estimated")
        self.assertIn("12:00", weather.description)

    def test_winter_night_far_north_is_cold(self):
        weather = weather_service.generate_intelligent_weather(60.0, now=datetime(2024, 1, 10, 23), rng=random.Random(4))
        # 8 base, -9 for latitude, -2 at night
        self.assertLessEqual(weather.temperature, 0)
        self.assertIn(weather.condition, weather_service.SEASONAL_CONDITIONS["winter"])

    def test_estimate_is_reproducible_with_seed(self):
        now = datetime(2024, 10, 5, 8)
        first = weather_service.generate_intelligent_weather(45.0, now=now, rng=random.Random(9))
        second = weather_service.generate_intelligent_weather(45.0, now=now, rng=random.Random(9))
        self.assertEqual(first, second)


if __name__ == '__main__':
    unittest.main()
