# wardrobe_project/services/weather_service.py

import random
import logging
from datetime import datetime
from typing import Optional

import httpx

from config.settings import settings
from ..models.weather_models import WeatherInfo

logger = logging.getLogger(__name__)

CONDITION_LABELS = {
    "Clear": "Sunny",
    "Clouds": "Cloudy",
    "Rain": "Rainy",
    "Snow": "Snowy",
    "Thunderstorm": "Thunderstorm",
    "Drizzle": "Light rain",
    "Mist": "Mist",
    "Fog": "Fog",
    "Haze": "Haze",
    "Dust": "Dust",
    "Sand": "Dust",
    "Ash": "Volcanic ash",
    "Squall": "Squall",
    "Tornado": "Tornado",
}

# Summer is mostly clear, winter mostly overcast
SEASONAL_CONDITIONS = {
    "summer": ["Sunny", "Cloudy", "Sunny", "Cloudy"],
    "winter": ["Cloudy", "Overcast", "Sunny", "Haze"],
    "other": ["Sunny", "Cloudy", "Overcast", "Light rain"],
}


class WeatherServiceError(Exception):
    pass


def translate_condition(main: str, description: str) -> str:
    return CONDITION_LABELS.get(main) or description or "Unknown"


async def get_real_weather(
    latitude: float, longitude: float, client: Optional[httpx.AsyncClient] = None
) -> WeatherInfo:
    """Fetches current weather from OpenWeatherMap (metric units)."""
    if not settings.OPENWEATHER_API_KEY:
        raise WeatherServiceError("OPENWEATHER_API_KEY is not configured.")

    params = {
        "lat": latitude,
        "lon": longitude,
        "appid": settings.OPENWEATHER_API_KEY,
        "units": "metric",
    }
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=10.0) as own_client:
                response = await own_client.get(settings.OPENWEATHER_URL, params=params)
        else:
            response = await client.get(settings.OPENWEATHER_URL, params=params)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPError as e:
        raise WeatherServiceError(f"Weather API request failed: {e}") from e
    except ValueError as e:
        raise WeatherServiceError(f"Weather API returned invalid JSON: {e}") from e

    try:
        weather = data["weather"][0]
        main = data["main"]
        wind_speed = (data.get("wind") or {}).get("speed")
        return WeatherInfo(
            temperature=round(main["temp"]),
            condition=translate_condition(weather.get("main", ""), weather.get("description", "")),
            description=f"{weather.get('description', '')}, feels like {round(main['feels_like'])}°C",
            humidity=main.get("humidity"),
            wind_speed=round(wind_speed * 3.6) if wind_speed is not None else None,
            pressure=main.get("pressure"),
            source="openweathermap",
        )
    except (KeyError, IndexError, TypeError) as e:
        raise WeatherServiceError(f"Unexpected weather API payload: {e}") from e


def generate_intelligent_weather(
    latitude: float, now: Optional[datetime] = None, rng: Optional[random.Random] = None
) -> WeatherInfo:
    """
    Estimates plausible weather from the season, the time of day and the
    latitude. Used when the real weather API is unavailable.
    """
    now = now or datetime.now()
    rng = rng or random.Random()
    month, hour = now.month, now.hour

    if 6 <= month <= 8:
        season, base_temp = "summer", 28.0
    elif month >= 12 or month <= 2:
        season, base_temp = "winter", 8.0
    elif 3 <= month <= 5:
        season, base_temp = "other", 18.0
    else:
        season, base_temp = "other", 15.0

    # Colder away from 30 degrees latitude
    base_temp -= abs(latitude - 30) * 0.3
    base_temp += 3 if 6 <= hour <= 18 else -2

    temperature = round(base_temp + (rng.random() - 0.5) * 6)
    condition = rng.choice(SEASONAL_CONDITIONS[season])

    return WeatherInfo(
        temperature=temperature,
        condition=condition,
        description=f"Estimated from location and time of day, currently {hour}:00",
        humidity=round(40 + rng.random() * 40),
        wind_speed=round(rng.random() * 20),
        pressure=round(1000 + rng.random() * 50),
        source="estimated",
    )


def default_weather() -> WeatherInfo:
    return WeatherInfo(temperature=22, condition="Sunny", description="location unavailable", source="default")


async def get_weather_info(
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> WeatherInfo:
    """Real weather when possible, otherwise an estimate. Without coordinates returns a mild default."""
    if latitude is None or longitude is None:
        return default_weather()
    try:
        return await get_real_weather(latitude, longitude, client=client)
    except WeatherServiceError as e:
        logger.warning(f"Real weather unavailable, using estimate: {e}")
        return generate_intelligent_weather(latitude)
