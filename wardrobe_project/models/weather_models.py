# wardrobe_project/models/weather_models.py
from pydantic import BaseModel, Field
from typing import Optional


class WeatherInfo(BaseModel):
    temperature: float = Field(..., description="Temperature in degrees Celsius.", example=22)
    condition: str = Field(..., example="Sunny")
    description: str = Field("", example="clear sky, feels like 21°C")
    humidity: Optional[int] = Field(None, description="Relative humidity in percent.")
    wind_speed: Optional[int] = Field(None, description="Wind speed in km/h.")
    pressure: Optional[int] = Field(None, description="Pressure in hPa.")
    source: str = Field("default", description="'openweathermap', 'estimated' or 'default'.")

    def display(self) -> str:
        """Short form stored on outfits, e.g. '22°C Sunny'."""
        return f"{round(self.temperature)}°C {self.condition}"
