"""Weather providers behind the WeatherLookup interface."""

from .base import CallableWeatherLookup, WeatherLookup
from .factory import build_weather_lookup

__all__ = [
    "build_weather_lookup",
    "CallableWeatherLookup",
    "WeatherLookup",
]
