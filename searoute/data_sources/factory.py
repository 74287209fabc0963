"""Factory helpers for choosing a weather provider at startup."""

from __future__ import annotations

from searoute import config
from searoute.data_sources.base import CallableWeatherLookup, WeatherLookup
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/factory")


DEFAULT_SOURCE_NAME = "open_meteo"


def build_weather_lookup(settings: config.Settings | None = None) -> WeatherLookup:
    """Instantiate the configured weather provider."""
    settings = settings or config.settings
    source = (settings.weather_source or DEFAULT_SOURCE_NAME).lower()

    if source == "open_meteo":
        from . import open_meteo_client

        logger.info("Using Open-Meteo weather source")
        return CallableWeatherLookup(
            current=open_meteo_client.fetch_current_weather,
            forecast=open_meteo_client.fetch_forecast,
            name="open_meteo",
        )

    if source == "openweather":
        from . import openweather_client

        if not settings.openweather_api_key:
            raise ValueError("openweather_api_key must be set for the OpenWeatherMap source")
        api_key = settings.openweather_api_key
        logger.info("Using OpenWeatherMap weather source")
        return CallableWeatherLookup(
            current=lambda lat, lon: openweather_client.fetch_current_weather(lat, lon, api_key=api_key),
            forecast=lambda lat, lon, days=5: openweather_client.fetch_forecast(lat, lon, days=days, api_key=api_key),
            name="openweather",
        )

    raise ValueError(f"Unknown weather source '{source}'")
