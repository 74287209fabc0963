"""Helpers for fetching current weather and forecasts from OpenWeatherMap."""
from __future__ import annotations

import datetime as dt
from typing import List, Optional

from searoute import config
from searoute.data_sources.http import build_session, get_json
from searoute.domain import PrecipitationType, WeatherSample
from searoute.errors import WeatherLookupError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="openweather_client")

session = build_session()

SOURCE_NAME = "openweather"
FORECAST_STEPS_PER_DAY = 8  # 3-hour steps
MAX_FORECAST_STEPS = 40  # the free 5-day forecast endpoint returns at most 40 steps
DEFAULT_VISIBILITY_KM = 10.0  # OpenWeatherMap caps visibility at 10 km and omits it at times


def precipitation_from_condition(condition_id: Optional[int]) -> PrecipitationType:
    """Map an OpenWeatherMap condition id onto a precipitation type.

    Thunderstorms (2xx) are treated as hail, drizzle and rain (3xx-5xx) as
    rain, 6xx as snow; anything else is dry.
    """
    if condition_id is None:
        return PrecipitationType.NONE
    if 200 <= condition_id < 300:
        return PrecipitationType.HAIL
    if 300 <= condition_id < 600:
        return PrecipitationType.RAIN
    if 600 <= condition_id < 700:
        return PrecipitationType.SNOW
    return PrecipitationType.NONE


def _resolve_api_key(api_key: str | None) -> str:
    key = api_key or config.settings.openweather_api_key
    if not key:
        raise WeatherLookupError("OpenWeatherMap API key is not configured (SEAROUTE_OPENWEATHER_API_KEY)")
    return key


def _sample_from_item(item: dict, *, timestamp: dt.datetime) -> WeatherSample:
    """Build a WeatherSample from one OpenWeatherMap weather/forecast item."""
    try:
        main = item["main"]
        wind = item.get("wind") or {}
        clouds = item.get("clouds") or {}
        conditions = item.get("weather") or [{}]
        visibility_m = item.get("visibility")

        return WeatherSample(
            temperature=main["temp"],
            wind_direction=wind.get("deg", 0.0),
            wind_speed=wind["speed"],
            cloud_density=clouds.get("all", 0.0),
            precipitation_type=precipitation_from_condition(conditions[0].get("id")),
            pressure=main["pressure"],
            humidity=main["humidity"],
            visibility=visibility_m / 1000 if visibility_m is not None else DEFAULT_VISIBILITY_KM,
            timestamp=timestamp,
            source=SOURCE_NAME,
        )
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        logger.warning("Malformed OpenWeatherMap payload", extra={"error": str(exc)})
        raise WeatherLookupError(f"Malformed OpenWeatherMap payload: {exc}") from exc


def fetch_current_weather(
    latitude: float,
    longitude: float,
    *,
    api_key: str | None = None,
    base_url: str | None = None,
) -> WeatherSample:
    """Fetch the current observation for the given coordinates."""
    params = {
        "lat": latitude,
        "lon": longitude,
        "appid": _resolve_api_key(api_key),
        "units": "metric",
    }
    url = f"{base_url or config.settings.openweather_base_url}/weather"
    data = get_json(session, url, params, provider=SOURCE_NAME)

    observed = data.get("dt")
    timestamp = (
        dt.datetime.fromtimestamp(observed, tz=dt.timezone.utc)
        if isinstance(observed, (int, float))
        else dt.datetime.now(dt.timezone.utc)
    )
    return _sample_from_item(data, timestamp=timestamp)


def fetch_forecast(
    latitude: float,
    longitude: float,
    *,
    days: int = 5,
    api_key: str | None = None,
    base_url: str | None = None,
) -> List[WeatherSample]:
    """Fetch up to `days` of 3-hourly forecast steps.

    The endpoint only covers five days, so longer requests are capped at
    MAX_FORECAST_STEPS and come back shorter than `days` asks for.
    """
    params = {
        "lat": latitude,
        "lon": longitude,
        "appid": _resolve_api_key(api_key),
        "units": "metric",
        "cnt": min(days * FORECAST_STEPS_PER_DAY, MAX_FORECAST_STEPS),
    }
    url = f"{base_url or config.settings.openweather_base_url}/forecast"
    data = get_json(session, url, params, provider=SOURCE_NAME)

    out: List[WeatherSample] = []
    for item in data.get("list") or []:
        try:
            timestamp = dt.datetime.fromtimestamp(item["dt"], tz=dt.timezone.utc)
        except (KeyError, TypeError) as exc:
            raise WeatherLookupError(f"Forecast step without a timestamp: {exc}") from exc
        out.append(_sample_from_item(item, timestamp=timestamp))
    logger.debug("Fetched OpenWeatherMap forecast", extra={"steps": len(out)})
    return out
