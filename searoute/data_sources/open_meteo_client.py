"""Helpers for fetching current and hourly weather from the Open-Meteo API."""
from __future__ import annotations

import datetime as dt
from typing import List, Optional

from searoute import config
from searoute.data_sources.http import build_session, get_json
from searoute.domain import PrecipitationType, WeatherSample
from searoute.errors import WeatherLookupError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="open_meteo_client")

session = build_session()

SOURCE_NAME = "open_meteo"

WEATHER_VARS = [
    "temperature_2m",
    "relative_humidity_2m",
    "wind_speed_10m",
    "wind_direction_10m",
    "cloud_cover",
    "pressure_msl",
    "weather_code",
    "visibility",
]

EXPECTED_UNITS = {
    "temperature_2m": "°C",
    "relative_humidity_2m": "%",
    "wind_speed_10m": "m/s",
    "wind_direction_10m": "°",
    "cloud_cover": "%",
    "pressure_msl": "hPa",
    "visibility": "m",
}

# Acceptable alternative spellings that should not trigger warnings.
ALLOWED_UNIT_SYNONYMS = {
    "relative_humidity_2m": {"%", "percent"},
    "wind_speed_10m": {"m/s", "ms"},
    "wind_direction_10m": {"°", "deg", "degrees"},
    "cloud_cover": {"%", "percent"},
    "visibility": {"m", "meters"},
}

DEFAULT_VISIBILITY_KM = 10.0

HAIL_CODES = {95, 96, 99}  # thunderstorm, with or without hail
SNOW_CODES = {71, 73, 75, 77, 85, 86}
RAIN_CODES = {51, 53, 55, 56, 57, 61, 63, 65, 66, 67, 80, 81, 82}


def precipitation_from_weather_code(code: Optional[int]) -> PrecipitationType:
    """Map a WMO weather interpretation code onto a precipitation type."""
    if code is None:
        return PrecipitationType.NONE
    code = int(code)
    if code in HAIL_CODES:
        return PrecipitationType.HAIL
    if code in SNOW_CODES:
        return PrecipitationType.SNOW
    if code in RAIN_CODES:
        return PrecipitationType.RAIN
    return PrecipitationType.NONE


def _iso_to_utc(s: str) -> dt.datetime:
    """Open-Meteo returns naive local times; we always request UTC."""
    return dt.datetime.fromisoformat(s).replace(tzinfo=dt.timezone.utc)


def _warn_on_unexpected_units(units: dict, *, context: str):
    """Log a warning if Open-Meteo returns units we did not request/expect."""
    if not units:
        return
    for field, expected in EXPECTED_UNITS.items():
        actual = units.get(field)
        if actual and actual != expected and actual not in ALLOWED_UNIT_SYNONYMS.get(field, set()):
            logger.warning(
                "Unexpected Open-Meteo unit",
                extra={"context": context, "field": field, "unit": actual, "expected": expected},
            )


def _sample(values: dict, *, timestamp: dt.datetime) -> WeatherSample:
    """Build a WeatherSample from one row of Open-Meteo values keyed by variable name."""
    try:
        visibility_m = values.get("visibility")
        return WeatherSample(
            temperature=values["temperature_2m"],
            wind_direction=values.get("wind_direction_10m") or 0.0,
            wind_speed=values["wind_speed_10m"],
            cloud_density=values.get("cloud_cover") or 0.0,
            precipitation_type=precipitation_from_weather_code(values.get("weather_code")),
            pressure=values["pressure_msl"],
            humidity=values["relative_humidity_2m"],
            visibility=visibility_m / 1000 if visibility_m is not None else DEFAULT_VISIBILITY_KM,
            timestamp=timestamp,
            source=SOURCE_NAME,
        )
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Malformed Open-Meteo payload", extra={"error": str(exc)})
        raise WeatherLookupError(f"Malformed Open-Meteo payload: {exc}") from exc


def _base_params(latitude: float, longitude: float) -> dict:
    return {
        "latitude": latitude,
        "longitude": longitude,
        "timezone": "UTC",
        "temperature_unit": "celsius",
        "wind_speed_unit": "ms",
        "precipitation_unit": "mm",
    }


def fetch_current_weather(latitude: float, longitude: float, *, base_url: str | None = None) -> WeatherSample:
    """Fetch the latest available weather observation for the given coordinates."""
    params = {**_base_params(latitude, longitude), "current": ",".join(WEATHER_VARS)}
    url = f"{base_url or config.settings.open_meteo_base_url}/forecast"
    data = get_json(session, url, params, provider=SOURCE_NAME)

    current = data.get("current")
    if not current:
        raise WeatherLookupError("Open-Meteo response has no current block")
    _warn_on_unexpected_units(data.get("current_units") or {}, context="weather_current")

    time = current.get("time")
    timestamp = _iso_to_utc(time) if time else dt.datetime.now(dt.timezone.utc)
    return _sample(current, timestamp=timestamp)


def fetch_forecast(
    latitude: float,
    longitude: float,
    *,
    days: int = 5,
    base_url: str | None = None,
) -> List[WeatherSample]:
    """Fetch up to `days` of hourly weather and return one sample per hour."""
    params = {
        **_base_params(latitude, longitude),
        "hourly": ",".join(WEATHER_VARS),
        "forecast_days": days,
    }
    url = f"{base_url or config.settings.open_meteo_base_url}/forecast"
    data = get_json(session, url, params, provider=SOURCE_NAME)

    hourly = data.get("hourly") or {}
    _warn_on_unexpected_units(data.get("hourly_units") or {}, context="weather_hourly")
    times = hourly.get("time") or []
    columns = {var: hourly.get(var) or [None] * len(times) for var in WEATHER_VARS}

    out: List[WeatherSample] = []
    for i, t in enumerate(times):
        row = {var: values[i] if i < len(values) else None for var, values in columns.items()}
        out.append(_sample(row, timestamp=_iso_to_utc(t)))
    logger.debug("Fetched Open-Meteo hourly forecast", extra={"hours": len(out)})
    return out
