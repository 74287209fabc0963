"""Domain vocabulary and strict schemas for weather-scored routes.

This module defines the value types that flow between the weather providers,
the route planner and the HTTP layer: coordinates, weather samples, the
per-waypoint pairing of the two, and the final route recommendation. All of
them are frozen once built. No scoring or geometry lives here.
"""

from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Sequence, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from searoute.errors import InvalidCoordinateError

LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)


class _FrozenModel(BaseModel):
    """Base model with strict extra handling and immutability."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)


def _finite_number(field: str, value: Any) -> float:
    if value is None:
        raise InvalidCoordinateError(field, None)
    if isinstance(value, bool):
        raise InvalidCoordinateError(field, value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidCoordinateError(field, value) from None
    if not math.isfinite(number):
        raise InvalidCoordinateError(field, value)
    return number


def _check_bound(field: str, value: Any, bounds: Tuple[float, float]) -> float:
    """Return `value` as float or raise naming the violated bound."""
    number = _finite_number(field, value)
    lower, upper = bounds
    if number < lower:
        raise InvalidCoordinateError(field, number, "minimum", lower)
    if number > upper:
        raise InvalidCoordinateError(field, number, "maximum", upper)
    return number


def validate_coordinate(latitude: Any, longitude: Any) -> Tuple[float, float]:
    """Check a latitude/longitude pair, raising InvalidCoordinateError on the first bad value."""
    return (
        _check_bound("latitude", latitude, LATITUDE_RANGE),
        _check_bound("longitude", longitude, LONGITUDE_RANGE),
    )


class Coordinate(_FrozenModel):
    """A point on the globe in decimal degrees, with optional altitude in meters."""
    latitude: float = Field(validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(validation_alias=AliasChoices("longitude", "lon", "lng"))
    altitude: float | None = None

    @model_validator(mode="after")
    def _within_range(self) -> "Coordinate":
        validate_coordinate(self.latitude, self.longitude)
        return self


def _first_present(data: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def as_coordinate(value: Any) -> Coordinate:
    """
    Coerce a Coordinate, mapping, or (lat, lon[, alt]) sequence into a Coordinate.

    Bounds and altitude are checked before the model is built so callers get an
    InvalidCoordinateError rather than a pydantic ValidationError.
    """
    if isinstance(value, Coordinate):
        return value
    if isinstance(value, Mapping):
        lat = _first_present(value, ("latitude", "lat"))
        lon = _first_present(value, ("longitude", "lon", "lng"))
        altitude = value.get("altitude")
    elif isinstance(value, (tuple, list)) and len(value) in (2, 3):
        lat, lon = value[0], value[1]
        altitude = value[2] if len(value) == 3 else None
    else:
        raise TypeError(f"Cannot interpret {type(value).__name__} as a coordinate")
    lat, lon = validate_coordinate(lat, lon)
    if altitude is not None:
        altitude = _finite_number("altitude", altitude)
    return Coordinate(latitude=lat, longitude=lon, altitude=altitude)


class PrecipitationType(str, Enum):
    """Kind of precipitation falling at a point."""
    NONE = "none"
    RAIN = "rain"
    SNOW = "snow"
    HAIL = "hail"


class WeatherSample(_FrozenModel):
    """Current conditions at a single point, in metric units."""
    temperature: float  # °C
    wind_direction: float = Field(ge=0.0, le=360.0)  # degrees
    wind_speed: float = Field(ge=0.0)  # m/s
    cloud_density: float = Field(ge=0.0, le=100.0)  # percent
    precipitation_type: PrecipitationType = PrecipitationType.NONE
    pressure: float  # hPa
    humidity: float = Field(ge=0.0, le=100.0)  # percent
    visibility: float = Field(ge=0.0)  # km
    timestamp: datetime
    source: str | None = None


class WaypointWeather(_FrozenModel):
    """Weather sampled at one point of a route, with the time it was sampled."""
    point: Coordinate
    weather: WeatherSample
    timestamp: datetime
    is_fallback: bool = False


class RouteRecommendation(_FrozenModel):
    """Route between two points with its weather along the way and the derived scores."""
    start_point: Coordinate
    end_point: Coordinate
    waypoints: Tuple[Coordinate, ...] = ()
    distance: float = Field(ge=0.0)  # km
    estimated_travel_time: float = Field(ge=0.0)  # minutes
    safety_score: int = Field(ge=0, le=100)
    weather_conditions_on_route: Tuple[WaypointWeather, ...] = ()

    @property
    def path(self) -> Tuple[Coordinate, ...]:
        """Start, intermediate waypoints and end, in travel order."""
        return (self.start_point, *self.waypoints, self.end_point)
