"""Weather-scored route planning between two coordinates.

RoutePlanner builds a straight (lat/lon-linear) path, samples current weather
along it concurrently, and turns the samples into a safety score and a travel
time estimate. A failed weather lookup never fails the route: the point gets
the fallback sample instead. No timeout is applied here; callers that need a
deadline wrap recommend_route themselves (see route_service).
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Callable, List, Sequence

from searoute.data_sources.base import WeatherLookup
from searoute.domain import (
    Coordinate,
    PrecipitationType,
    RouteRecommendation,
    WaypointWeather,
    WeatherSample,
    as_coordinate,
)
from searoute.errors import InvalidCoordinateError, RouteComputationError
from searoute.geo_math import distance_km, interpolate_waypoints
from searoute.safety_scoring import calculate_safety_score
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="route_planner")

DEFAULT_WAYPOINT_COUNT = 5
DEFAULT_SPEED_KMH = 20.0
FALLBACK_SOURCE = "fallback"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def fallback_weather_sample(timestamp: datetime | None = None) -> WeatherSample:
    """Benign reading substituted when a live lookup fails."""
    return WeatherSample(
        temperature=20.0,
        wind_direction=180.0,
        wind_speed=5.0,
        cloud_density=30.0,
        precipitation_type=PrecipitationType.NONE,
        pressure=1013.0,
        humidity=60.0,
        visibility=10.0,
        timestamp=timestamp or _utcnow(),
        source=FALLBACK_SOURCE,
    )


def estimate_travel_time_minutes(distance: float, speed_kmh: float = DEFAULT_SPEED_KMH) -> float:
    """Minutes needed to cover `distance` km at a constant `speed_kmh`."""
    return max(0.0, distance * 60 / speed_kmh)


class RoutePlanner:
    """Plan a route and score it against the weather along the way."""

    def __init__(
        self,
        weather_lookup: WeatherLookup,
        *,
        waypoint_count: int = DEFAULT_WAYPOINT_COUNT,
        assumed_speed_kmh: float = DEFAULT_SPEED_KMH,
        sample_endpoints: bool = True,
        max_workers: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if waypoint_count < 0:
            raise ValueError("waypoint_count must be >= 0")
        if assumed_speed_kmh <= 0:
            raise ValueError("assumed_speed_kmh must be positive")
        self.weather_lookup = weather_lookup
        self.waypoint_count = waypoint_count
        self.assumed_speed_kmh = assumed_speed_kmh
        self.sample_endpoints = sample_endpoints
        self.max_workers = max_workers
        self._clock = clock or _utcnow

    @classmethod
    def from_settings(cls, weather_lookup: WeatherLookup, settings) -> "RoutePlanner":
        """Build a planner using the tuning values from a Settings object."""
        return cls(
            weather_lookup,
            waypoint_count=settings.waypoint_count,
            assumed_speed_kmh=settings.assumed_speed_kmh,
            sample_endpoints=settings.sample_endpoints,
            max_workers=settings.max_workers,
        )

    def recommend_route(self, start: Any, end: Any) -> RouteRecommendation:
        """
        Compute a RouteRecommendation from `start` to `end`.

        Raises InvalidCoordinateError before any lookup if either point is out
        of range, and RouteComputationError for unexpected failures in the
        geometry or scoring steps.
        """
        start_point = as_coordinate(start)
        end_point = as_coordinate(end)

        logger.info(
            "Planning route",
            extra={
                "start": (start_point.latitude, start_point.longitude),
                "end": (end_point.latitude, end_point.longitude),
                "waypoint_count": self.waypoint_count,
            },
        )

        try:
            distance = distance_km(start_point, end_point)
            waypoints = interpolate_waypoints(start_point, end_point, self.waypoint_count)
        except InvalidCoordinateError:
            raise
        except Exception as exc:
            logger.exception("Route geometry failed")
            raise RouteComputationError(f"Could not build route geometry: {exc}") from exc

        sample_points: Sequence[Coordinate] = (
            (start_point, *waypoints, end_point) if self.sample_endpoints else waypoints
        )
        weather_on_route = self.fetch_weather_for_points(sample_points)

        try:
            safety_score = calculate_safety_score(weather_on_route)
            travel_time = estimate_travel_time_minutes(distance, self.assumed_speed_kmh)
            recommendation = RouteRecommendation(
                start_point=start_point,
                end_point=end_point,
                waypoints=waypoints,
                distance=distance,
                estimated_travel_time=travel_time,
                safety_score=safety_score,
                weather_conditions_on_route=tuple(weather_on_route),
            )
        except Exception as exc:
            logger.exception("Route scoring failed")
            raise RouteComputationError(f"Could not score route: {exc}") from exc

        logger.info(
            "Computed route recommendation",
            extra={
                "distance_km": round(distance, 1),
                "travel_time_min": round(travel_time, 1),
                "safety_score": safety_score,
                "fallback_points": sum(1 for w in weather_on_route if w.is_fallback),
            },
        )
        return recommendation

    def fetch_weather_for_points(self, points: Sequence[Coordinate]) -> List[WaypointWeather]:
        """Look up weather for every point concurrently, keeping the input order."""
        if not points:
            return []
        workers = self.max_workers or len(points)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="weather-lookup") as pool:
            return list(pool.map(self._weather_for_point, points))

    def _weather_for_point(self, point: Coordinate) -> WaypointWeather:
        """Fetch one point's weather, substituting the fallback sample on any failure."""
        try:
            sample = self.weather_lookup.get_current_weather(point)
            return WaypointWeather(point=point, weather=sample, timestamp=self._clock())
        except Exception as exc:
            logger.warning(
                "Weather lookup failed for waypoint; using fallback sample",
                extra={"latitude": point.latitude, "longitude": point.longitude, "error": str(exc)},
            )
            sampled_at = self._clock()
            return WaypointWeather(
                point=point,
                weather=fallback_weather_sample(sampled_at),
                timestamp=sampled_at,
                is_fallback=True,
            )
