"""HTTP API for weather-scored route recommendations."""

import hmac
from typing import List

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from pydantic import BaseModel

from .config import settings
from .data_sources import build_weather_lookup
from .domain import Coordinate, RouteRecommendation, WeatherSample
from .errors import InvalidCoordinateError, RouteComputationError, RouteTimeoutError, WeatherLookupError
from .geo_math import compass_point
from .position import LastKnownPosition
from .route_service import build_route_service
from .safety_scoring import point_penalties, score_point
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="searoute/api")


def require_api_key(x_api_key: str | None = Header(default=None)):
    """Validate the X-API-Key header against the configured api_key, if any."""
    if not settings.api_key:
        return

    if not x_api_key:
        logger.debug("No API key provided")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")

    if not hmac.compare_digest(str(x_api_key), str(settings.api_key)):
        logger.debug("Invalid API key provided")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


router = APIRouter(dependencies=[Depends(require_api_key)])
WEATHER_LOOKUP = build_weather_lookup(settings)
ROUTE_SERVICE = build_route_service(WEATHER_LOOKUP, settings)
POSITION = LastKnownPosition()


class RouteRequest(BaseModel):
    """Incoming route request payload."""
    start: Coordinate
    end: Coordinate
    use_cache: bool = True


class WaypointScore(BaseModel):
    """Per-point explanation of the safety score."""
    point: Coordinate
    score: float
    penalties: List[str]
    wind_direction_label: str
    is_fallback: bool


class RouteResponse(BaseModel):
    """Route recommendation plus the data a map view needs to draw it."""
    route: RouteRecommendation
    path: List[Coordinate]
    waypoint_scores: List[WaypointScore]


def _explain(route: RouteRecommendation) -> List[WaypointScore]:
    """Break the route score down per sampled point."""
    return [
        WaypointScore(
            point=w.point,
            score=score_point(w.weather),
            penalties=[f"{reason} (-{penalty})" for reason, penalty in point_penalties(w.weather)],
            wind_direction_label=compass_point(w.weather.wind_direction),
            is_fallback=w.is_fallback,
        )
        for w in route.weather_conditions_on_route
    ]


@router.post("/route", response_model=RouteResponse)
def recommend_route(req: RouteRequest):
    """Plan a route between two points and score it against current weather."""
    try:
        route = ROUTE_SERVICE.recommend(req.start, req.end, use_cache=req.use_cache)
    except InvalidCoordinateError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except RouteTimeoutError as exc:
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(exc))
    except RouteComputationError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))

    return RouteResponse(route=route, path=list(route.path), waypoint_scores=_explain(route))


@router.get("/weather", response_model=WeatherSample)
def current_weather(
    latitude: float = Query(ge=-90, le=90),
    longitude: float = Query(ge=-180, le=180),
):
    """Return current weather at a point from the configured provider."""
    try:
        return WEATHER_LOOKUP.get_current_weather(Coordinate(latitude=latitude, longitude=longitude))
    except WeatherLookupError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@router.get("/weather/forecast", response_model=List[WeatherSample])
def weather_forecast(
    latitude: float = Query(ge=-90, le=90),
    longitude: float = Query(ge=-180, le=180),
    days: int = Query(default=5, ge=1, le=16),
):
    """Return forecast samples at a point from the configured provider."""
    try:
        return WEATHER_LOOKUP.get_forecast(Coordinate(latitude=latitude, longitude=longitude), days=days)
    except WeatherLookupError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@router.put("/position", response_model=Coordinate)
def update_position(position: Coordinate):
    """Record the device's latest position."""
    return POSITION.update(position)


@router.get("/position", response_model=Coordinate)
def last_position():
    """Return the last recorded position."""
    position = POSITION.get()
    if position is None:
        raise HTTPException(status_code=404, detail="No position recorded yet")
    return position
