"""
Geodesy helpers used by the route planner and display code.

Distances use the haversine formula on a spherical Earth. Waypoint
interpolation is linear in latitude/longitude: it does not wrap across the
±180° meridian and distorts near the poles.
"""
from __future__ import annotations

import math
from typing import Tuple

from searoute.domain import Coordinate

EARTH_RADIUS_KM = 6371.0

COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


def deg_to_rad(deg: float) -> float:
    """Convert degrees to radians."""
    return deg * (math.pi / 180)


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in kilometers."""
    d_lat = deg_to_rad(b.latitude - a.latitude)
    d_lon = deg_to_rad(b.longitude - a.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(deg_to_rad(a.latitude)) * math.cos(deg_to_rad(b.latitude)) * math.sin(d_lon / 2) ** 2
    )
    # floating-point noise can push h a hair past 1 for antipodal points
    h = min(1.0, max(0.0, h))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def interpolate_waypoints(start: Coordinate, end: Coordinate, count: int) -> Tuple[Coordinate, ...]:
    """Return `count` points strictly between start and end at fractions i/(count+1)."""
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")

    waypoints = []
    for i in range(1, count + 1):
        fraction = i / (count + 1)
        waypoints.append(
            Coordinate(
                latitude=start.latitude + fraction * (end.latitude - start.latitude),
                longitude=start.longitude + fraction * (end.longitude - start.longitude),
            )
        )
    return tuple(waypoints)


def lat_lng_to_vector(lat: float, lng: float, radius: float) -> Tuple[float, float, float]:
    """Project a lat/lng onto a sphere of `radius` for 3D display (y is the polar axis)."""
    phi = deg_to_rad(90 - lat)
    theta = deg_to_rad(lng + 180)

    x = -radius * math.sin(phi) * math.cos(theta)
    y = radius * math.cos(phi)
    z = radius * math.sin(phi) * math.sin(theta)
    return x, y, z


def compass_point(degrees: float) -> str:
    """16-point compass label for a bearing, e.g. 180 -> "S"."""
    index = int(math.floor(degrees % 360 / 22.5 + 0.5)) % 16
    return COMPASS_POINTS[index]
