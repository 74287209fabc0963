"""Shared protocol and key helper for route cache backends."""

from typing import Optional, Protocol

from searoute.domain import Coordinate, RouteRecommendation


def route_cache_key(start: Coordinate, end: Coordinate, precision: int = 2) -> str:
    """Key a route by its endpoints rounded to `precision` decimal places."""
    def fmt(point: Coordinate) -> str:
        return f"{point.latitude:.{precision}f},{point.longitude:.{precision}f}"

    return f"{fmt(start)}->{fmt(end)}"


class RouteCache(Protocol):
    """Protocol for route recommendation caches."""

    def get(self, key: str) -> Optional[RouteRecommendation]:
        """Return the cached route, or None if missing or expired."""

    def set(self, key: str, route: RouteRecommendation) -> None:
        """Store a route under `key` for the backend's TTL."""

    def delete(self, key: str) -> None:
        """Remove a cached route without raising if it is absent."""

    def clear(self) -> None:
        """Clear all cached routes."""
