"""In-memory route cache with TTL, intended for single-process deployments and tests."""

import threading
import time
from typing import Callable, Optional

from searoute.domain import RouteRecommendation
from searoute.route_cache.base import RouteCache

from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="route_cache/in_memory_route_cache")


class InMemoryRouteCache(RouteCache):
    """Thread-safe, TTL-aware in-memory route cache."""

    def __init__(self, ttl_seconds: int = 3600, time_func: Callable[[], float] = time.monotonic) -> None:
        """Initialize the cache with a TTL (seconds) and an injectable clock."""
        logger.debug("Initializing InMemoryRouteCache")
        self.ttl = ttl_seconds
        self._time = time_func
        self._entries: dict[str, tuple[float, RouteRecommendation]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[RouteRecommendation]:
        """Return the cached route, dropping it if expired."""
        with self._lock:
            entry = self._entries.get(key)
            if not entry:
                return None
            expires_at, route = entry
            if expires_at < self._time():
                self._entries.pop(key, None)
                return None
            return route

    def set(self, key: str, route: RouteRecommendation) -> None:
        with self._lock:
            self._entries[key] = (self._time() + self.ttl, route)

    def delete(self, key: str) -> None:
        """Remove a cached route if it exists."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Clear all cached routes."""
        with self._lock:
            self._entries.clear()
