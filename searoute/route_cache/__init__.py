"""Route cache backends."""

from .base import RouteCache, route_cache_key
from .memory import InMemoryRouteCache
from .redis import RedisRouteCache

__all__ = [
    "RouteCache",
    "route_cache_key",
    "InMemoryRouteCache",
    "RedisRouteCache",
]
