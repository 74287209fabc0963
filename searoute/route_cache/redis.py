"""Redis-backed route cache with TTL."""

from typing import Optional

import redis
from pydantic import ValidationError

from searoute.domain import RouteRecommendation
from searoute.route_cache.base import RouteCache
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="route_cache/redis_route_cache")


class RedisRouteCache(RouteCache):
    """Redis-backed route cache. Stores routes as pydantic JSON with SETEX."""

    def __init__(self, client, ttl_seconds: int = 3600, prefix: str = "route:") -> None:
        """Initialize with a Redis client, TTL, and key prefix."""
        logger.debug("Initializing RedisRouteCache")
        self.client = client
        self.ttl = ttl_seconds
        self.prefix = prefix

    def _key(self, key: str) -> str:
        """Return the Redis key for a cache key."""
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[RouteRecommendation]:
        """Fetch a cached route, or None if missing/unreadable."""
        try:
            raw = self.client.get(self._key(key))
        except redis.RedisError as exc:
            logger.error("Failed to read route from Redis: %s", exc)
            return None
        if not raw:
            return None
        try:
            return RouteRecommendation.model_validate_json(raw)
        except ValidationError as exc:
            logger.error("Discarding unreadable cached route: %s", exc)
            self.delete(key)
            return None

    def set(self, key: str, route: RouteRecommendation) -> None:
        """Store a route; write failures are logged, not raised."""
        try:
            self.client.setex(self._key(key), self.ttl, route.model_dump_json().encode("utf-8"))
        except redis.RedisError as exc:
            logger.error("Failed to write route to Redis: %s", exc)

    def delete(self, key: str) -> None:
        """Delete a cached route if present."""
        try:
            self.client.delete(self._key(key))
        except redis.RedisError as exc:
            logger.error("Failed to delete route from Redis: %s", exc)

    def clear(self) -> None:
        """Best-effort clear for all routes under the configured prefix."""
        try:
            for key in self.client.scan_iter(f"{self.prefix}*"):
                self.client.delete(key)
        except redis.RedisError as exc:
            logger.error("Failed to clear routes from Redis: %s", exc)
