"""Caller-side facade over the route planner: cache lookup plus a deadline."""
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Any, Optional

import redis

from searoute.config import Settings, settings as default_settings
from searoute.domain import RouteRecommendation, as_coordinate
from searoute.errors import RouteTimeoutError
from searoute.route_cache import InMemoryRouteCache, RedisRouteCache, RouteCache, route_cache_key
from searoute.route_planner import RoutePlanner
from utils.logging_utils import get_tagged_logger, mask_url_secrets

logger = get_tagged_logger(__name__, tag="route_service")


def build_route_cache(settings: Settings | None = None) -> RouteCache:
    """Initialize the route cache backend based on configuration."""
    settings = settings or default_settings
    if settings.route_cache_redis_url:
        try:
            client = redis.Redis.from_url(settings.route_cache_redis_url)
            client.ping()
            logger.info("Using RedisRouteCache", extra={"redis_url": mask_url_secrets(settings.route_cache_redis_url)})
            return RedisRouteCache(client, ttl_seconds=settings.route_cache_ttl_seconds)
        except (redis.RedisError, ValueError) as exc:
            logger.warning("Falling back to InMemoryRouteCache (Redis unavailable)", extra={"error": str(exc)})
    return InMemoryRouteCache(ttl_seconds=settings.route_cache_ttl_seconds)


class RouteService:
    """Serve route recommendations, reusing cached ones for nearby endpoints.

    The planner itself has no deadline; this wrapper is where the caller's
    timeout lives. A timed-out computation that is still queued is cancelled;
    one already running is abandoned. Routes that used fallback weather are
    returned but not cached.
    """

    def __init__(
        self,
        planner: RoutePlanner,
        cache: Optional[RouteCache] = None,
        *,
        cache_precision: int = 2,
        timeout_seconds: float | None = None,
    ) -> None:
        self.planner = planner
        self.cache = cache
        self.cache_precision = cache_precision
        self.timeout_seconds = timeout_seconds
        self._executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="route-request")

    def recommend(self, start: Any, end: Any, *, use_cache: bool = True) -> RouteRecommendation:
        """Return a cached or freshly computed route from `start` to `end`."""
        start_point = as_coordinate(start)
        end_point = as_coordinate(end)
        key = route_cache_key(start_point, end_point, self.cache_precision)

        if use_cache and self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Route cache hit", extra={"key": key})
                return cached

        route = self._compute(start_point, end_point)
        fallback_points = sum(1 for w in route.weather_conditions_on_route if w.is_fallback)
        if fallback_points:
            # outage data is served once, never pinned for the cache TTL
            logger.info(
                "Not caching route with %d fallback point(s)", fallback_points, extra={"key": key}
            )
        elif self.cache is not None:
            self.cache.set(key, route)
        return route

    def _compute(self, start, end) -> RouteRecommendation:
        if self.timeout_seconds is None:
            return self.planner.recommend_route(start, end)
        future = self._executor.submit(self.planner.recommend_route, start, end)
        try:
            return future.result(timeout=self.timeout_seconds)
        except FutureTimeoutError:
            # drops the job if it is still queued; a running planner is left to finish
            future.cancel()
            logger.error("Route computation timed out", extra={"timeout_seconds": self.timeout_seconds})
            raise RouteTimeoutError(f"Route computation exceeded {self.timeout_seconds:g}s") from None

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)


def build_route_service(weather_lookup, settings: Settings | None = None) -> RouteService:
    """Wire planner and cache together from settings."""
    settings = settings or default_settings
    return RouteService(
        RoutePlanner.from_settings(weather_lookup, settings),
        build_route_cache(settings),
        cache_precision=settings.route_cache_precision,
        timeout_seconds=settings.route_timeout_seconds,
    )
