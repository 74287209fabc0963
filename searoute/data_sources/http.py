"""Shared HTTP session for weather providers: response caching plus retries."""
from __future__ import annotations

import requests
import requests_cache
from retry_requests import retry

from searoute import config
from searoute.errors import WeatherLookupError
from utils.logging_utils import get_tagged_logger, mask_url_secrets

logger = get_tagged_logger(__name__, tag="data_sources/http")


def build_session(settings: config.Settings | None = None) -> requests.Session:
    """Create a cached, retrying session configured from settings."""
    settings = settings or config.settings
    cache_session = requests_cache.CachedSession(
        settings.http_cache_name,
        backend=settings.http_cache_backend,
        expire_after=settings.http_cache_ttl_seconds,
    )
    logger.info(
        "Using requests_cache and retry_requests",
        extra={"backend": settings.http_cache_backend, "retries": settings.http_retries},
    )
    return retry(cache_session, retries=settings.http_retries, backoff_factor=0.2)


def get_json(session, url: str, params: dict, *, provider: str, timeout: float | None = None) -> dict:
    """GET `url` and decode its JSON body, mapping every failure to WeatherLookupError."""
    timeout = timeout if timeout is not None else config.settings.http_timeout_seconds
    try:
        resp = session.get(url, params=params, timeout=timeout)
        resp.raise_for_status()
        return resp.json()
    except requests.RequestException as exc:
        logger.warning(
            "Weather request failed",
            extra={"provider": provider, "url": mask_url_secrets(url), "error": str(exc)},
        )
        raise WeatherLookupError(f"{provider} request failed: {exc}") from exc
    except ValueError as exc:
        logger.warning("Weather response was not JSON", extra={"provider": provider, "error": str(exc)})
        raise WeatherLookupError(f"{provider} returned an unreadable response") from exc
