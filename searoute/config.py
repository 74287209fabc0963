"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the searoute service."""
    model_config = SettingsConfigDict(env_prefix="SEAROUTE_", extra="ignore")

    weather_source: str = "open_meteo"  # options: open_meteo, openweather
    openweather_api_key: str | None = None
    openweather_base_url: str = "https://api.openweathermap.org/data/2.5"
    open_meteo_base_url: str = "https://api.open-meteo.com/v1"
    http_timeout_seconds: float = 10.0
    http_retries: int = 3
    http_cache_name: str = ".cache"
    http_cache_backend: str = "sqlite"
    http_cache_ttl_seconds: int = 600
    waypoint_count: int = 5
    assumed_speed_kmh: float = 20.0
    sample_endpoints: bool = True
    max_workers: int | None = None
    route_timeout_seconds: float | None = 30.0
    route_cache_ttl_seconds: int = 3600
    route_cache_precision: int = 2
    route_cache_redis_url: str | None = None
    api_key: str | None = None
    log_level: str = "INFO"

    @field_validator("openweather_base_url", "open_meteo_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")

    @field_validator("assumed_speed_kmh", mode="after")
    @classmethod
    def positive_speed(cls, v: float) -> float:
        """Travel time divides by this, so it must be positive."""
        if v <= 0:
            raise ValueError("assumed_speed_kmh must be positive")
        return v

    @field_validator("waypoint_count", mode="after")
    @classmethod
    def non_negative_waypoints(cls, v: int) -> int:
        if v < 0:
            raise ValueError("waypoint_count must be >= 0")
        return v


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
