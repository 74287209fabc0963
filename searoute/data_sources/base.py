"""Interfaces and helpers for weather lookup sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Protocol

from searoute.domain import Coordinate, WeatherSample


class WeatherLookup(Protocol):
    """Interface for anything that can report weather at a coordinate.

    Implementations may raise on failure; callers decide how to recover.
    """

    def get_current_weather(self, coordinate: Coordinate) -> WeatherSample:
        """Return the current weather observation at `coordinate`."""
        ...

    def get_forecast(self, coordinate: Coordinate, days: int = 5) -> List[WeatherSample]:
        """Return forecast samples covering the next `days` days."""
        ...


@dataclass
class CallableWeatherLookup(WeatherLookup):
    """Wrap two (latitude, longitude, **kwargs) callables so providers can be swapped."""

    current: Callable[..., WeatherSample]
    forecast: Callable[..., List[WeatherSample]]
    name: str = "callable"

    def get_current_weather(self, coordinate: Coordinate) -> WeatherSample:
        """Delegate to the configured current-weather callable."""
        return self.current(coordinate.latitude, coordinate.longitude)

    def get_forecast(self, coordinate: Coordinate, days: int = 5) -> List[WeatherSample]:
        """Delegate to the configured forecast callable."""
        return self.forecast(coordinate.latitude, coordinate.longitude, days=days)
