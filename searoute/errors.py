"""Error taxonomy for route planning."""

from __future__ import annotations


class SearouteError(RuntimeError):
    """Base error for the searoute package."""


class InvalidCoordinateError(SearouteError, ValueError):
    """A coordinate is missing, non-finite, or outside its valid range."""

    def __init__(self, field: str, value, bound: str | None = None, limit: float | None = None) -> None:
        self.field = field
        self.value = value
        self.bound = bound
        self.limit = limit
        if bound == "minimum":
            message = f"{field} {value} is below the minimum of {limit:g}"
        elif bound == "maximum":
            message = f"{field} {value} is above the maximum of {limit:g}"
        elif value is None:
            message = f"{field} is required"
        else:
            message = f"{field} {value!r} is not a finite number"
        super().__init__(message)


class WeatherLookupError(SearouteError):
    """A weather provider could not return a usable sample."""


class RouteComputationError(SearouteError):
    """Unexpected failure while computing a route; the request is aborted."""


class RouteTimeoutError(SearouteError):
    """The caller's deadline elapsed before the route was computed."""
