"""Deterministic weather-risk scoring for route waypoints.

Each sampled point starts at 100 and loses points for wind, precipitation and
poor visibility. The route score is the mean of the clamped per-point scores,
rounded to the nearest integer.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence, Tuple

from searoute.domain import PrecipitationType, WaypointWeather, WeatherSample

MAX_SCORE = 100
MIN_SCORE = 0
NO_DATA_SCORE = 50

# (exclusive lower bound in m/s, penalty), checked from the top down
WIND_PENALTIES: Sequence[Tuple[float, int]] = (
    (20.0, 30),
    (15.0, 20),
    (10.0, 10),
)

PRECIPITATION_PENALTIES = {
    PrecipitationType.HAIL: 30,
    PrecipitationType.SNOW: 20,
    PrecipitationType.RAIN: 10,
}

# (exclusive upper bound in km, penalty), checked from the bottom up
VISIBILITY_PENALTIES: Sequence[Tuple[float, int]] = (
    (2.0, 25),
    (5.0, 15),
    (8.0, 5),
)


def _clamp_score(score: float) -> float:
    """Clamp a score to the 0-100 range."""
    return max(MIN_SCORE, min(MAX_SCORE, score))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def point_penalties(sample: WeatherSample) -> List[Tuple[str, int]]:
    """Return the (reason, penalty) pairs that apply to one weather sample."""
    penalties: List[Tuple[str, int]] = []

    for threshold, penalty in WIND_PENALTIES:
        if sample.wind_speed > threshold:
            penalties.append((f"Wind {sample.wind_speed:.1f} m/s above {threshold:.0f} m/s", penalty))
            break

    precip_penalty = PRECIPITATION_PENALTIES.get(sample.precipitation_type)
    if precip_penalty:
        penalties.append((f"Precipitation: {sample.precipitation_type.value}", precip_penalty))

    for threshold, penalty in VISIBILITY_PENALTIES:
        if sample.visibility < threshold:
            penalties.append((f"Visibility {sample.visibility:.1f} km below {threshold:.0f} km", penalty))
            break

    return penalties


def score_point(sample: WeatherSample) -> float:
    """Score a single sample on the 0-100 scale."""
    return _clamp_score(MAX_SCORE - sum(penalty for _reason, penalty in point_penalties(sample)))


def calculate_safety_score(weather_on_route: Iterable[WaypointWeather | WeatherSample]) -> int:
    """Average per-point scores into the route's integer safety score."""
    scores = []
    for item in weather_on_route:
        sample = item.weather if isinstance(item, WaypointWeather) else item
        scores.append(score_point(sample))

    if not scores:
        return NO_DATA_SCORE

    return int(_clamp_score(_round_half_up(sum(scores) / len(scores))))
