import threading
from datetime import datetime, timezone

from searoute.domain import PrecipitationType, WeatherSample
from searoute.errors import WeatherLookupError

SEOUL = {"lat": 37.5665, "lon": 126.978}
BUSAN = {"lat": 35.1796, "lon": 129.0756}


def make_sample(**overrides) -> WeatherSample:
    base = {
        "temperature": 18.0,
        "wind_direction": 90.0,
        "wind_speed": 0.0,
        "cloud_density": 10.0,
        "precipitation_type": PrecipitationType.NONE,
        "pressure": 1015.0,
        "humidity": 55.0,
        "visibility": 10.0,
        "timestamp": datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc),
        "source": "stub",
    }
    base.update(overrides)
    return WeatherSample(**base)


class StubLookup:
    """WeatherLookup double that records calls and can fail on demand."""

    def __init__(self, sample=None, fail=False, fail_when=None):
        self.sample = sample or make_sample()
        self.fail = fail
        self.fail_when = fail_when
        self.calls = []
        self.forecast_calls = []
        self._lock = threading.Lock()

    def get_current_weather(self, coordinate):
        with self._lock:
            self.calls.append(coordinate)
        if self.fail or (self.fail_when and self.fail_when(coordinate)):
            raise WeatherLookupError("provider down")
        return self.sample

    def get_forecast(self, coordinate, days=5):
        with self._lock:
            self.forecast_calls.append((coordinate, days))
        if self.fail:
            raise WeatherLookupError("provider down")
        return [self.sample] * days


class DummyResp:
    def __init__(self, payload, status_error=None):
        self._payload = payload
        self._status_error = status_error

    def raise_for_status(self):
        if self._status_error:
            raise self._status_error

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Stands in for the provider session and records every GET."""

    def __init__(self, resp):
        self.resp = resp
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params, timeout))
        return self.resp
