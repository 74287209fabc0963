import datetime as dt
import unittest

import requests

from searoute.data_sources import openweather_client
from searoute.domain import PrecipitationType
from searoute.errors import WeatherLookupError

from helpers import DummyResp, FakeSession


def _make_item(**overrides):
    item = {
        "dt": 1748779200,  # 2025-06-01T12:00:00Z
        "main": {"temp": 21.3, "pressure": 1012, "humidity": 64},
        "wind": {"speed": 11.2, "deg": 310},
        "clouds": {"all": 75},
        "weather": [{"id": 501, "main": "Rain"}],
        "visibility": 6000,
    }
    item.update(overrides)
    return item


class TestOpenWeatherClient(unittest.TestCase):
    def setUp(self):
        self._orig_session = openweather_client.session

    def tearDown(self):
        openweather_client.session = self._orig_session

    def _use(self, resp):
        fake = FakeSession(resp)
        openweather_client.session = fake
        return fake

    def test_fetch_current_weather(self):
        fake = self._use(DummyResp(_make_item()))

        sample = openweather_client.fetch_current_weather(37.5, 127.0, api_key="k")
        self.assertEqual(sample.temperature, 21.3)
        self.assertEqual(sample.wind_speed, 11.2)
        self.assertEqual(sample.wind_direction, 310)
        self.assertEqual(sample.cloud_density, 75)
        self.assertEqual(sample.precipitation_type, PrecipitationType.RAIN)
        self.assertEqual(sample.visibility, 6.0)
        self.assertEqual(sample.source, "openweather")
        self.assertEqual(sample.timestamp, dt.datetime(2025, 6, 1, 12, tzinfo=dt.timezone.utc))

        url, params, _ = fake.requests[0]
        self.assertTrue(url.endswith("/weather"))
        self.assertEqual(params["appid"], "k")
        self.assertEqual(params["units"], "metric")

    def test_missing_visibility_defaults_to_ten_km(self):
        item = _make_item()
        del item["visibility"]
        self._use(DummyResp(item))
        self.assertEqual(openweather_client.fetch_current_weather(0, 0, api_key="k").visibility, 10.0)

    def test_fetch_forecast_requests_eight_steps_per_day(self):
        payload = {"list": [_make_item(), _make_item(dt=1748790000, weather=[{"id": 601}])]}
        fake = self._use(DummyResp(payload))

        steps = openweather_client.fetch_forecast(0, 0, days=3, api_key="k")
        self.assertEqual(fake.requests[0][1]["cnt"], 24)
        self.assertTrue(fake.requests[0][0].endswith("/forecast"))
        self.assertEqual(len(steps), 2)
        self.assertEqual(steps[1].precipitation_type, PrecipitationType.SNOW)

    def test_fetch_forecast_caps_steps_at_five_days(self):
        fake = self._use(DummyResp({"list": []}))

        openweather_client.fetch_forecast(0, 0, days=16, api_key="k")
        self.assertEqual(fake.requests[0][1]["cnt"], 40)

    def test_missing_api_key(self):
        fake = self._use(DummyResp(_make_item()))
        previous = openweather_client.config.settings.openweather_api_key
        openweather_client.config.settings.openweather_api_key = None
        try:
            with self.assertRaises(WeatherLookupError):
                openweather_client.fetch_current_weather(0, 0)
        finally:
            openweather_client.config.settings.openweather_api_key = previous
        self.assertEqual(fake.requests, [])

    def test_malformed_payload(self):
        self._use(DummyResp({"cod": 200, "wind": {"speed": 3}}))
        with self.assertRaises(WeatherLookupError):
            openweather_client.fetch_current_weather(0, 0, api_key="k")

    def test_http_error_maps_to_lookup_error(self):
        self._use(DummyResp({}, status_error=requests.HTTPError("401 Unauthorized")))
        with self.assertRaises(WeatherLookupError):
            openweather_client.fetch_current_weather(0, 0, api_key="bad")


class TestConditionCodes(unittest.TestCase):
    def test_mapping(self):
        f = openweather_client.precipitation_from_condition
        self.assertEqual(f(None), PrecipitationType.NONE)
        self.assertEqual(f(211), PrecipitationType.HAIL)
        self.assertEqual(f(300), PrecipitationType.RAIN)
        self.assertEqual(f(520), PrecipitationType.RAIN)
        self.assertEqual(f(622), PrecipitationType.SNOW)
        self.assertEqual(f(741), PrecipitationType.NONE)
        self.assertEqual(f(800), PrecipitationType.NONE)


if __name__ == "__main__":
    unittest.main()
