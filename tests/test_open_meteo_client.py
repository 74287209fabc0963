import datetime as dt
import unittest

import requests

from searoute.data_sources import open_meteo_client
from searoute.domain import PrecipitationType
from searoute.errors import WeatherLookupError

from helpers import DummyResp, FakeSession


def _make_weather_payload():
    return {
        "current": {
            "time": "2025-06-01T12:00",
            "temperature_2m": 18.5,
            "relative_humidity_2m": 70.0,
            "wind_speed_10m": 7.2,
            "wind_direction_10m": 225.0,
            "cloud_cover": 40.0,
            "pressure_msl": 1009.3,
            "weather_code": 61,
            "visibility": 24140.0,
        },
        "current_units": {
            "time": "iso8601",
            "temperature_2m": "°C",
            "relative_humidity_2m": "%",
            "wind_speed_10m": "m/s",
            "wind_direction_10m": "°",
            "cloud_cover": "%",
            "pressure_msl": "hPa",
            "weather_code": "wmo code",
            "visibility": "m",
        },
        "hourly": {
            "time": ["2025-06-01T12:00", "2025-06-01T13:00"],
            "temperature_2m": [18.5, 19.0],
            "relative_humidity_2m": [70.0, 68.0],
            "wind_speed_10m": [7.2, 12.4],
            "wind_direction_10m": [225.0, 230.0],
            "cloud_cover": [40.0, 90.0],
            "pressure_msl": [1009.3, 1008.1],
            "weather_code": [61, 95],
            "visibility": [24140.0, 3000.0],
        },
        "hourly_units": {
            "temperature_2m": "°C",
            "wind_speed_10m": "m/s",
        },
    }


class TestOpenMeteoClient(unittest.TestCase):
    def setUp(self):
        self._orig_session = open_meteo_client.session

    def tearDown(self):
        open_meteo_client.session = self._orig_session

    def _use(self, resp):
        fake = FakeSession(resp)
        open_meteo_client.session = fake
        return fake

    def test_fetch_current_weather(self):
        fake = self._use(DummyResp(_make_weather_payload()))

        sample = open_meteo_client.fetch_current_weather(35.1, 129.0)
        self.assertEqual(sample.temperature, 18.5)
        self.assertEqual(sample.wind_speed, 7.2)
        self.assertEqual(sample.wind_direction, 225.0)
        self.assertEqual(sample.precipitation_type, PrecipitationType.RAIN)
        self.assertAlmostEqual(sample.visibility, 24.14)
        self.assertEqual(sample.source, "open_meteo")
        self.assertEqual(sample.timestamp, dt.datetime(2025, 6, 1, 12, tzinfo=dt.timezone.utc))

        url, params, _ = fake.requests[0]
        self.assertTrue(url.endswith("/forecast"))
        self.assertEqual(params["latitude"], 35.1)
        self.assertEqual(params["wind_speed_unit"], "ms")
        self.assertEqual(params["timezone"], "UTC")
        self.assertIn("pressure_msl", params["current"])

    def test_fetch_forecast(self):
        fake = self._use(DummyResp(_make_weather_payload()))

        hours = open_meteo_client.fetch_forecast(0, 0, days=2)
        self.assertEqual(len(hours), 2)
        self.assertEqual(hours[1].wind_speed, 12.4)
        self.assertEqual(hours[1].precipitation_type, PrecipitationType.HAIL)
        self.assertAlmostEqual(hours[1].visibility, 3.0)
        self.assertEqual(fake.requests[0][1]["forecast_days"], 2)

    def test_missing_visibility_defaults_to_ten_km(self):
        payload = _make_weather_payload()
        del payload["current"]["visibility"]
        self._use(DummyResp(payload))
        self.assertEqual(open_meteo_client.fetch_current_weather(0, 0).visibility, 10.0)

    def test_missing_current_block(self):
        self._use(DummyResp({"latitude": 0}))
        with self.assertRaises(WeatherLookupError):
            open_meteo_client.fetch_current_weather(0, 0)

    def test_malformed_current_block(self):
        payload = _make_weather_payload()
        del payload["current"]["temperature_2m"]
        self._use(DummyResp(payload))
        with self.assertRaises(WeatherLookupError):
            open_meteo_client.fetch_current_weather(0, 0)

    def test_http_error_maps_to_lookup_error(self):
        self._use(DummyResp({}, status_error=requests.HTTPError("503 Service Unavailable")))
        with self.assertRaises(WeatherLookupError):
            open_meteo_client.fetch_current_weather(0, 0)

    def test_non_json_body_maps_to_lookup_error(self):
        self._use(DummyResp(ValueError("Expecting value")))
        with self.assertRaises(WeatherLookupError):
            open_meteo_client.fetch_forecast(0, 0)

    def test_unexpected_units_are_logged(self):
        payload = _make_weather_payload()
        payload["current_units"]["wind_speed_10m"] = "km/h"
        self._use(DummyResp(payload))
        with self.assertLogs("searoute.data_sources.open_meteo_client", level="WARNING") as logs:
            open_meteo_client.fetch_current_weather(0, 0)
        self.assertTrue(any("Unexpected Open-Meteo unit" in line for line in logs.output))


class TestWeatherCodes(unittest.TestCase):
    def test_mapping(self):
        f = open_meteo_client.precipitation_from_weather_code
        self.assertEqual(f(None), PrecipitationType.NONE)
        self.assertEqual(f(0), PrecipitationType.NONE)
        self.assertEqual(f(3), PrecipitationType.NONE)
        self.assertEqual(f(53), PrecipitationType.RAIN)
        self.assertEqual(f(81), PrecipitationType.RAIN)
        self.assertEqual(f(75), PrecipitationType.SNOW)
        self.assertEqual(f(99), PrecipitationType.HAIL)


if __name__ == "__main__":
    unittest.main()
