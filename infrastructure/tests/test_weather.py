"""
Weather Infrastructure Tests
============================

Unit tests for the AccuWeather provider and weather factory.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import requests
from django.test import TestCase, override_settings

from infrastructure.weather import (
    AccuWeatherProvider,
    WeatherException,
    WeatherFactory,
    WeatherProviderInterface,
    WeatherSnapshot,
)
from infrastructure.weather.accuweather_provider import (
    normalize_precipitation_intensity,
    normalize_precipitation_type,
)


def json_response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


LOCATIONS = [{"Key": "349727", "LocalizedName": "New York"}]


@override_settings(ACCUWEATHER_API_KEY="test-weather-key", ACCUWEATHER_BASE_URL="https://weather.test")
class AccuWeatherProviderTest(TestCase):
    def setUp(self):
        self.session = MagicMock(spec=requests.Session)
        self.provider = AccuWeatherProvider(session=self.session)

    def test_current_conditions_snow(self):
        self.session.get.side_effect = [
            json_response(LOCATIONS),
            json_response(
                [
                    {
                        "Temperature": {"Value": 28, "Unit": "F"},
                        "PrecipitationType": "Snow",
                        "PrecipitationIntensity": "Heavy",
                    }
                ]
            ),
        ]

        snapshot = self.provider.current_conditions("10001")

        self.assertIsInstance(snapshot, WeatherSnapshot)
        self.assertEqual(snapshot.temperature, Decimal("28"))
        self.assertEqual(snapshot.precipitation_type, "Snow")
        self.assertEqual(snapshot.precipitation_intensity, "heavy")

        location_call, forecast_call = self.session.get.call_args_list
        self.assertEqual(location_call.args[0], "https://weather.test/locations/v1/postalcodes/search")
        self.assertEqual(location_call.kwargs["params"]["q"], "10001")
        self.assertEqual(location_call.kwargs["params"]["apikey"], "test-weather-key")
        self.assertEqual(forecast_call.args[0], "https://weather.test/forecasts/v1/hourly/12hour/349727")
        self.assertIsNotNone(forecast_call.kwargs["timeout"])

    def test_current_conditions_converts_celsius(self):
        self.session.get.side_effect = [
            json_response(LOCATIONS),
            json_response([{"Temperature": {"Value": -5, "Unit": "C"}}]),
        ]

        snapshot = self.provider.current_conditions("10001")

        self.assertEqual(snapshot.temperature, Decimal("23"))
        self.assertIsNone(snapshot.precipitation_type)
        self.assertIsNone(snapshot.precipitation_intensity)

    def test_unknown_postal_code(self):
        self.session.get.return_value = json_response([])

        with self.assertRaises(WeatherException):
            self.provider.current_conditions("00000")

    def test_http_error_raises_weather_exception(self):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("503 Service Unavailable")
        self.session.get.return_value = response

        with self.assertRaises(WeatherException):
            self.provider.current_conditions("10001")

    def test_timeout_raises_weather_exception(self):
        self.session.get.side_effect = requests.Timeout("read timed out")

        with self.assertRaises(WeatherException):
            self.provider.current_conditions("10001")

    def test_missing_temperature(self):
        self.session.get.side_effect = [json_response(LOCATIONS), json_response([{"PrecipitationType": "Snow"}])]

        with self.assertRaises(WeatherException):
            self.provider.current_conditions("10001")


class NormalizationTest(TestCase):
    def test_precipitation_type_is_canonical(self):
        self.assertEqual(normalize_precipitation_type("snow"), "Snow")
        self.assertEqual(normalize_precipitation_type(" SNOW "), "Snow")
        self.assertEqual(normalize_precipitation_type("Ice"), "Ice")
        self.assertIsNone(normalize_precipitation_type(None))
        self.assertIsNone(normalize_precipitation_type(""))

    def test_precipitation_intensity_is_lowercase(self):
        self.assertEqual(normalize_precipitation_intensity("Moderate"), "moderate")
        self.assertIsNone(normalize_precipitation_intensity(None))


class WeatherSnapshotTest(TestCase):
    def test_to_dict_is_json_friendly(self):
        snapshot = WeatherSnapshot(Decimal("30.5"), "Snow", "moderate")

        data = snapshot.to_dict()

        self.assertEqual(data["temperature"], "30.5")
        self.assertEqual(data["precipitation_type"], "Snow")
        self.assertIsInstance(data["observed_at"], str)


class WeatherFactoryTest(TestCase):
    def test_interface_is_abstract(self):
        with self.assertRaises(TypeError):
            WeatherProviderInterface()

    def test_create_accuweather(self):
        self.assertIsInstance(WeatherFactory.create(), AccuWeatherProvider)

    def test_create_invalid_backend(self):
        with self.assertRaises(ValueError):
            WeatherFactory.create("open-meteo")
