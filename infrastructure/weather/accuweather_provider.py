"""
AccuWeather Provider
====================

Resolves a postal code to an AccuWeather location key and reads the first hour
of the 12-hour hourly forecast.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional

import requests
from django.conf import settings

from .interface import WeatherException, WeatherProviderInterface, WeatherSnapshot

logger = logging.getLogger(__name__)

PRECIPITATION_TYPES = {"snow": "Snow", "rain": "Rain", "ice": "Ice", "mixed": "Mixed"}


def normalize_precipitation_type(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return PRECIPITATION_TYPES.get(value.strip().lower(), value.strip())


def normalize_precipitation_intensity(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return value.strip().lower()


class AccuWeatherProvider(WeatherProviderInterface):
    """
    AccuWeather implementation.

    Configuration (in settings.py):
        ACCUWEATHER_API_KEY: API key
        ACCUWEATHER_BASE_URL: API root (defaults to the public dataservice host)
        WEATHER_TIMEOUT_SECONDS: Timeout applied to every HTTP call
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self.api_key = getattr(settings, "ACCUWEATHER_API_KEY", "")
        self.base_url = getattr(settings, "ACCUWEATHER_BASE_URL", "https://dataservice.accuweather.com").rstrip("/")
        self.timeout = getattr(settings, "WEATHER_TIMEOUT_SECONDS", 10)
        self.session = session or requests.Session()

        if not self.api_key:
            logger.warning("ACCUWEATHER_API_KEY not configured")

    def _get(self, path: str, **params):
        params["apikey"] = self.api_key
        try:
            response = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.error(f"AccuWeather request to {path} failed: {str(e)}")
            raise WeatherException(f"Weather lookup failed: {str(e)}") from e
        except ValueError as e:
            raise WeatherException("Weather service returned an invalid payload") from e

    def location_key(self, zip_code: str) -> str:
        locations = self._get("/locations/v1/postalcodes/search", q=zip_code)
        if not locations:
            raise WeatherException(f"No weather location found for postal code {zip_code}")
        return locations[0]["Key"]

    def current_conditions(self, zip_code: str) -> WeatherSnapshot:
        key = self.location_key(zip_code)
        forecast = self._get(f"/forecasts/v1/hourly/12hour/{key}", details="true")
        if not forecast:
            raise WeatherException(f"Empty forecast for location {key}")

        hour = forecast[0]
        try:
            temperature = Decimal(str(hour["Temperature"]["Value"]))
        except (KeyError, TypeError, InvalidOperation) as e:
            raise WeatherException("Forecast is missing a temperature") from e

        unit = hour["Temperature"].get("Unit", "F")
        if unit == "C":
            temperature = temperature * Decimal("9") / Decimal("5") + Decimal("32")

        snapshot = WeatherSnapshot(
            temperature=temperature,
            precipitation_type=normalize_precipitation_type(hour.get("PrecipitationType")),
            precipitation_intensity=normalize_precipitation_intensity(hour.get("PrecipitationIntensity")),
            observed_at=datetime.now(timezone.utc),
        )
        logger.info(f"Weather for {zip_code}: {snapshot.precipitation_type} {snapshot.temperature}F")
        return snapshot
