"""
Weather Provider Factory
========================
"""

import logging
from typing import Literal

from django.conf import settings

from .accuweather_provider import AccuWeatherProvider
from .interface import WeatherProviderInterface

logger = logging.getLogger(__name__)

WeatherBackend = Literal["accuweather"]


class WeatherFactory:
    """Factory for creating weather provider instances."""

    @staticmethod
    def create(backend: WeatherBackend | None = None) -> WeatherProviderInterface:
        """
        Create a weather provider instance.

        Args:
            backend: Weather backend type; defaults to settings.INFRASTRUCTURE["WEATHER_PROVIDER"]

        Raises:
            ValueError: If backend type is invalid
        """
        infrastructure = getattr(settings, "INFRASTRUCTURE", {})
        backend_type = backend or infrastructure.get("WEATHER_PROVIDER", "accuweather")

        logger.info(f"Creating weather provider: {backend_type}")

        if backend_type == "accuweather":
            return AccuWeatherProvider()
        raise ValueError(f"Invalid weather provider: {backend_type}")
