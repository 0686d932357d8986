"""
Weather Abstraction Layer
=========================

Supplies the WeatherSnapshot used to price snow removal jobs.
"""

from .accuweather_provider import AccuWeatherProvider
from .factory import WeatherFactory
from .interface import WeatherException, WeatherProviderInterface, WeatherSnapshot

__all__ = [
    "WeatherProviderInterface",
    "WeatherSnapshot",
    "WeatherException",
    "AccuWeatherProvider",
    "WeatherFactory",
]
