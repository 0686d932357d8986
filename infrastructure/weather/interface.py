"""
Weather Provider Interface
==========================

Abstract contract for fetching the weather conditions a job is priced with.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class WeatherSnapshot:
    """
    Weather conditions frozen at pricing time.

    Attributes:
        temperature: Temperature in degrees Fahrenheit
        precipitation_type: Canonical type ("Snow", "Rain", "Ice", "Mixed") or None
        precipitation_intensity: Canonical intensity ("light", "moderate", "heavy") or None
        observed_at: When the conditions were observed
    """

    temperature: Decimal
    precipitation_type: Optional[str] = None
    precipitation_intensity: Optional[str] = None
    observed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "temperature": str(self.temperature),
            "precipitation_type": self.precipitation_type,
            "precipitation_intensity": self.precipitation_intensity,
            "observed_at": self.observed_at.isoformat(),
        }


class WeatherProviderInterface(ABC):
    """
    Abstract interface for weather lookups.

    Concrete implementations:
        - AccuWeatherProvider: AccuWeather hourly forecast API
    """

    @abstractmethod
    def current_conditions(self, zip_code: str) -> WeatherSnapshot:
        """
        Get the conditions for the next hour at a postal code.

        Raises:
            WeatherException: If the conditions cannot be determined
        """
        pass


class WeatherException(Exception):
    """Base exception for weather lookups."""

    pass
