"""
PricingService - Job Price Calculations

Prices a snow removal job from the weather at submission time and the job
size, and totals a priced cart with tax. All calculations use Decimal and are
deterministic: the same inputs always produce the same price.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Optional

from django.conf import settings

from infrastructure.weather import WeatherSnapshot
from jobs.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

logger = logging.getLogger(__name__)

BASE_PRICE = Decimal("15.00")
FREEZING_POINT_F = Decimal("32")
CENTS = Decimal("0.01")

SNOW_INTENSITY_MULTIPLIERS = {
    "moderate": Decimal("1.3"),
    "heavy": Decimal("1.5"),
}

JOB_SIZE_MULTIPLIERS = {
    "small": Decimal("1.0"),
    "medium": Decimal("1.2"),
    "large": Decimal("1.5"),
    "x-large": Decimal("2.0"),
}


class PricingService(BaseService):
    """
    Service for pricing jobs and carts.

    Responsibilities:
    - Price a single job from weather + size
    - Total a cart (subtotal, tax, amount to charge in cents)

    All methods are stateless (pure functions) for easy testing.
    """

    def __init__(self):
        """Initialize PricingService."""
        super().__init__()
        self.tax_rates = getattr(settings, "TAX_RATES", {"default": Decimal("0.10")})

    def weather_multiplier(
        self, temperature, precipitation_type: Optional[str], precipitation_intensity: Optional[str]
    ) -> Decimal:
        # Only snow at or below freezing raises the price.
        if precipitation_type != "Snow" or Decimal(str(temperature)) > FREEZING_POINT_F:
            return Decimal("1.0")
        return SNOW_INTENSITY_MULTIPLIERS.get(precipitation_intensity, Decimal("1.0"))

    def size_multiplier(self, job_size: Optional[str]) -> Decimal:
        return JOB_SIZE_MULTIPLIERS.get(job_size, Decimal("1.0"))

    def price(
        self,
        temperature,
        precipitation_type: Optional[str],
        precipitation_intensity: Optional[str],
        job_size: Optional[str],
    ) -> Decimal:
        """
        Price one job.

        Args:
            temperature: Degrees Fahrenheit (int, float, str or Decimal)
            precipitation_type: "Snow", "Rain", ... (case sensitive, canonical form)
            precipitation_intensity: "light", "moderate", "heavy"
            job_size: "small", "medium", "large", "x-large"; anything else counts as small

        Returns:
            Non-negative price rounded half-up to cents

        Example:
            >>> pricing_service.price(28, "Snow", "heavy", "large")
            Decimal('33.75')
        """
        multiplier = self.weather_multiplier(temperature, precipitation_type, precipitation_intensity)
        total = BASE_PRICE * multiplier * self.size_multiplier(job_size)
        return total.quantize(CENTS, rounding=ROUND_HALF_UP)

    def price_for_weather(self, weather: WeatherSnapshot, job_size: Optional[str]) -> Decimal:
        return self.price(
            weather.temperature,
            weather.precipitation_type,
            weather.precipitation_intensity,
            job_size,
        )

    @BaseService.log_performance
    def calculate_totals(self, prices: Iterable[Decimal], region: str = "default") -> ServiceResult[Dict]:
        """
        Total a set of item prices.

        Args:
            prices: Item prices (Decimal)
            region: Tax region key in settings.TAX_RATES

        Returns:
            ServiceResult with dict:
                - subtotal: Sum of item prices
                - tax: subtotal * tax rate
                - total: subtotal + tax
                - amount_cents: total in the smallest currency unit (int)
        """
        prices = [Decimal(str(p)) for p in prices]
        if any(p < 0 for p in prices):
            return service_err(ErrorCodes.VALIDATION_ERROR, "Item prices cannot be negative")

        tax_rate = self.tax_rates.get(region, self.tax_rates.get("default", Decimal("0.10")))
        subtotal = sum(prices, Decimal("0.00")).quantize(CENTS, rounding=ROUND_HALF_UP)
        tax = (subtotal * tax_rate).quantize(CENTS, rounding=ROUND_HALF_UP)
        total = subtotal + tax

        return service_ok(
            {
                "subtotal": subtotal,
                "tax": tax,
                "total": total,
                "amount_cents": int((total * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)),
            }
        )
