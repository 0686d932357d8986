"""
Dependency Injection Container
================================

Simple service locator pattern for managing infrastructure dependencies and
the domain services built on top of them.

Usage:
    from infrastructure.container import container

    ledger = container.request_ledger_service()
    payment = container.payment()
"""

import logging
from typing import Optional

from .payments import PaymentFactory, PaymentProviderInterface
from .storage import StorageFactory, StorageInterface
from .weather import WeatherFactory, WeatherProviderInterface

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Service container for infrastructure dependencies.

    Implements lazy initialization and caching of service instances.
    Singleton: every `ServiceContainer()` returns the same object.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize container (only once)."""
        if not self._initialized:
            self._reset_instances()
            self._initialized = True
            logger.info("Service container initialized")

    def _reset_instances(self):
        self._storage: Optional[StorageInterface] = None
        self._payment: Optional[PaymentProviderInterface] = None
        self._weather: Optional[WeatherProviderInterface] = None

        # Domain Services
        self._pricing_service = None
        self._cart_service = None
        self._notification_service = None
        self._address_service = None
        self._payout_service = None
        self._onboarding_service = None
        self._request_ledger_service = None

    def storage(self) -> StorageInterface:
        """Get upload store instance (cached)."""
        if self._storage is None:
            self._storage = StorageFactory.create()
            logger.debug(f"Created storage service: {type(self._storage).__name__}")
        return self._storage

    def payment(self, backend: Optional[str] = None) -> PaymentProviderInterface:
        """
        Get payment provider instance.

        Args:
            backend: Payment backend type ('stripe')
                    If None, uses configuration from settings

        Returns:
            PaymentProviderInterface implementation (cached)
        """
        if self._payment is None or backend is not None:
            self._payment = PaymentFactory.create(backend)
            logger.debug(f"Created payment service: {type(self._payment).__name__}")
        return self._payment

    def weather(self) -> WeatherProviderInterface:
        """Get weather provider instance (cached)."""
        if self._weather is None:
            self._weather = WeatherFactory.create()
            logger.debug(f"Created weather service: {type(self._weather).__name__}")
        return self._weather

    def pricing_service(self):
        """Get PricingService instance."""
        if self._pricing_service is None:
            from jobs.cart.domain.services import PricingService

            self._pricing_service = PricingService()
        return self._pricing_service

    def cart_service(self):
        """Get CartService instance."""
        if self._cart_service is None:
            from jobs.cart.domain.services import CartService

            self._cart_service = CartService(pricing_service=self.pricing_service(), weather_provider=self.weather())
            logger.debug("Created CartService")
        return self._cart_service

    def notification_service(self):
        if self._notification_service is None:
            from accounts.domain.services import NotificationService

            self._notification_service = NotificationService()
        return self._notification_service

    def address_service(self):
        if self._address_service is None:
            from accounts.domain.services import AddressService

            self._address_service = AddressService()
        return self._address_service

    def payout_service(self):
        """Get PayoutService instance."""
        if self._payout_service is None:
            from payment_system.services import PayoutService

            self._payout_service = PayoutService(payment_provider=self.payment())
            logger.debug("Created PayoutService")
        return self._payout_service

    def onboarding_service(self):
        if self._onboarding_service is None:
            from payment_system.services import ProviderOnboardingService

            self._onboarding_service = ProviderOnboardingService(payment_provider=self.payment())
        return self._onboarding_service

    def request_ledger_service(self):
        """Get RequestLedgerService instance."""
        if self._request_ledger_service is None:
            from jobs.ledger.domain.services import RequestLedgerService

            self._request_ledger_service = RequestLedgerService(
                cart_service=self.cart_service(),
                pricing_service=self.pricing_service(),
                payout_service=self.payout_service(),
                notification_service=self.notification_service(),
                address_service=self.address_service(),
                payment_provider=self.payment(),
                weather_provider=self.weather(),
            )
            logger.debug("Created RequestLedgerService")
        return self._request_ledger_service

    def reset(self):
        """
        Reset all cached service instances.

        Useful for testing or when switching between environments.
        """
        self._reset_instances()
        logger.info("Service container reset")

    def configure_for_testing(
        self,
        payment: Optional[PaymentProviderInterface] = None,
        weather: Optional[WeatherProviderInterface] = None,
        storage: Optional[StorageInterface] = None,
    ):
        """
        Reset the container and install test doubles for external providers.

        Services built afterwards are wired to the given doubles.
        """
        self._reset_instances()
        self._payment = payment
        self._weather = weather
        self._storage = storage
        logger.info("Service container configured for testing")


# Global singleton instance
container = ServiceContainer()


def get_payment_provider() -> PaymentProviderInterface:
    """Get payment provider from global container."""
    return container.payment()


# For class-based usage (static access pattern)
class Container:
    """Static access to container services."""

    @staticmethod
    def get_payment_provider() -> PaymentProviderInterface:
        return get_payment_provider()
