from payment_system.services.onboarding_service import ProviderOnboardingService
from payment_system.services.payout_service import PayoutService


__all__ = ["PayoutService", "ProviderOnboardingService"]
