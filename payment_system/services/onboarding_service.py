"""
ProviderOnboardingService - Stripe Connect onboarding for providers.

A provider can only be paid once a connected account exists and the provider
has finished Stripe's hosted onboarding flow.
"""

import logging

from django.db import transaction

from infrastructure.payments.interface import AccountLink, PaymentException, PaymentProviderInterface
from jobs.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

logger = logging.getLogger(__name__)


class ProviderOnboardingService(BaseService):
    def __init__(self, payment_provider: PaymentProviderInterface = None):
        super().__init__()
        self.payment_provider = payment_provider or self._get_default_provider()

    def _get_default_provider(self):
        from infrastructure.container import Container

        return Container.get_payment_provider()

    @BaseService.log_performance
    def get_onboarding_link(self, provider, refresh_url: str, return_url: str) -> ServiceResult[AccountLink]:
        """
        Return a Stripe onboarding link, creating the connected account on first use.

        Args:
            provider: User with the provider role
            refresh_url: Where Stripe sends the user when the link expires
            return_url: Where Stripe sends the user after onboarding

        Returns:
            ServiceResult with AccountLink, VALIDATION_ERROR for non-providers,
            PAYOUT_FAILURE when Stripe refuses
        """
        if not provider.is_provider():
            return service_err(ErrorCodes.VALIDATION_ERROR, "Only providers can set up payouts")

        try:
            account_id = provider.stripe_account_id
            if not account_id:
                account = self.payment_provider.create_connected_account(
                    email=provider.email, metadata={"user_id": str(provider.id)}
                )
                account_id = account.account_id
                with transaction.atomic():
                    type(provider).objects.filter(pk=provider.pk).update(stripe_account_id=account_id)
                provider.stripe_account_id = account_id
                self.logger.info(f"Created connected account for provider {provider.id}")

            link = self.payment_provider.create_account_link(account_id, refresh_url, return_url)
            return service_ok(link)

        except PaymentException as e:
            self.logger.error(f"Onboarding link failed for provider {provider.id}: {str(e)}")
            return service_err(ErrorCodes.PAYOUT_FAILURE, "Could not create an onboarding link")
