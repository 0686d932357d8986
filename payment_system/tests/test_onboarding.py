"""
Provider onboarding and payout history tests.
"""

from unittest.mock import MagicMock

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from infrastructure.payments.interface import (
    AccountLink,
    ConnectedAccount,
    PaymentException,
    PaymentProviderInterface,
)
from jobs.services import ErrorCodes
from jobs.tests.factories import CustomerFactory, PayoutTransferFactory, ProviderFactory
from payment_system.services import ProviderOnboardingService

REFRESH_URL = "https://app.snowpall.test/payouts/refresh"
RETURN_URL = "https://app.snowpall.test/payouts/done"


class ProviderOnboardingServiceTest(TestCase):
    def setUp(self):
        self.mock_provider = MagicMock(spec=PaymentProviderInterface)
        self.mock_provider.create_connected_account.return_value = ConnectedAccount(account_id="acct_new")
        self.mock_provider.create_account_link.return_value = AccountLink(
            url="https://connect.stripe.test/setup/abc", expires_at=1705309200
        )
        self.service = ProviderOnboardingService(payment_provider=self.mock_provider)

    def test_first_link_creates_account(self):
        provider = ProviderFactory(stripe_account_id=None)

        result = self.service.get_onboarding_link(provider, REFRESH_URL, RETURN_URL)

        self.assertTrue(result.ok)
        self.assertEqual(result.value.url, "https://connect.stripe.test/setup/abc")
        provider.refresh_from_db()
        self.assertEqual(provider.stripe_account_id, "acct_new")
        self.mock_provider.create_connected_account.assert_called_once_with(
            email=provider.email, metadata={"user_id": str(provider.id)}
        )
        self.mock_provider.create_account_link.assert_called_once_with("acct_new", REFRESH_URL, RETURN_URL)

    def test_existing_account_is_reused(self):
        provider = ProviderFactory(stripe_account_id="acct_existing")

        self.service.get_onboarding_link(provider, REFRESH_URL, RETURN_URL)
        self.service.get_onboarding_link(provider, REFRESH_URL, RETURN_URL)

        self.mock_provider.create_connected_account.assert_not_called()
        self.assertEqual(self.mock_provider.create_account_link.call_count, 2)

    def test_customer_cannot_onboard(self):
        result = self.service.get_onboarding_link(CustomerFactory(), REFRESH_URL, RETURN_URL)

        self.assertEqual(result.error, ErrorCodes.VALIDATION_ERROR)
        self.mock_provider.create_connected_account.assert_not_called()

    def test_stripe_refusal(self):
        self.mock_provider.create_connected_account.side_effect = PaymentException("Account creation failed")
        provider = ProviderFactory(stripe_account_id=None)

        result = self.service.get_onboarding_link(provider, REFRESH_URL, RETURN_URL)

        self.assertEqual(result.error, ErrorCodes.PAYOUT_FAILURE)
        provider.refresh_from_db()
        self.assertIsNone(provider.stripe_account_id)


class PayoutApiTest(TestCase):
    def setUp(self):
        self.mock_provider = MagicMock(spec=PaymentProviderInterface)
        self.mock_provider.create_account_link.return_value = AccountLink(url="https://connect.stripe.test/s/1")
        container.configure_for_testing(payment=self.mock_provider)

        self.provider = ProviderFactory()
        self.client = APIClient()
        self.client.force_authenticate(user=self.provider)

    def tearDown(self):
        container.reset()

    def test_onboarding_link(self):
        response = self.client.post(
            reverse("payment_system:onboarding-link"),
            {"refresh_url": REFRESH_URL, "return_url": RETURN_URL},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"url": "https://connect.stripe.test/s/1", "expires_at": None})

    def test_onboarding_link_requires_urls(self):
        response = self.client.post(reverse("payment_system:onboarding-link"), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_onboarding_failure_is_bad_gateway(self):
        self.mock_provider.create_account_link.side_effect = PaymentException("Account link failed")

        response = self.client.post(
            reverse("payment_system:onboarding-link"),
            {"refresh_url": REFRESH_URL, "return_url": RETURN_URL},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)

    def test_payout_history_is_scoped_to_provider(self):
        mine = PayoutTransferFactory(provider=self.provider)
        PayoutTransferFactory()

        response = self.client.get(reverse("payment_system:payout-history"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row["request_id"] for row in response.data], [mine.idempotency_key])
        self.assertEqual(response.data[0]["amount_cents"], 1320)

    def test_customer_is_forbidden(self):
        self.client.force_authenticate(user=CustomerFactory())

        response = self.client.get(reverse("payment_system:payout-history"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
