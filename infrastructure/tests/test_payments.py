"""
Payment Infrastructure Tests
==============================

Unit tests for payment provider abstraction layer.
"""

from unittest.mock import MagicMock, patch

import stripe
from django.test import TestCase, override_settings

from infrastructure.payments import (
    AccountLink,
    ChargeRecord,
    ConnectedAccount,
    PaymentDeclined,
    PaymentException,
    PaymentFactory,
    PaymentProviderInterface,
    PaymentStatus,
    PaymentTimeout,
    StripeProvider,
    TransferRecord,
)


def stripe_object(**fields):
    """MagicMock standing in for a StripeObject (attribute and .get access)."""
    obj = MagicMock()
    for key, value in fields.items():
        setattr(obj, key, value)
    obj.get.side_effect = lambda key, default=None: fields.get(key, default)
    return obj


class PaymentInterfaceTest(TestCase):
    """Test PaymentProviderInterface contract."""

    def test_interface_is_abstract(self):
        """PaymentProviderInterface should not be instantiable."""
        with self.assertRaises(TypeError):
            PaymentProviderInterface()


@override_settings(STRIPE_SECRET_KEY="sk_test_fake")
class StripeProviderTest(TestCase):
    """Test StripeProvider implementation."""

    def setUp(self):
        """Set up test fixtures."""
        self.provider = StripeProvider()
        self.charge = stripe_object(
            id="ch_test_123",
            amount=1650,
            currency="usd",
            status="succeeded",
            created=1700000000,
            metadata={"request_id": "req-1"},
        )

    @patch("stripe.Charge.create")
    def test_create_charge_success(self, mock_create):
        """Test successful charge creation."""
        mock_create.return_value = self.charge

        result = self.provider.create_charge(
            amount=1650,
            currency="USD",
            source_token="tok_visa",
            idempotency_key="submit-req-1",
            metadata={"request_id": "req-1"},
        )

        self.assertIsInstance(result, ChargeRecord)
        self.assertEqual(result.charge_id, "ch_test_123")
        self.assertEqual(result.amount, 1650)
        self.assertEqual(result.status, PaymentStatus.SUCCEEDED)
        self.assertEqual(result.metadata, {"request_id": "req-1"})

        kwargs = mock_create.call_args.kwargs
        self.assertEqual(kwargs["idempotency_key"], "submit-req-1")
        self.assertEqual(kwargs["currency"], "usd")
        self.assertEqual(kwargs["source"], "tok_visa")
        self.assertEqual(kwargs["transfer_group"], "req-1")

    @patch("stripe.Charge.create")
    def test_create_charge_card_error_is_declined(self, mock_create):
        """Card errors surface as PaymentDeclined without retrying."""
        mock_create.side_effect = stripe.CardError("Your card was declined.", "source", "card_declined")

        with self.assertRaises(PaymentDeclined):
            self.provider.create_charge(1650, "usd", "tok_chargeDeclined", "submit-req-1")
        self.assertEqual(mock_create.call_count, 1)

    @patch("time.sleep")
    @patch("stripe.Charge.create")
    def test_create_charge_connection_error_is_timeout(self, mock_create, mock_sleep):
        """Connection errors are retried, then reported as an unknown outcome."""
        mock_create.side_effect = stripe.APIConnectionError("Network unreachable")

        with self.assertRaises(PaymentTimeout):
            self.provider.create_charge(1650, "usd", "tok_visa", "submit-req-1")
        self.assertEqual(mock_create.call_count, 3)

    @patch("time.sleep")
    @patch("stripe.Charge.create")
    def test_create_charge_retries_rate_limit_with_same_key(self, mock_create, mock_sleep):
        mock_create.side_effect = [stripe.RateLimitError("Too many requests"), self.charge]

        result = self.provider.create_charge(1650, "usd", "tok_visa", "submit-req-1")

        self.assertEqual(result.charge_id, "ch_test_123")
        self.assertEqual(mock_create.call_count, 2)
        keys = {call.kwargs["idempotency_key"] for call in mock_create.call_args_list}
        self.assertEqual(keys, {"submit-req-1"})

    @patch("stripe.Charge.create")
    def test_create_charge_other_stripe_error(self, mock_create):
        mock_create.side_effect = stripe.AuthenticationError("Invalid API key")

        with self.assertRaises(PaymentException) as ctx:
            self.provider.create_charge(1650, "usd", "tok_visa", "submit-req-1")
        self.assertNotIsInstance(ctx.exception, PaymentDeclined)

    @patch("stripe.Charge.search")
    def test_find_charge_found(self, mock_search):
        mock_search.return_value = stripe_object(data=[self.charge])

        result = self.provider.find_charge("req-1")

        self.assertEqual(result.charge_id, "ch_test_123")
        self.assertIn("req-1", mock_search.call_args.kwargs["query"])

    @patch("stripe.Charge.search")
    def test_find_charge_missing(self, mock_search):
        mock_search.return_value = stripe_object(data=[])

        self.assertIsNone(self.provider.find_charge("req-1"))

    @patch("stripe.Transfer.create")
    def test_create_transfer_success(self, mock_create):
        """Test successful transfer creation."""
        mock_create.return_value = stripe_object(
            id="tr_test_123",
            amount=1320,
            currency="usd",
            destination="acct_123",
            transfer_group="req-1",
            created=1700000100,
        )

        result = self.provider.create_transfer(
            amount=1320,
            currency="usd",
            destination_account="acct_123",
            idempotency_key="payout-req-1",
            transfer_group="req-1",
        )

        self.assertIsInstance(result, TransferRecord)
        self.assertEqual(result.transfer_id, "tr_test_123")
        self.assertEqual(result.transfer_group, "req-1")
        kwargs = mock_create.call_args.kwargs
        self.assertEqual(kwargs["destination"], "acct_123")
        self.assertEqual(kwargs["idempotency_key"], "payout-req-1")

    @patch("stripe.Transfer.create")
    def test_create_transfer_stripe_error(self, mock_create):
        mock_create.side_effect = stripe.InvalidRequestError("No such destination", "destination")

        with self.assertRaises(PaymentException) as ctx:
            self.provider.create_transfer(1320, "usd", "acct_missing", "payout-req-1")
        self.assertNotIsInstance(ctx.exception, PaymentTimeout)

    @patch("time.sleep")
    @patch("stripe.Transfer.create")
    def test_create_transfer_connection_error_is_timeout(self, mock_create, mock_sleep):
        mock_create.side_effect = stripe.APIConnectionError("Read timed out")

        with self.assertRaises(PaymentTimeout):
            self.provider.create_transfer(1320, "usd", "acct_123", "payout-req-1")

    @patch("stripe.Transfer.list")
    def test_find_transfer(self, mock_list):
        mock_list.return_value = stripe_object(
            data=[stripe_object(id="tr_1", amount=1320, currency="usd", destination="acct_123", transfer_group="g")]
        )

        result = self.provider.find_transfer("g")

        self.assertEqual(result.transfer_id, "tr_1")
        mock_list.assert_called_once_with(transfer_group="g", limit=1)

    @patch("stripe.Account.create")
    def test_create_connected_account(self, mock_create):
        mock_create.return_value = stripe_object(id="acct_new", details_submitted=False, payouts_enabled=False)

        result = self.provider.create_connected_account("plow@example.com", {"user_id": "u1"})

        self.assertIsInstance(result, ConnectedAccount)
        self.assertEqual(result.account_id, "acct_new")
        self.assertFalse(result.payouts_enabled)

    @patch("stripe.AccountLink.create")
    def test_create_account_link(self, mock_create):
        mock_create.return_value = stripe_object(url="https://connect.stripe.com/setup/abc", expires_at=1700000300)

        result = self.provider.create_account_link("acct_new", "https://app/refresh", "https://app/return")

        self.assertIsInstance(result, AccountLink)
        self.assertIn("connect.stripe.com", result.url)
        self.assertEqual(mock_create.call_args.kwargs["type"], "account_onboarding")

    def test_map_stripe_status(self):
        """Test Stripe status mapping."""
        self.assertEqual(self.provider._map_stripe_status("succeeded"), PaymentStatus.SUCCEEDED)
        self.assertEqual(self.provider._map_stripe_status("failed"), PaymentStatus.FAILED)
        self.assertEqual(self.provider._map_stripe_status("unknown"), PaymentStatus.PENDING)


class PaymentFactoryTest(TestCase):
    """Test PaymentFactory."""

    @override_settings(INFRASTRUCTURE={"PAYMENT_PROVIDER": "stripe"})
    def test_create_stripe_provider(self):
        """Test factory creates Stripe provider from settings."""
        provider = PaymentFactory.create()
        self.assertIsInstance(provider, StripeProvider)

    def test_create_with_explicit_backend(self):
        """Test factory with explicit backend."""
        provider = PaymentFactory.create("stripe")
        self.assertIsInstance(provider, StripeProvider)

    def test_create_invalid_backend(self):
        """Test factory raises error for invalid backend."""
        with self.assertRaises(ValueError):
            PaymentFactory.create("invalid")
