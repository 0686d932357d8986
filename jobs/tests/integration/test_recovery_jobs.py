"""
Recovery sweep entry points: Celery tasks and the management command.
"""

from io import StringIO
from unittest.mock import MagicMock

from django.core.management import call_command
from django.test import TestCase

from infrastructure.container import container
from infrastructure.payments.interface import PaymentProviderInterface
from infrastructure.weather import WeatherProviderInterface
from jobs.models import ActiveRequest, CompletedRequest
from jobs.tasks import recover_request_migrations_task, retry_failed_payouts_task
from jobs.tests.factories import PayoutTransferFactory, StartedRequestFactory, make_transfer


class RecoveryJobsTest(TestCase):
    def setUp(self):
        self.mock_payment = MagicMock(spec=PaymentProviderInterface)
        self.mock_payment.find_transfer.return_value = None
        container.configure_for_testing(payment=self.mock_payment, weather=MagicMock(spec=WeatherProviderInterface))

        # Transfer settled but the completion was never recorded
        self.request = StartedRequestFactory(charge_amount=1650)
        PayoutTransferFactory(
            idempotency_key=str(self.request.id), provider=self.request.provider, stripe_transfer_id="tr_settled"
        )

    def tearDown(self):
        container.reset()

    def test_recovery_task(self):
        result = recover_request_migrations_task.apply().get()

        self.assertEqual(result, {"success": True, "recovered": 1})
        self.assertTrue(CompletedRequest.objects.filter(pk=self.request.id).exists())
        self.assertFalse(ActiveRequest.objects.filter(pk=self.request.id).exists())
        self.mock_payment.create_transfer.assert_not_called()

    def test_payout_retry_task(self):
        failed = StartedRequestFactory(
            charge_amount=2000,
            payout_retry_count=1,
            payout_failure_kind="gateway_error",
            payout_failed_at=self.request.started_at,
        )
        self.mock_payment.create_transfer.return_value = make_transfer(1600, transfer_id="tr_retried")

        result = retry_failed_payouts_task.apply().get()

        self.assertEqual(result, {"success": True, "completed": 1})
        self.assertEqual(CompletedRequest.objects.get(pk=failed.id).payout_amount, 1600)

    def test_management_command(self):
        out = StringIO()

        call_command("recover_requests", "--payouts", stdout=out)

        output = out.getvalue()
        self.assertIn("Repaired 1 request(s).", output)
        self.assertIn("Completed 0 request(s) on payout retry.", output)
        self.assertIn("Recovery finished.", output)
