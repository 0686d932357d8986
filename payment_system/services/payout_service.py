"""
PayoutService - Provider Payout Management

Computes the provider's share of a captured charge and moves it to the
provider's connected account exactly once per request.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from infrastructure.payments.interface import (
    PaymentException,
    PaymentProviderInterface,
    PaymentTimeout,
    TransferRecord,
)
from jobs.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from payment_system.domain.exceptions import AccountNotOnboarded, PayoutGatewayError
from payment_system.infra.observability.metrics import (
    payout_deduplicated_total,
    payout_failures_total,
    payout_volume_total,
)
from payment_system.models import PayoutTransfer
from utils.logging_utils import mask_value

logger = logging.getLogger(__name__)


class PayoutService(BaseService):
    """
    Service for provider payouts.

    Responsibilities:
    - Calculate the provider share (PAYOUT_PROVIDER_SHARE of the charge)
    - Execute the transfer via the payment provider, deduplicated by idempotency key
    - Record transfer history (PayoutTransfer)
    """

    def __init__(self, payment_provider: PaymentProviderInterface = None):
        super().__init__()
        self.payment_provider = payment_provider or self._get_default_provider()
        self.provider_share = Decimal(str(getattr(settings, "PAYOUT_PROVIDER_SHARE", "0.80")))

    def _get_default_provider(self):
        from infrastructure.container import Container

        return Container.get_payment_provider()

    def compute_payout_amount(self, charge_amount: int) -> int:
        """
        Provider share of a charge, in minor units, rounded half-up.

        Example:
            >>> payout_service.compute_payout_amount(1650)
            1320
        """
        return int((Decimal(charge_amount) * self.provider_share).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @BaseService.log_performance
    def transfer(
        self,
        provider,
        amount: int,
        idempotency_key: str,
        currency: str = "usd",
    ) -> ServiceResult[PayoutTransfer]:
        """
        Transfer `amount` to the provider's connected account at most once per key.

        Args:
            provider: User receiving the funds
            amount: Amount in minor units
            idempotency_key: Request id; repeated calls with the same key never pay twice
            currency: ISO currency code

        Returns:
            ServiceResult with the succeeded PayoutTransfer, or
            ACCOUNT_NOT_ONBOARDED (fatal) / GATEWAY_ERROR (retryable)
        """
        try:
            record = self._claim_record(provider, amount, idempotency_key, currency)
            if record.succeeded:
                payout_deduplicated_total.labels(source="local").inc()
                self.logger.info(f"Transfer for {idempotency_key} already settled as {record.stripe_transfer_id}")
                return service_ok(record)

            if record.amount_cents != amount:
                self.logger.critical(
                    f"Payout amount mismatch for {idempotency_key}: recorded {record.amount_cents}, requested {amount}"
                )
                return service_err(ErrorCodes.INTERNAL_ERROR, "Payout amount does not match the recorded transfer")

            return service_ok(self._execute(record))

        except AccountNotOnboarded as e:
            payout_failures_total.labels(kind=e.code).inc()
            self.logger.error(f"Provider {provider.id} cannot receive payouts: {str(e)}")
            return service_err(ErrorCodes.ACCOUNT_NOT_ONBOARDED, "Provider has not completed payout onboarding")
        except PayoutGatewayError as e:
            payout_failures_total.labels(kind=e.code).inc()
            self.logger.error(f"Payout for {idempotency_key} failed: {str(e)}")
            return service_err(ErrorCodes.GATEWAY_ERROR, "Payout could not be completed")

    def _claim_record(self, provider, amount: int, idempotency_key: str, currency: str) -> PayoutTransfer:
        """Get or create the dedupe row; committed before any gateway call."""
        existing = PayoutTransfer.objects.filter(idempotency_key=idempotency_key).first()
        if existing is not None:
            return existing

        if not provider.has_payout_account():
            raise AccountNotOnboarded(f"No connected account for provider {provider.id}")

        try:
            with transaction.atomic():
                return PayoutTransfer.objects.create(
                    idempotency_key=idempotency_key,
                    provider=provider,
                    destination_account=provider.stripe_account_id,
                    amount_cents=amount,
                    currency=currency,
                )
        except IntegrityError:
            # A concurrent attempt created it first
            return PayoutTransfer.objects.get(idempotency_key=idempotency_key)

    def _execute(self, record: PayoutTransfer) -> PayoutTransfer:
        if record.attempt_count > 0:
            # An earlier attempt may have reached the gateway; ask before paying again.
            found = self._find_existing_transfer(record)
            if found is not None:
                payout_deduplicated_total.labels(source="gateway").inc()
                return self._mark_succeeded(record, found)

        PayoutTransfer.objects.filter(pk=record.pk).update(
            attempt_count=F("attempt_count") + 1, last_attempt_at=timezone.now()
        )
        record.refresh_from_db()

        try:
            transfer = self.payment_provider.create_transfer(
                amount=record.amount_cents,
                currency=record.currency,
                destination_account=record.destination_account,
                idempotency_key=f"payout-{record.idempotency_key}",
                transfer_group=record.idempotency_key,
                metadata={"request_id": record.idempotency_key},
            )
        except PaymentTimeout as e:
            found = self._find_existing_transfer(record)
            if found is not None:
                return self._mark_succeeded(record, found)
            # Outcome unknown: leave the row as attempted for the next try
            raise PayoutGatewayError(f"Transfer outcome unknown: {str(e)}") from e
        except PaymentException as e:
            PayoutTransfer.objects.filter(pk=record.pk).update(
                status=PayoutTransfer.STATUS_FAILED, failure_message=str(e)[:1000]
            )
            payout_volume_total.labels(currency=record.currency, status="failed").inc(record.amount_cents)
            raise PayoutGatewayError(str(e)) from e

        return self._mark_succeeded(record, transfer)

    def _find_existing_transfer(self, record: PayoutTransfer) -> Optional[TransferRecord]:
        try:
            return self.payment_provider.find_transfer(record.idempotency_key)
        except PaymentException as e:
            self.logger.warning(f"Could not look up transfer for {record.idempotency_key}: {str(e)}")
            return None

    def _mark_succeeded(self, record: PayoutTransfer, transfer: TransferRecord) -> PayoutTransfer:
        record.status = PayoutTransfer.STATUS_SUCCEEDED
        record.stripe_transfer_id = transfer.transfer_id
        record.transferred_at = timezone.now()
        record.failure_message = ""
        record.save(update_fields=["status", "stripe_transfer_id", "transferred_at", "failure_message"])

        payout_volume_total.labels(currency=record.currency, status="succeeded").inc(record.amount_cents)
        self.logger.info(
            f"Transferred {record.amount_cents} {record.currency} to {mask_value(record.destination_account)} "
            f"for {record.idempotency_key}"
        )
        return record

    def settled_keys(self, keys) -> set:
        """Subset of `keys` whose transfer already succeeded."""
        return set(
            PayoutTransfer.objects.filter(
                idempotency_key__in=[str(key) for key in keys], status=PayoutTransfer.STATUS_SUCCEEDED
            ).values_list("idempotency_key", flat=True)
        )
