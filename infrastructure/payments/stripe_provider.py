"""
Stripe Payment Provider
========================

Concrete implementation of PaymentProviderInterface using Stripe charges and
Stripe Connect transfers.
"""

import logging
from typing import Any, Dict, Optional

import stripe
from django.conf import settings
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from utils.logging_utils import mask_value

from .interface import (
    AccountLink,
    ChargeRecord,
    ConnectedAccount,
    PaymentDeclined,
    PaymentException,
    PaymentProviderInterface,
    PaymentStatus,
    PaymentTimeout,
    TransferRecord,
)

logger = logging.getLogger(__name__)

# Transient failures worth retrying. Every retried call carries the same
# idempotency key, so Stripe collapses the attempts into one operation.
TRANSIENT_STRIPE_ERRORS = (
    stripe.RateLimitError,
    stripe.APIConnectionError,
    stripe.APIError,
)


class StripeProvider(PaymentProviderInterface):
    """
    Stripe payment provider implementation.

    Configuration (in settings.py):
        STRIPE_SECRET_KEY: Stripe secret API key
        STRIPE_TIMEOUT_SECONDS: Network timeout for every Stripe request
    """

    def __init__(self):
        """Initialize Stripe provider with API credentials."""
        stripe.api_key = getattr(settings, "STRIPE_SECRET_KEY", "")
        stripe.default_http_client = stripe.RequestsClient(timeout=getattr(settings, "STRIPE_TIMEOUT_SECONDS", 30))

        if not stripe.api_key:
            logger.warning("STRIPE_SECRET_KEY not configured")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(TRANSIENT_STRIPE_ERRORS),
        reraise=True,
    )
    def _create_charge_api(self, **kwargs):
        """Internal method to create a charge with retries."""
        return stripe.Charge.create(**kwargs)

    def create_charge(
        self,
        amount: int,
        currency: str,
        source_token: str,
        idempotency_key: str,
        metadata: Optional[Dict[str, Any]] = None,
        description: str = "",
    ) -> ChargeRecord:
        """
        Capture a Stripe charge.

        Raises:
            PaymentDeclined: On card errors and invalid requests
            PaymentTimeout: When Stripe could not be reached after retries
            PaymentException: On any other Stripe error
        """
        metadata = metadata or {}
        try:
            charge = self._create_charge_api(
                amount=amount,
                currency=currency.lower(),
                source=source_token,
                description=description or "Snow removal request",
                metadata=metadata,
                transfer_group=metadata.get("request_id"),
                idempotency_key=idempotency_key,
            )
            logger.info(f"Created Stripe charge {charge.id} for {amount} {currency}")
            return self._to_charge_record(charge)

        except (stripe.CardError, stripe.InvalidRequestError) as e:
            logger.warning(f"Stripe charge declined (token {mask_value(source_token)}): {str(e)}")
            raise PaymentDeclined(str(e)) from e
        except stripe.APIConnectionError as e:
            logger.error(f"Stripe charge outcome unknown for key {idempotency_key}: {str(e)}")
            raise PaymentTimeout(str(e)) from e
        except stripe.StripeError as e:
            logger.error(f"Stripe charge failed: {str(e)}")
            raise PaymentException(f"Charge failed: {str(e)}") from e

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(TRANSIENT_STRIPE_ERRORS),
        reraise=True,
    )
    def _search_charges_api(self, query: str):
        return stripe.Charge.search(query=query, limit=1)

    def find_charge(self, request_id: str) -> Optional[ChargeRecord]:
        """
        Search Stripe for a successful charge tagged with the request id.

        Raises:
            PaymentException: If the search itself fails
        """
        try:
            result = self._search_charges_api(f"metadata['request_id']:'{request_id}' AND status:'succeeded'")
        except stripe.StripeError as e:
            logger.error(f"Stripe charge search failed for request {request_id}: {str(e)}")
            raise PaymentException(f"Charge lookup failed: {str(e)}") from e

        if not result.data:
            return None
        return self._to_charge_record(result.data[0])

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(TRANSIENT_STRIPE_ERRORS),
        reraise=True,
    )
    def _create_transfer_api(self, **kwargs):
        return stripe.Transfer.create(**kwargs)

    def create_transfer(
        self,
        amount: int,
        currency: str,
        destination_account: str,
        idempotency_key: str,
        transfer_group: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> TransferRecord:
        """
        Transfer funds to a connected account (Stripe Connect).

        Returns:
            TransferRecord

        Raises:
            PaymentTimeout: When Stripe could not be reached after retries
            PaymentException: If transfer fails
        """
        params = {
            "amount": amount,
            "currency": currency.lower(),
            "destination": destination_account,
            "metadata": metadata or {},
            "idempotency_key": idempotency_key,
        }
        if transfer_group:
            params["transfer_group"] = transfer_group

        try:
            transfer = self._create_transfer_api(**params)
            logger.info(f"Created transfer {transfer.id} to {mask_value(destination_account)}")
            return self._to_transfer_record(transfer)

        except stripe.APIConnectionError as e:
            logger.error(f"Stripe transfer outcome unknown for key {idempotency_key}: {str(e)}")
            raise PaymentTimeout(str(e)) from e
        except stripe.StripeError as e:
            logger.error(f"Stripe transfer failed: {str(e)}")
            raise PaymentException(f"Transfer failed: {str(e)}") from e

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(TRANSIENT_STRIPE_ERRORS),
        reraise=True,
    )
    def _list_transfers_api(self, transfer_group: str):
        return stripe.Transfer.list(transfer_group=transfer_group, limit=1)

    def find_transfer(self, transfer_group: str) -> Optional[TransferRecord]:
        try:
            result = self._list_transfers_api(transfer_group)
        except stripe.StripeError as e:
            logger.error(f"Stripe transfer lookup failed for group {transfer_group}: {str(e)}")
            raise PaymentException(f"Transfer lookup failed: {str(e)}") from e

        if not result.data:
            return None
        return self._to_transfer_record(result.data[0])

    def create_connected_account(self, email: str, metadata: Optional[Dict[str, Any]] = None) -> ConnectedAccount:
        try:
            account = stripe.Account.create(
                type="express",
                email=email,
                capabilities={"transfers": {"requested": True}},
                metadata=metadata or {},
            )
            logger.info(f"Created connected account {mask_value(account.id)}")
            return ConnectedAccount(
                account_id=account.id,
                details_submitted=bool(account.get("details_submitted")),
                payouts_enabled=bool(account.get("payouts_enabled")),
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe account creation failed: {str(e)}")
            raise PaymentException(f"Account creation failed: {str(e)}") from e

    def create_account_link(self, account_id: str, refresh_url: str, return_url: str) -> AccountLink:
        try:
            link = stripe.AccountLink.create(
                account=account_id,
                refresh_url=refresh_url,
                return_url=return_url,
                type="account_onboarding",
            )
            return AccountLink(url=link.url, expires_at=link.get("expires_at"))
        except stripe.StripeError as e:
            logger.error(f"Stripe account link creation failed: {str(e)}")
            raise PaymentException(f"Account link creation failed: {str(e)}") from e

    def _to_charge_record(self, charge) -> ChargeRecord:
        return ChargeRecord(
            charge_id=charge.id,
            amount=charge.amount,
            currency=charge.currency,
            status=self._map_stripe_status(charge.status),
            created=charge.created,
            metadata=dict(charge.metadata or {}),
        )

    def _to_transfer_record(self, transfer) -> TransferRecord:
        return TransferRecord(
            transfer_id=transfer.id,
            amount=transfer.amount,
            currency=transfer.currency,
            destination_account=transfer.destination,
            transfer_group=transfer.get("transfer_group"),
            created=transfer.get("created"),
        )

    def _map_stripe_status(self, stripe_status: str) -> PaymentStatus:
        """Map a Stripe charge status to PaymentStatus."""
        status_map = {
            "succeeded": PaymentStatus.SUCCEEDED,
            "pending": PaymentStatus.PENDING,
            "failed": PaymentStatus.FAILED,
        }
        return status_map.get(stripe_status, PaymentStatus.PENDING)
