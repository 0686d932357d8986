"""
RequestLedgerService - Request Lifecycle & Settlement

Owns the request state machine:

    submit -> live -> accepted -> started -> completed
                 ^       |
                 +-------+  (cancel)

Rules the implementation relies on:
- Every stage change is one conditional UPDATE; its row count decides the winner.
- Money moves before the state change it gates, always under an idempotency key
  derived from the request id, so a retried call never charges or pays twice.
- Completion is two-phase: the CompletedRequest is written first and the active
  row is deleted afterwards. A crash in between is repaired by recover_migrations().
"""

import logging
import uuid
from datetime import datetime
from datetime import timezone as dt_timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils import timezone
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from accounts.domain.services import AddressService, NotificationService
from infrastructure.payments.interface import (
    ChargeRecord,
    PaymentDeclined,
    PaymentException,
    PaymentProviderInterface,
    PaymentTimeout,
)
from infrastructure.weather import WeatherException, WeatherProviderInterface, WeatherSnapshot
from jobs.cart.domain.services import CartService, PricingService
from jobs.infra.observability.metrics import (
    charge_volume_total,
    charges_total,
    reconciliation_escalations_total,
    recovered_migrations_total,
    request_transitions_total,
)
from jobs.ledger.domain.models import ActiveRequest, CompletedRequest, Stage
from jobs.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from payment_system.services.payout_service import PayoutService
from utils.logging_utils import mask_value

logger = logging.getLogger(__name__)

ACCEPTED_MESSAGE = "Your request with ID {request_id} has been accepted."
CANCELLED_MESSAGE = "Your snowtech cancelled request with ID {request_id}. It is live again for other snowtechs."
STARTED_MESSAGE = "Your request with ID {request_id} has been started."
COMPLETED_MESSAGE = "Your request with ID {request_id} has been completed."


def _parse_uuid(value) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


class RequestLedgerService(BaseService):
    """
    Service for the request lifecycle.

    Dependencies (all injectable):
    - CartService / PricingService: priced cart snapshot at submission
    - AddressService: frozen address snapshot
    - PaymentProviderInterface: customer charge
    - WeatherProviderInterface: conditions used for pricing
    - PayoutService: provider transfer at completion
    - NotificationService: customer notifications, written with each transition
    """

    def __init__(
        self,
        cart_service: CartService = None,
        pricing_service: PricingService = None,
        payout_service: PayoutService = None,
        notification_service: NotificationService = None,
        address_service: AddressService = None,
        payment_provider: PaymentProviderInterface = None,
        weather_provider: WeatherProviderInterface = None,
    ):
        super().__init__()
        self.pricing_service = pricing_service or PricingService()
        self.cart_service = cart_service or CartService(
            pricing_service=self.pricing_service, weather_provider=weather_provider
        )
        self.payment_provider = payment_provider or self._get_default_provider()
        self.payout_service = payout_service or PayoutService(payment_provider=self.payment_provider)
        self.notification_service = notification_service or NotificationService()
        self.address_service = address_service or AddressService()
        self._weather_provider = weather_provider

        self.currency = getattr(settings, "STRIPE_CURRENCY", "usd")
        self.persist_attempts = getattr(settings, "LEDGER_PERSIST_ATTEMPTS", 3)
        self.retry_backoff = getattr(settings, "LEDGER_RETRY_BACKOFF", 0.5)
        self.max_payout_retries = getattr(settings, "PAYOUT_MAX_RETRIES", 5)

    def _get_default_provider(self):
        from infrastructure.container import Container

        return Container.get_payment_provider()

    @property
    def weather_provider(self) -> WeatherProviderInterface:
        if self._weather_provider is None:
            from infrastructure.container import container

            self._weather_provider = container.weather()
        return self._weather_provider

    def _persist_retrying(self) -> Retrying:
        """Retry policy for local writes that follow an external money movement."""
        return Retrying(
            stop=stop_after_attempt(self.persist_attempts),
            wait=wait_exponential(multiplier=self.retry_backoff, max=5),
            retry=retry_if_exception_type(DatabaseError),
            reraise=True,
        )

    def _notify(self, user_id, template: str, request_id) -> ServiceResult:
        return self.notification_service.append(user_id, template.format(request_id=request_id))

    # ------------------------------------------------------------------
    # Submit
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def submit_request(
        self,
        customer,
        address_id,
        payment_token: str,
        weather: Optional[WeatherSnapshot] = None,
        submission_id=None,
    ) -> ServiceResult[ActiveRequest]:
        """
        Charge the customer's cart and create a live request.

        Args:
            customer: User with the customer role
            address_id: One of the customer's saved addresses
            payment_token: Opaque card token from the client
            weather: Conditions to price with; fetched for the address when omitted
            submission_id: Client-chosen request id; resubmitting with the same id
                           returns the existing request without charging again

        Returns:
            ServiceResult with the live ActiveRequest, or
            VALIDATION_ERROR / NOT_FOUND / PAYMENT_FAILURE (nothing written) /
            INTERNAL_ERROR (charge captured, escalated for reconciliation)

        Example:
            >>> result = ledger.submit_request(customer, address.id, "tok_visa")
            >>> if result.ok:
            ...     print(result.value.stage)  # "live"
        """
        if not customer.is_customer():
            return service_err(ErrorCodes.VALIDATION_ERROR, "Only customers can submit requests")
        if not payment_token:
            return service_err(ErrorCodes.VALIDATION_ERROR, "A payment token is required")

        if submission_id is None:
            request_id = uuid.uuid4()
        else:
            request_id = _parse_uuid(submission_id)
            if request_id is None:
                return service_err(ErrorCodes.VALIDATION_ERROR, "Submission id must be a UUID")

            existing = self._find_submitted(request_id)
            if existing is not None:
                if existing.customer_id != customer.id:
                    return service_err(ErrorCodes.CONFLICT, "Submission id is already in use")
                self.logger.info(f"Submission {request_id} already recorded; returning existing request")
                return service_ok(existing)

        address_result = self.address_service.get_snapshot(customer, address_id)
        if not address_result.ok:
            return address_result
        address = address_result.value

        if weather is None:
            try:
                weather = self.weather_provider.current_conditions(address["zip_code"])
            except WeatherException as e:
                self.logger.error(f"Weather lookup failed for request {request_id}: {str(e)}")
                return service_err(ErrorCodes.INTERNAL_ERROR, "Weather conditions are unavailable, try again later")

        cart_result = self.cart_service.snapshot_cart(customer, weather)
        if not cart_result.ok:
            return cart_result
        cart = cart_result.value

        totals_result = self.pricing_service.calculate_totals(Decimal(item["price"]) for item in cart)
        if not totals_result.ok:
            return totals_result
        totals = totals_result.value

        charge_result = self._capture_charge(customer, request_id, totals["amount_cents"], payment_token)
        if not charge_result.ok:
            return charge_result
        charge = charge_result.value

        try:
            request = self._persist_submission(request_id, customer, cart, address, weather, totals, charge)
        except DatabaseError:
            self.logger.critical(
                f"Charge {charge.charge_id} ({charge.amount} {charge.currency}) captured for request {request_id} "
                f"but the request could not be stored; manual reconciliation required",
                exc_info=True,
            )
            reconciliation_escalations_total.labels(reason="submit_persist").inc()
            return service_err(
                ErrorCodes.INTERNAL_ERROR,
                "Your payment was received but the request could not be saved. Support has been notified.",
            )

        request_transitions_total.labels(transition="submit", outcome="ok").inc()
        self.logger.info(f"Request {request.id} is live for customer {customer.id}")
        return service_ok(request)

    def _find_submitted(self, request_id) -> Optional[Any]:
        existing = ActiveRequest.objects.filter(pk=request_id).first()
        if existing is None:
            existing = CompletedRequest.objects.filter(pk=request_id).first()
        return existing

    def _capture_charge(self, customer, request_id, amount: int, payment_token: str) -> ServiceResult[ChargeRecord]:
        """
        Charge the customer once for this submission.

        The idempotency key is derived from the request id, so replaying the
        call after a timeout, or a client resubmitting with the same id, returns
        the original charge instead of creating a second one.
        """
        charge_kwargs = {
            "amount": amount,
            "currency": self.currency,
            "source_token": payment_token,
            "idempotency_key": f"submit-{request_id}",
            "metadata": {"request_id": str(request_id), "customer_id": str(customer.id)},
            "description": f"Snow removal request {request_id}",
        }
        try:
            try:
                charge = self.payment_provider.create_charge(**charge_kwargs)
            except PaymentTimeout as e:
                # Same key: Stripe answers with the stored result if the first call went through.
                self.logger.warning(f"Charge for request {request_id} timed out, replaying with the same key: {e}")
                charge = self.payment_provider.create_charge(**charge_kwargs)
        except PaymentDeclined as e:
            charges_total.labels(currency=self.currency, status="declined").inc()
            self.logger.warning(f"Charge declined for request {request_id} (token {mask_value(payment_token)}): {e}")
            return service_err(ErrorCodes.PAYMENT_FAILURE, "Payment was declined")
        except PaymentTimeout as e:
            # Search results lag behind writes, so a miss here is not proof of no charge.
            self.logger.warning(f"Charge replay for request {request_id} timed out, searching gateway: {e}")
            try:
                charge = self.payment_provider.find_charge(str(request_id))
            except PaymentException:
                charge = None
            if charge is None:
                charges_total.labels(currency=self.currency, status="unknown").inc()
                return service_err(
                    ErrorCodes.PAYMENT_FAILURE, "Payment could not be confirmed, retry with the same request id"
                )
        except PaymentException as e:
            charges_total.labels(currency=self.currency, status="failed").inc()
            self.logger.error(f"Charge failed for request {request_id}: {e}")
            return service_err(ErrorCodes.PAYMENT_FAILURE, "Payment could not be processed")

        charges_total.labels(currency=self.currency, status="succeeded").inc()
        charge_volume_total.labels(currency=self.currency).inc(charge.amount)
        return service_ok(charge)

    def _persist_submission(
        self,
        request_id,
        customer,
        cart: List[Dict[str, Any]],
        address: Dict[str, Any],
        weather: WeatherSnapshot,
        totals: Dict[str, Any],
        charge: ChargeRecord,
    ) -> ActiveRequest:
        """Create the live request and drop the submitted items from the cart in one transaction."""
        for attempt in self._persist_retrying():
            with attempt:
                with transaction.atomic():
                    existing = ActiveRequest.objects.filter(pk=request_id).first()
                    if existing is not None:
                        return existing

                    now = timezone.now()
                    request = ActiveRequest.objects.create(
                        id=request_id,
                        customer=customer,
                        cart=cart,
                        address=address,
                        weather=weather.to_dict(),
                        subtotal=totals["subtotal"],
                        tax_amount=totals["tax"],
                        charge_id=charge.charge_id,
                        charge_amount=charge.amount,
                        charge_currency=charge.currency,
                        charge_created_at=datetime.fromtimestamp(charge.created, tz=dt_timezone.utc),
                        stage=Stage.LIVE,
                        created_at=now,
                        updated_at=now,
                    )
                    self.cart_service.clear_items(customer, [item["id"] for item in cart])
                    return request

    # ------------------------------------------------------------------
    # Provider transitions
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def accept_request(self, request_id, provider) -> ServiceResult[ActiveRequest]:
        """
        Claim a live request for a provider.

        Exactly one of any number of concurrent accepts succeeds; the rest get
        CONFLICT. Accepting again a request you already hold is a no-op success.

        Returns:
            ServiceResult with the accepted ActiveRequest, NOT_FOUND or CONFLICT
        """
        if not provider.is_provider():
            return service_err(ErrorCodes.VALIDATION_ERROR, "Only providers can accept requests")
        request_uuid = _parse_uuid(request_id)
        if request_uuid is None:
            return service_err(ErrorCodes.NOT_FOUND, f"Request {request_id} not found")

        now = timezone.now()
        try:
            with transaction.atomic():
                won = ActiveRequest.objects.filter(pk=request_uuid, stage=Stage.LIVE, provider__isnull=True).update(
                    stage=Stage.ACCEPTED, provider=provider, accepted_at=now, updated_at=now
                )
                if not won:
                    return self._lost_accept(request_uuid, provider)

                request = ActiveRequest.objects.get(pk=request_uuid)
                notified = self._notify(request.customer_id, ACCEPTED_MESSAGE, request.id)
                if not notified.ok:
                    transaction.set_rollback(True)
                    return notified
        except DatabaseError as e:
            self.logger.error(f"Accept of request {request_uuid} failed: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, "Request could not be accepted")

        request_transitions_total.labels(transition="accept", outcome="ok").inc()
        return service_ok(request)

    def _lost_accept(self, request_id, provider) -> ServiceResult[ActiveRequest]:
        current = ActiveRequest.objects.filter(pk=request_id).first()
        if current is not None and current.stage == Stage.ACCEPTED and current.provider_id == provider.id:
            return service_ok(current)

        request_transitions_total.labels(transition="accept", outcome="conflict").inc()
        return self._transition_failure(request_id, current, "accepted")

    def _transition_failure(self, request_id, current: Optional[ActiveRequest], action: str) -> ServiceResult:
        if current is None:
            if CompletedRequest.objects.filter(pk=request_id).exists():
                return service_err(ErrorCodes.CONFLICT, f"Request {request_id} is already completed")
            return service_err(ErrorCodes.NOT_FOUND, f"Request {request_id} not found")
        return service_err(ErrorCodes.CONFLICT, f"Request {request_id} cannot be {action} in its current state")

    @BaseService.log_performance
    def cancel_request(self, request_id, provider) -> ServiceResult[ActiveRequest]:
        """
        Release an accepted request back to the live pool.

        Only the assigned provider may cancel, and only before starting.

        Returns:
            ServiceResult with the live ActiveRequest, NOT_FOUND or CONFLICT
        """
        request_uuid = _parse_uuid(request_id)
        if request_uuid is None:
            return service_err(ErrorCodes.NOT_FOUND, f"Request {request_id} not found")

        now = timezone.now()
        try:
            with transaction.atomic():
                released = ActiveRequest.objects.filter(
                    pk=request_uuid, stage=Stage.ACCEPTED, provider=provider
                ).update(
                    stage=Stage.LIVE,
                    provider=None,
                    accepted_at=None,
                    cancellation_count=F("cancellation_count") + 1,
                    last_cancelled_at=now,
                    updated_at=now,
                )
                if not released:
                    request_transitions_total.labels(transition="cancel", outcome="conflict").inc()
                    current = ActiveRequest.objects.filter(pk=request_uuid).first()
                    return self._transition_failure(request_uuid, current, "cancelled")

                request = ActiveRequest.objects.get(pk=request_uuid)
                notified = self._notify(request.customer_id, CANCELLED_MESSAGE, request.id)
                if not notified.ok:
                    transaction.set_rollback(True)
                    return notified
        except DatabaseError as e:
            self.logger.error(f"Cancel of request {request_uuid} failed: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, "Request could not be cancelled")

        request_transitions_total.labels(transition="cancel", outcome="ok").inc()
        return service_ok(request)

    @BaseService.log_performance
    def start_request(self, request_id, provider) -> ServiceResult[ActiveRequest]:
        """
        Mark an accepted request as started by its provider.

        Returns:
            ServiceResult with the started ActiveRequest, NOT_FOUND or CONFLICT
        """
        request_uuid = _parse_uuid(request_id)
        if request_uuid is None:
            return service_err(ErrorCodes.NOT_FOUND, f"Request {request_id} not found")

        now = timezone.now()
        try:
            with transaction.atomic():
                started = ActiveRequest.objects.filter(
                    pk=request_uuid, stage=Stage.ACCEPTED, provider=provider
                ).update(stage=Stage.STARTED, started_at=now, updated_at=now)
                if not started:
                    request_transitions_total.labels(transition="start", outcome="conflict").inc()
                    current = ActiveRequest.objects.filter(pk=request_uuid).first()
                    return self._transition_failure(request_uuid, current, "started")

                request = ActiveRequest.objects.get(pk=request_uuid)
                notified = self._notify(request.customer_id, STARTED_MESSAGE, request.id)
                if not notified.ok:
                    transaction.set_rollback(True)
                    return notified
        except DatabaseError as e:
            self.logger.error(f"Start of request {request_uuid} failed: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, "Request could not be started")

        request_transitions_total.labels(transition="start", outcome="ok").inc()
        return service_ok(request)

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def complete_request(self, request_id, provider) -> ServiceResult[CompletedRequest]:
        """
        Pay the provider and move the request to the completed store.

        Steps:
        1. payout = charge * PAYOUT_PROVIDER_SHARE (half-up, minor units)
        2. transfer, keyed by the request id
        3. write the CompletedRequest (retried on its own, never re-running step 2)
        4. delete the active row and notify the customer (idempotent)

        Calling it again for a completed request re-runs step 4 only.

        Returns:
            ServiceResult with the CompletedRequest, or NOT_FOUND / CONFLICT /
            PAYOUT_FAILURE (request stays started, retry marker recorded) /
            INTERNAL_ERROR (paid but not recorded yet; safe to call again)
        """
        request_uuid = _parse_uuid(request_id)
        if request_uuid is None:
            return service_err(ErrorCodes.NOT_FOUND, f"Request {request_id} not found")

        completed = CompletedRequest.objects.filter(pk=request_uuid).first()
        if completed is not None:
            if completed.provider_id != provider.id:
                return service_err(ErrorCodes.CONFLICT, f"Request {request_uuid} was completed by another provider")
            self._finish_migration(completed)
            return service_ok(completed)

        request = ActiveRequest.objects.select_related("provider").filter(pk=request_uuid).first()
        if request is None:
            return service_err(ErrorCodes.NOT_FOUND, f"Request {request_uuid} not found")
        if request.stage != Stage.STARTED or request.provider_id != provider.id:
            request_transitions_total.labels(transition="complete", outcome="conflict").inc()
            return service_err(ErrorCodes.CONFLICT, f"Request {request_uuid} cannot be completed in its current state")

        payout_amount = self.payout_service.compute_payout_amount(request.charge_amount)
        transfer_result = self.payout_service.transfer(
            request.provider,
            payout_amount,
            idempotency_key=str(request.id),
            currency=request.charge_currency,
        )
        if not transfer_result.ok:
            return self._record_payout_failure(request, transfer_result)

        try:
            completed = self._persist_completed(request, payout_amount, transfer_result.value.stripe_transfer_id)
        except DatabaseError:
            self.logger.critical(
                f"Transfer {transfer_result.value.stripe_transfer_id} sent for request {request.id} "
                f"but the completion could not be recorded",
                exc_info=True,
            )
            reconciliation_escalations_total.labels(reason="complete_persist").inc()
            return service_err(
                ErrorCodes.INTERNAL_ERROR, "Payout was sent but the completion could not be recorded, retry shortly"
            )

        self._finish_migration(completed)
        request_transitions_total.labels(transition="complete", outcome="ok").inc()
        return service_ok(completed)

    def _record_payout_failure(self, request: ActiveRequest, result: ServiceResult) -> ServiceResult:
        now = timezone.now()
        ActiveRequest.objects.filter(pk=request.pk).update(
            payout_retry_count=F("payout_retry_count") + 1,
            payout_failure_kind=result.error,
            payout_last_error=(result.error_detail or "")[:255],
            payout_failed_at=now,
            updated_at=now,
        )
        attempts = request.payout_retry_count + 1
        request_transitions_total.labels(transition="complete", outcome="payout_failure").inc()

        if result.error != ErrorCodes.GATEWAY_ERROR or attempts >= self.max_payout_retries:
            self.logger.critical(
                f"Payout for request {request.id} needs operator attention: {result.error} after {attempts} attempt(s)"
            )
            reconciliation_escalations_total.labels(reason=result.error).inc()
        else:
            self.logger.error(f"Payout for request {request.id} failed ({result.error}), attempt {attempts}")

        return service_err(ErrorCodes.PAYOUT_FAILURE, result.error_detail)

    def _persist_completed(self, request: ActiveRequest, payout_amount: int, transfer_id: str) -> CompletedRequest:
        for attempt in self._persist_retrying():
            with attempt:
                with transaction.atomic():
                    now = timezone.now()
                    completed, _ = CompletedRequest.objects.get_or_create(
                        pk=request.pk,
                        defaults={
                            **request.completed_fields(),
                            "stage": Stage.COMPLETED,
                            "completed_at": now,
                            "updated_at": now,
                            "payout_amount": payout_amount,
                            "transfer_id": transfer_id or "",
                        },
                    )
                    return completed

    def _finish_migration(self, completed: CompletedRequest) -> bool:
        try:
            return self._finalize_migration(completed)
        except DatabaseError as e:
            # The completed record is authoritative; the sweep deletes the leftover row.
            self.logger.error(f"Could not retire active request {completed.pk}: {e}", exc_info=True)
            return False

    def _finalize_migration(self, completed: CompletedRequest) -> bool:
        """Delete the active row and notify the customer, once."""
        with transaction.atomic():
            deleted, _ = ActiveRequest.objects.filter(pk=completed.pk).delete()
            if deleted:
                notified = self._notify(completed.customer_id, COMPLETED_MESSAGE, completed.id)
                if not notified.ok:
                    self.logger.warning(f"Completion of {completed.pk} not notified: {notified.error_detail}")
        return bool(deleted)

    # ------------------------------------------------------------------
    # Recovery
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def recover_migrations(self) -> ServiceResult[int]:
        """
        Finish completions interrupted by a crash.

        - ids present in both stores: delete the active row (step 4)
        - started requests whose transfer already succeeded: record the completion (steps 3-4)

        Returns:
            ServiceResult with the number of requests repaired
        """
        recovered = 0

        leftovers = CompletedRequest.objects.filter(pk__in=ActiveRequest.objects.values("pk"))
        for completed in leftovers:
            try:
                if self._finalize_migration(completed):
                    recovered += 1
            except DatabaseError as e:
                self.logger.error(f"Recovery of request {completed.pk} failed: {e}", exc_info=True)

        started = list(ActiveRequest.objects.select_related("provider").filter(stage=Stage.STARTED))
        settled = self.payout_service.settled_keys(request.pk for request in started)
        for request in started:
            if str(request.pk) not in settled or request.provider is None:
                continue
            result = self.complete_request(request.pk, request.provider)
            if result.ok:
                recovered += 1

        if recovered:
            recovered_migrations_total.inc(recovered)
            self.logger.warning(f"Recovery sweep repaired {recovered} request(s)")
        return service_ok(recovered)

    @BaseService.log_performance
    def retry_failed_payouts(self) -> ServiceResult[int]:
        """
        Retry completions whose payout failed with a retryable gateway error.

        Returns:
            ServiceResult with the number of requests completed by this run
        """
        candidates = ActiveRequest.objects.select_related("provider").filter(
            stage=Stage.STARTED,
            payout_failed_at__isnull=False,
            payout_failure_kind=ErrorCodes.GATEWAY_ERROR,
            payout_retry_count__lt=self.max_payout_retries,
        )

        completed = 0
        for request in candidates:
            if request.provider is None:
                continue
            if self.complete_request(request.pk, request.provider).ok:
                completed += 1
        return service_ok(completed)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_live_requests(self) -> ServiceResult[List[ActiveRequest]]:
        """Job board: unclaimed requests, oldest first."""
        return service_ok(list(ActiveRequest.objects.filter(stage=Stage.LIVE, provider__isnull=True)))

    def list_provider_requests(self, provider) -> ServiceResult[Dict[str, list]]:
        return service_ok(
            {
                "active": list(ActiveRequest.objects.filter(provider=provider)),
                "completed": list(CompletedRequest.objects.filter(provider=provider)),
            }
        )

    def list_customer_requests(self, customer) -> ServiceResult[Dict[str, list]]:
        return service_ok(
            {
                "active": list(ActiveRequest.objects.filter(customer=customer)),
                "completed": list(CompletedRequest.objects.filter(customer=customer)),
            }
        )

    def get_request(self, request_id, user) -> ServiceResult[Any]:
        """
        Fetch a request visible to the user.

        Customers see their own requests; providers see live requests and the
        ones assigned to them. Everything else is NOT_FOUND.
        """
        request_uuid = _parse_uuid(request_id)
        request = self._find_submitted(request_uuid) if request_uuid else None
        if request is None:
            return service_err(ErrorCodes.NOT_FOUND, f"Request {request_id} not found")

        is_party = user.id in (request.customer_id, request.provider_id)
        is_job_board = user.is_provider() and request.stage == Stage.LIVE
        if not (is_party or is_job_board):
            return service_err(ErrorCodes.NOT_FOUND, f"Request {request_id} not found")
        return service_ok(request)
