import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone


class Stage:
    """
    Request stages.

    live -> accepted -> started -> completed, with cancel moving accepted back
    to live. CANCELLED names that edge and is never stored.
    """

    LIVE = "live"
    ACCEPTED = "accepted"
    STARTED = "started"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    ACTIVE_CHOICES = [
        (LIVE, "Live"),
        (ACCEPTED, "Accepted"),
        (STARTED, "Started"),
    ]
    CHOICES = ACTIVE_CHOICES + [(COMPLETED, "Completed")]


class BaseRequest(models.Model):
    """
    Fields shared by the active and completed stores.

    `cart`, `address` and `weather` are frozen JSON copies taken at submission;
    they are never re-read from the customer's live cart or address book.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    cart = models.JSONField(default=list)
    address = models.JSONField(default=dict)
    weather = models.JSONField(default=dict)

    # Pricing (major units)
    subtotal = models.DecimalField(max_digits=10, decimal_places=2)
    tax_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    # Captured charge (minor units)
    charge_id = models.CharField(max_length=255, unique=True)
    charge_amount = models.PositiveIntegerField()
    charge_currency = models.CharField(max_length=3, default="usd")
    charge_created_at = models.DateTimeField()

    created_at = models.DateTimeField(default=timezone.now)
    accepted_at = models.DateTimeField(null=True, blank=True)
    started_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        abstract = True


class ActiveRequest(BaseRequest):
    customer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="active_requests")
    provider = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="accepted_requests",
    )
    stage = models.CharField(max_length=20, choices=Stage.ACTIVE_CHOICES, default=Stage.LIVE)

    cancellation_count = models.PositiveIntegerField(default=0)
    last_cancelled_at = models.DateTimeField(null=True, blank=True)

    # Payout retry marker; set when a completion attempt could not transfer funds
    payout_retry_count = models.PositiveIntegerField(default=0)
    payout_failure_kind = models.CharField(max_length=40, blank=True)
    payout_last_error = models.CharField(max_length=255, blank=True)
    payout_failed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["created_at"]
        app_label = "jobs"
        indexes = [
            models.Index(fields=["stage", "created_at"], name="request_stage_created_idx"),
            models.Index(fields=["provider", "stage"], name="request_provider_stage_idx"),
        ]

    def __str__(self):
        return f"Request {str(self.id)[:8]} ({self.stage})"

    def completed_fields(self) -> dict:
        """Values copied verbatim into the CompletedRequest."""
        return {
            "customer_id": self.customer_id,
            "provider_id": self.provider_id,
            "cart": self.cart,
            "address": self.address,
            "weather": self.weather,
            "subtotal": self.subtotal,
            "tax_amount": self.tax_amount,
            "charge_id": self.charge_id,
            "charge_amount": self.charge_amount,
            "charge_currency": self.charge_currency,
            "charge_created_at": self.charge_created_at,
            "created_at": self.created_at,
            "accepted_at": self.accepted_at,
            "started_at": self.started_at,
        }


class CompletedRequest(BaseRequest):
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="completed_requests"
    )
    provider = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="completed_jobs")
    stage = models.CharField(max_length=20, choices=Stage.CHOICES, default=Stage.COMPLETED)

    completed_at = models.DateTimeField(default=timezone.now)
    payout_amount = models.PositiveIntegerField()
    transfer_id = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ["-completed_at"]
        app_label = "jobs"

    def __str__(self):
        return f"Completed request {str(self.id)[:8]}"
