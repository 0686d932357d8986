import uuid

from django.conf import settings
from django.db import models


class PayoutTransfer(models.Model):
    """
    Local dedupe record for provider transfers.

    One row per idempotency key (the request id). The row is written before
    the gateway is called, so a crash mid-call leaves an `attempted` row that
    the next attempt resolves by asking the gateway instead of paying twice.
    """

    STATUS_ATTEMPTED = "attempted"
    STATUS_SUCCEEDED = "succeeded"
    STATUS_FAILED = "failed"

    STATUS_CHOICES = [
        (STATUS_ATTEMPTED, "Attempted"),
        (STATUS_SUCCEEDED, "Succeeded"),
        (STATUS_FAILED, "Failed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    idempotency_key = models.CharField(max_length=255, unique=True)

    provider = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="payout_transfers"
    )
    destination_account = models.CharField(max_length=255)

    amount_cents = models.PositiveIntegerField(help_text="Transferred amount in cents")
    currency = models.CharField(max_length=3, default="usd")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ATTEMPTED)
    stripe_transfer_id = models.CharField(max_length=255, blank=True)
    attempt_count = models.PositiveIntegerField(default=0)
    failure_message = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    last_attempt_at = models.DateTimeField(null=True, blank=True)
    transferred_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        app_label = "payment_system"
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["status", "created_at"], name="payout_status_created_idx")]

    def __str__(self):
        return f"Transfer {self.idempotency_key} ({self.status})"

    @property
    def succeeded(self) -> bool:
        return self.status == self.STATUS_SUCCEEDED
