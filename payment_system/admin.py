from django.contrib import admin

from payment_system.models import PayoutTransfer


@admin.register(PayoutTransfer)
class PayoutTransferAdmin(admin.ModelAdmin):
    list_display = ["idempotency_key", "provider", "amount_cents", "currency", "status", "attempt_count", "created_at"]
    list_filter = ["status", "currency"]
    search_fields = ["idempotency_key", "stripe_transfer_id", "provider__email"]
    readonly_fields = [
        "idempotency_key",
        "provider",
        "destination_account",
        "amount_cents",
        "currency",
        "stripe_transfer_id",
        "attempt_count",
        "created_at",
        "last_attempt_at",
        "transferred_at",
    ]
