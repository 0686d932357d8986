from django.contrib import admin

from jobs.models import ActiveRequest, Cart, CartItem, CompletedRequest


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    readonly_fields = ["object_type", "job_size", "price", "attributes", "added_at"]


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ["user", "created_at", "updated_at"]
    inlines = [CartItemInline]


@admin.register(ActiveRequest)
class ActiveRequestAdmin(admin.ModelAdmin):
    list_display = ["id", "stage", "customer", "provider", "charge_amount", "payout_retry_count", "created_at"]
    list_filter = ["stage", "payout_failure_kind"]
    search_fields = ["id", "charge_id", "customer__email", "provider__email"]
    # Stage changes go through the ledger service only
    readonly_fields = ["stage", "provider", "charge_id", "charge_amount", "cart", "address", "weather"]


@admin.register(CompletedRequest)
class CompletedRequestAdmin(admin.ModelAdmin):
    list_display = ["id", "customer", "provider", "charge_amount", "payout_amount", "completed_at"]
    search_fields = ["id", "charge_id", "transfer_id"]
    readonly_fields = [field.name for field in CompletedRequest._meta.fields]
