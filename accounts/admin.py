from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from accounts.models import Address, CustomUser, Notification


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display = ["email", "username", "role", "stripe_account_id", "is_active"]
    list_filter = ["role", "is_active", "is_staff"]
    fieldsets = UserAdmin.fieldsets + (("SnowPall", {"fields": ("role", "phone_number", "stripe_account_id")}),)
    add_fieldsets = UserAdmin.add_fieldsets + (("SnowPall", {"fields": ("email", "role")}),)

    def get_readonly_fields(self, request, obj=None):
        # Role is fixed once the account exists
        return ["role"] if obj is not None else []


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ["user", "street", "city", "state", "zip_code"]
    search_fields = ["street", "city", "zip_code", "user__email"]


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ["id", "user", "created_at", "read"]
    list_filter = ["read"]
    readonly_fields = ["user", "message", "created_at"]
