import uuid

from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.db import models


class CustomUser(AbstractUser):
    ROLE_CUSTOMER = "customer"
    ROLE_PROVIDER = "provider"

    ROLE_CHOICES = [
        (ROLE_CUSTOMER, "Customer"),
        (ROLE_PROVIDER, "Provider"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    phone_number = models.CharField(max_length=20, blank=True)

    # Fixed at sign-up; see save()
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_CUSTOMER)

    # Stripe Connect payout destination (providers only)
    stripe_account_id = models.CharField(max_length=255, blank=True, null=True, unique=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        db_table = "accounts_user"

    def __str__(self):
        return f"{self.email} ({self.role})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            persisted_role = type(self).objects.filter(pk=self.pk).values_list("role", flat=True).first()
            if persisted_role is not None and persisted_role != self.role:
                raise ValidationError("A user's role cannot be changed after creation.")
        super().save(*args, **kwargs)

    def is_customer(self) -> bool:
        return self.role == self.ROLE_CUSTOMER

    def is_provider(self) -> bool:
        return self.role == self.ROLE_PROVIDER

    def has_payout_account(self) -> bool:
        return self.is_provider() and bool(self.stripe_account_id)
