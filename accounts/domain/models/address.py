import uuid

from django.conf import settings
from django.db import models


class Address(models.Model):
    """Saved address book entry. Requests keep a snapshot, never a reference."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="addresses")

    name = models.CharField(max_length=120)
    number = models.CharField(max_length=20, blank=True)
    unit = models.CharField(max_length=20, blank=True)
    street = models.CharField(max_length=255)
    city = models.CharField(max_length=120)
    state = models.CharField(max_length=60)
    zip_code = models.CharField(max_length=10)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "accounts_address"
        ordering = ["created_at"]

    def __str__(self):
        return f"{self.number} {self.street}, {self.city} {self.state} {self.zip_code}".strip()

    def to_snapshot(self) -> dict:
        return {
            "address_id": str(self.id),
            "name": self.name,
            "number": self.number,
            "unit": self.unit,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
        }
