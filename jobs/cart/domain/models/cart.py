import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Cart(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="cart")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Service Cart"
        verbose_name_plural = "Service Carts"
        app_label = "jobs"

    @classmethod
    def get_or_create_cart(cls, user):
        """Get existing cart or create a new one for the user."""
        cart, _ = cls.objects.get_or_create(user=user)
        return cart

    def __str__(self):
        return f"Cart for {self.user.email}"


class CartItem(models.Model):
    """
    One snow removal job waiting in a cart.

    A tagged variant: `object_type` selects which keys `attributes` may hold.
    """

    OBJECT_TYPE_CHOICES = [
        ("car", "Car"),
        ("driveway", "Driveway"),
        ("lawn", "Lawn"),
        ("street", "Street"),
        ("other", "Other"),
    ]

    JOB_SIZE_CHOICES = [
        ("small", "Small"),
        ("medium", "Medium"),
        ("large", "Large"),
        ("x-large", "Extra large"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name="items")
    object_type = models.CharField(max_length=20, choices=OBJECT_TYPE_CHOICES)
    job_size = models.CharField(max_length=10, choices=JOB_SIZE_CHOICES, default="small")
    price = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(Decimal("0.00"))]
    )
    image_ref = models.CharField(max_length=500, blank=True)
    message = models.TextField(blank=True)
    attributes = models.JSONField(default=dict, blank=True)
    added_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "jobs"
        ordering = ["added_at"]

    @property
    def user_id(self):
        return self.cart.user_id

    def to_snapshot(self) -> dict:
        """Plain-dict copy stored on a request."""
        return {
            "id": str(self.id),
            "user_id": str(self.cart.user_id),
            "object_type": self.object_type,
            "job_size": self.job_size,
            "price": str(self.price),
            "image_ref": self.image_ref,
            "message": self.message,
            "attributes": dict(self.attributes),
        }

    def __str__(self):
        return f"{self.object_type} ({self.job_size}) in {self.cart.user.email}'s cart"
