from django.conf import settings
from django.db import models
from django.utils import timezone


class Notification(models.Model):
    """
    Append-only per-user message.

    The auto-increment primary key gives append order; only `read` ever changes.
    """

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications")
    message = models.TextField()
    created_at = models.DateTimeField(default=timezone.now)
    read = models.BooleanField(default=False)

    class Meta:
        db_table = "accounts_notification"
        ordering = ["id"]
        indexes = [models.Index(fields=["user", "read"], name="notification_user_read_idx")]

    def __str__(self):
        return f"Notification {self.id} for {self.user_id}"
