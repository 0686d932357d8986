"""
NotificationService - per-user notification log.

Notifications are appended by the request ledger on every customer-visible
stage change. Entries are never edited or removed; the only mutation is
flipping the read flag.
"""

import logging
from typing import List

from django.contrib.auth import get_user_model

from accounts.domain.models import Notification
from jobs.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

logger = logging.getLogger(__name__)

User = get_user_model()


class NotificationService(BaseService):
    """
    Service for appending and reading notifications.

    Responsibilities:
    - Append a message to a user's log (callers run it inside their own transaction)
    - List a user's notifications in append order
    - Mark a notification as read
    """

    def append(self, user_id, message: str) -> ServiceResult[Notification]:
        """
        Append a notification to a user's log.

        Args:
            user_id: Target user id
            message: Message text

        Returns:
            ServiceResult with the created Notification, or NOT_FOUND when the user no longer exists
        """
        if not message:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Notification message cannot be empty")

        if not User.objects.filter(pk=user_id).exists():
            return service_err(ErrorCodes.NOT_FOUND, f"User {user_id} not found")

        notification = Notification.objects.create(user_id=user_id, message=message)
        self.logger.debug(f"Appended notification {notification.id} for user {user_id}")
        return service_ok(notification)

    def list_for_user(self, user, unread_only: bool = False) -> ServiceResult[List[Notification]]:
        queryset = Notification.objects.filter(user=user)
        if unread_only:
            queryset = queryset.filter(read=False)
        return service_ok(list(queryset.order_by("id")))

    @BaseService.log_performance
    def mark_read(self, user, notification_id) -> ServiceResult[Notification]:
        """
        Mark one of the user's notifications as read.

        Returns:
            ServiceResult with the updated Notification, NOT_FOUND for another user's entry
        """
        updated = Notification.objects.filter(pk=notification_id, user=user).update(read=True)
        if not updated:
            return service_err(ErrorCodes.NOT_FOUND, f"Notification {notification_id} not found")
        return service_ok(Notification.objects.get(pk=notification_id))
