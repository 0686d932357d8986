import uuid

from django.test import TestCase

from accounts.domain.services import NotificationService
from accounts.models import Notification
from jobs.services import ErrorCodes
from jobs.tests.factories import CustomerFactory


class NotificationServiceTest(TestCase):
    def setUp(self):
        self.service = NotificationService()
        self.user = CustomerFactory()

    def test_append_keeps_order(self):
        for message in ("first", "second", "third"):
            self.assertTrue(self.service.append(self.user.id, message).ok)

        result = self.service.list_for_user(self.user)

        self.assertEqual([n.message for n in result.value], ["first", "second", "third"])
        self.assertFalse(any(n.read for n in result.value))

    def test_append_for_missing_user(self):
        result = self.service.append(uuid.uuid4(), "hello")

        self.assertFalse(result.ok)
        self.assertEqual(result.error, ErrorCodes.NOT_FOUND)
        self.assertFalse(Notification.objects.exists())

    def test_append_rejects_empty_message(self):
        result = self.service.append(self.user.id, "")

        self.assertEqual(result.error, ErrorCodes.VALIDATION_ERROR)

    def test_mark_read(self):
        notification = self.service.append(self.user.id, "accepted").value

        result = self.service.mark_read(self.user, notification.id)

        self.assertTrue(result.ok)
        self.assertTrue(result.value.read)
        self.assertEqual(result.value.message, "accepted")

    def test_unread_filter(self):
        first = self.service.append(self.user.id, "first").value
        self.service.append(self.user.id, "second")
        self.service.mark_read(self.user, first.id)

        result = self.service.list_for_user(self.user, unread_only=True)

        self.assertEqual([n.message for n in result.value], ["second"])

    def test_cannot_mark_another_users_notification(self):
        other = CustomerFactory()
        notification = self.service.append(other.id, "private").value

        result = self.service.mark_read(self.user, notification.id)

        self.assertEqual(result.error, ErrorCodes.NOT_FOUND)
        notification.refresh_from_db()
        self.assertFalse(notification.read)

    def test_list_is_scoped_to_user(self):
        self.service.append(self.user.id, "mine")
        self.service.append(CustomerFactory().id, "theirs")

        result = self.service.list_for_user(self.user)

        self.assertEqual([n.message for n in result.value], ["mine"])
