"""
Address and notification API tests.
"""

import uuid

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.domain.services import AddressService
from accounts.models import Address
from jobs.services import ErrorCodes
from jobs.tests.factories import ActiveRequestFactory, AddressFactory, CustomerFactory

ADDRESS = {
    "name": "Cabin",
    "number": "7",
    "street": "Pine Rd",
    "city": "Lake Placid",
    "state": "NY",
    "zip_code": "12946",
}


class AddressServiceTest(TestCase):
    def setUp(self):
        self.service = AddressService()
        self.user = CustomerFactory()

    def test_add_requires_fields(self):
        result = self.service.add_address(self.user, {"name": "Cabin"})

        self.assertEqual(result.error, ErrorCodes.VALIDATION_ERROR)
        self.assertIn("zip_code", result.error_detail)

    def test_snapshot_is_detached(self):
        address = AddressFactory(user=self.user, zip_code="12946")
        snapshot = self.service.get_snapshot(self.user, address.id).value

        self.service.update_address(self.user, address.id, {"zip_code": "10001"})

        self.assertEqual(snapshot["zip_code"], "12946")
        self.assertEqual(snapshot["address_id"], str(address.id))

    def test_snapshot_of_foreign_address(self):
        address = AddressFactory()

        result = self.service.get_snapshot(self.user, address.id)

        self.assertEqual(result.error, ErrorCodes.NOT_FOUND)

    def test_update_cannot_blank_required_field(self):
        address = AddressFactory(user=self.user)

        result = self.service.update_address(self.user, address.id, {"street": ""})

        self.assertEqual(result.error, ErrorCodes.VALIDATION_ERROR)

    def test_remove_address(self):
        address = AddressFactory(user=self.user)

        result = self.service.remove_address(self.user, address.id)

        self.assertTrue(result.ok)
        self.assertEqual(self.service.get_snapshot(self.user, address.id).error, ErrorCodes.NOT_FOUND)

    def test_remove_foreign_address(self):
        address = AddressFactory()

        result = self.service.remove_address(self.user, address.id)

        self.assertEqual(result.error, ErrorCodes.NOT_FOUND)
        self.assertTrue(Address.objects.filter(pk=address.id).exists())

    def test_submitted_request_keeps_removed_address(self):
        address = AddressFactory(user=self.user, zip_code="12946")
        request = ActiveRequestFactory(customer=self.user, address=address.to_snapshot())

        self.service.remove_address(self.user, address.id)

        request.refresh_from_db()
        self.assertEqual(request.address["zip_code"], "12946")
        self.assertEqual(request.address["address_id"], str(address.id))


class AccountApiTest(TestCase):
    def setUp(self):
        self.user = CustomerFactory()
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_create_and_list_addresses(self):
        response = self.client.post(reverse("accounts:address-list"), ADDRESS, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.get(reverse("accounts:address-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row["zip_code"] for row in response.data], ["12946"])

    def test_update_address(self):
        address = AddressFactory(user=self.user)

        response = self.client.patch(
            reverse("accounts:address-detail", kwargs={"pk": str(address.id)}), {"unit": "2B"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Address.objects.get(pk=address.id).unit, "2B")

    def test_update_foreign_address(self):
        address = AddressFactory()

        response = self.client.patch(
            reverse("accounts:address-detail", kwargs={"pk": str(address.id)}), {"unit": "2B"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_address(self):
        address = AddressFactory(user=self.user)
        url = reverse("accounts:address-detail", kwargs={"pk": str(address.id)})

        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_foreign_address(self):
        address = AddressFactory()

        response = self.client.delete(reverse("accounts:address-detail", kwargs={"pk": str(address.id)}))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(Address.objects.filter(pk=address.id).exists())

    def test_notifications_and_mark_read(self):
        first = self.user.notifications.create(message="Your request has been accepted.")
        self.user.notifications.create(message="Your request has been started.")

        response = self.client.get(reverse("accounts:notification-list"))
        self.assertEqual(
            [row["message"] for row in response.data],
            ["Your request has been accepted.", "Your request has been started."],
        )

        response = self.client.post(reverse("accounts:notification-read", kwargs={"pk": first.id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["read"])

        response = self.client.get(reverse("accounts:notification-list"), {"unread": "true"})
        self.assertEqual(len(response.data), 1)

    def test_mark_unknown_notification(self):
        response = self.client.post(reverse("accounts:notification-read", kwargs={"pk": 999999}))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)

        response = self.client.get(reverse("accounts:address-list"))

        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_unknown_address_id_format(self):
        response = self.client.patch(
            reverse("accounts:address-detail", kwargs={"pk": str(uuid.uuid4())}), {"unit": "1"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
