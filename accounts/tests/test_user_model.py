import pytest
from django.core.exceptions import ValidationError

from jobs.tests.factories import CustomerFactory, ProviderFactory


@pytest.mark.django_db
@pytest.mark.unit
class TestCustomUser:
    def test_roles(self):
        customer = CustomerFactory()
        provider = ProviderFactory()

        assert customer.is_customer() and not customer.is_provider()
        assert provider.is_provider() and not provider.is_customer()

    def test_role_cannot_change(self):
        user = CustomerFactory()
        user.role = "provider"

        with pytest.raises(ValidationError):
            user.save()

        user.refresh_from_db()
        assert user.role == "customer"

    def test_other_fields_can_change(self):
        user = ProviderFactory()
        user.phone_number = "555-0100"
        user.save()

        user.refresh_from_db()
        assert user.phone_number == "555-0100"

    def test_payout_account(self):
        assert ProviderFactory().has_payout_account()
        assert not ProviderFactory(stripe_account_id=None).has_payout_account()
        assert not CustomerFactory().has_payout_account()
