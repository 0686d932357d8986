import uuid
from datetime import datetime, timezone
from decimal import Decimal

import factory
from django.contrib.auth import get_user_model
from faker import Faker

from accounts.models import Address
from infrastructure.payments import ChargeRecord, PaymentStatus, TransferRecord
from infrastructure.weather import WeatherSnapshot
from jobs.models import ActiveRequest, Cart, CartItem, Stage
from payment_system.models import PayoutTransfer

User = get_user_model()
fake = Faker()


class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = User

    id = factory.LazyFunction(uuid.uuid4)
    username = factory.Sequence(lambda n: f"user_{n}")
    email = factory.Sequence(lambda n: f"user_{n}@example.com")
    password = factory.PostGenerationMethodCall("set_password", "defaultpassword")
    is_active = True
    role = "customer"


class CustomerFactory(UserFactory):
    username = factory.Sequence(lambda n: f"customer_{n}")
    email = factory.Sequence(lambda n: f"customer_{n}@example.com")


class ProviderFactory(UserFactory):
    role = "provider"
    username = factory.Sequence(lambda n: f"snowtech_{n}")
    email = factory.Sequence(lambda n: f"snowtech_{n}@example.com")
    stripe_account_id = factory.Sequence(lambda n: f"acct_test_{n}")


class AddressFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Address

    user = factory.SubFactory(CustomerFactory)
    name = "Home"
    number = factory.LazyFunction(lambda: fake.building_number())
    unit = ""
    street = factory.LazyFunction(lambda: fake.street_name())
    city = factory.LazyFunction(lambda: fake.city())
    state = "NY"
    zip_code = "10001"


class CartFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Cart
        django_get_or_create = ("user",)

    user = factory.SubFactory(CustomerFactory)


class CartItemFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = CartItem

    id = factory.LazyFunction(uuid.uuid4)
    cart = factory.SubFactory(CartFactory)
    object_type = "driveway"
    job_size = "medium"
    attributes = factory.LazyFunction(lambda: {"selected_size": "size2"})
    message = factory.Faker("sentence", nb_words=6)


class ActiveRequestFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = ActiveRequest

    id = factory.LazyFunction(uuid.uuid4)
    customer = factory.SubFactory(CustomerFactory)
    provider = None
    stage = Stage.LIVE
    cart = factory.LazyAttribute(
        lambda o: [
            {
                "id": str(uuid.uuid4()),
                "user_id": str(o.customer.id),
                "object_type": "driveway",
                "job_size": "small",
                "price": "15.00",
                "image_ref": "",
                "message": "",
                "attributes": {"selected_size": "size1"},
            }
        ]
    )
    address = factory.LazyFunction(
        lambda: {
            "address_id": str(uuid.uuid4()),
            "name": "Home",
            "number": "12",
            "unit": "",
            "street": "Main St",
            "city": "Albany",
            "state": "NY",
            "zip_code": "12207",
        }
    )
    weather = factory.LazyFunction(
        lambda: {
            "temperature": "30",
            "precipitation_type": "Snow",
            "precipitation_intensity": "light",
            "observed_at": "2024-01-15T08:00:00+00:00",
        }
    )
    subtotal = Decimal("15.00")
    tax_amount = Decimal("1.50")
    charge_id = factory.Sequence(lambda n: f"ch_test_{n}")
    charge_amount = 1650
    charge_currency = "usd"
    charge_created_at = factory.LazyFunction(lambda: datetime(2024, 1, 15, 8, 0, tzinfo=timezone.utc))


class AcceptedRequestFactory(ActiveRequestFactory):
    provider = factory.SubFactory(ProviderFactory)
    stage = Stage.ACCEPTED
    accepted_at = factory.LazyFunction(lambda: datetime(2024, 1, 15, 8, 5, tzinfo=timezone.utc))


class StartedRequestFactory(AcceptedRequestFactory):
    stage = Stage.STARTED
    started_at = factory.LazyFunction(lambda: datetime(2024, 1, 15, 8, 30, tzinfo=timezone.utc))


class PayoutTransferFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = PayoutTransfer

    idempotency_key = factory.LazyFunction(lambda: str(uuid.uuid4()))
    provider = factory.SubFactory(ProviderFactory)
    destination_account = factory.LazyAttribute(lambda o: o.provider.stripe_account_id)
    amount_cents = 1320
    currency = "usd"
    status = PayoutTransfer.STATUS_SUCCEEDED
    stripe_transfer_id = factory.Sequence(lambda n: f"tr_test_{n}")
    attempt_count = 1


def make_weather(temperature="28", precipitation_type="Snow", precipitation_intensity="heavy"):
    return WeatherSnapshot(
        temperature=Decimal(temperature),
        precipitation_type=precipitation_type,
        precipitation_intensity=precipitation_intensity,
    )


def make_charge(amount, request_id="", charge_id=None):
    return ChargeRecord(
        charge_id=charge_id or f"ch_{uuid.uuid4().hex[:14]}",
        amount=amount,
        currency="usd",
        status=PaymentStatus.SUCCEEDED,
        created=1705305600,
        metadata={"request_id": str(request_id)},
    )


def make_transfer(amount, destination="acct_test", transfer_group="", transfer_id=None):
    return TransferRecord(
        transfer_id=transfer_id or f"tr_{uuid.uuid4().hex[:14]}",
        amount=amount,
        currency="usd",
        destination_account=destination,
        transfer_group=str(transfer_group),
    )
