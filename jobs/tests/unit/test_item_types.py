import uuid

import pytest

from jobs.cart.domain.services.item_types import (
    CartItemPatch,
    ItemValidationError,
    ServiceItemType,
    derive_job_size,
    parse_item_type,
    resolve_job_size,
    validate_attributes,
)


@pytest.mark.unit
class TestItemTypes:
    def test_parse_item_type(self):
        assert parse_item_type("lawn") is ServiceItemType.LAWN
        with pytest.raises(ItemValidationError):
            parse_item_type("roof")

    def test_validate_attributes_rejects_foreign_keys(self):
        with pytest.raises(ItemValidationError, match="license_plate"):
            validate_attributes(ServiceItemType.DRIVEWAY, {"selected_size": "size1", "license_plate": "ABC123"})

    def test_validate_attributes_rejects_unknown_sizes(self):
        with pytest.raises(ItemValidationError):
            validate_attributes(ServiceItemType.DRIVEWAY, {"selected_size": "job1"})
        with pytest.raises(ItemValidationError):
            validate_attributes(ServiceItemType.OTHER, {"selected_size": "size1"})

    def test_validate_attributes_returns_copy(self):
        attributes = {"make_and_model": "Subaru Outback", "color": "green"}
        validated = validate_attributes(ServiceItemType.CAR, attributes)

        assert validated == attributes
        assert validated is not attributes

    @pytest.mark.parametrize(
        "item_type,attributes,expected",
        [
            (ServiceItemType.DRIVEWAY, {"selected_size": "size3"}, "large"),
            (ServiceItemType.DRIVEWAY, {}, "small"),
            (ServiceItemType.OTHER, {"selected_size": "job4"}, "x-large"),
            (ServiceItemType.LAWN, {"walkway": True}, "small"),
            (ServiceItemType.LAWN, {"walkway": True, "backyard": True}, "medium"),
            (ServiceItemType.LAWN, {"walkway": True, "front_yard": True, "backyard": True}, "large"),
            (ServiceItemType.STREET, {"from_street": "Elm", "to_street": "Oak"}, "medium"),
            (ServiceItemType.CAR, {"color": "red"}, "small"),
        ],
    )
    def test_derive_job_size(self, item_type, attributes, expected):
        assert derive_job_size(item_type, attributes) == expected

    def test_resolve_job_size_prefers_explicit_size(self):
        assert resolve_job_size(ServiceItemType.CAR, {}, "large") == "large"
        with pytest.raises(ItemValidationError):
            resolve_job_size(ServiceItemType.CAR, {}, "enormous")


@pytest.mark.unit
class TestCartItemPatch:
    def setup_method(self):
        self.current = {"id": uuid.uuid4(), "user_id": uuid.uuid4(), "object_type": "driveway"}

    def test_changeable_fields(self):
        patch, error = CartItemPatch.from_payload({"message": "Gate code 1234", "job_size": "large"}, self.current)

        assert error is None
        assert patch.message == "Gate code 1234"
        assert patch.job_size == "large"
        assert patch.attributes is None
        assert patch.image_ref is None

    def test_echoed_identity_fields_are_accepted(self):
        payload = {
            "id": str(self.current["id"]),
            "user_id": str(self.current["user_id"]),
            "object_type": "driveway",
            "message": "Thanks",
        }

        patch, error = CartItemPatch.from_payload(payload, self.current)

        assert error is None
        assert patch.message == "Thanks"

    @pytest.mark.parametrize("field", ["id", "user_id", "object_type"])
    def test_identity_fields_cannot_be_cleared(self, field):
        _, error = CartItemPatch.from_payload({field: None}, self.current)
        assert "cannot be removed" in error

        _, error = CartItemPatch.from_payload({field: ""}, self.current)
        assert "cannot be removed" in error

    def test_identity_fields_cannot_be_changed(self):
        _, error = CartItemPatch.from_payload({"object_type": "lawn"}, self.current)
        assert "cannot be changed" in error

        _, error = CartItemPatch.from_payload({"user_id": str(uuid.uuid4())}, self.current)
        assert "cannot be changed" in error

    def test_unknown_fields_are_rejected(self):
        _, error = CartItemPatch.from_payload({"price": "0.01"}, self.current)
        assert "price" in error
