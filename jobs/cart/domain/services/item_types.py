"""
Service item variants.

Each cart item is one of five job kinds. The kind decides which attribute keys
the item may carry and how its job size is derived when the client does not
send one.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ServiceItemType(str, Enum):
    CAR = "car"
    DRIVEWAY = "driveway"
    LAWN = "lawn"
    STREET = "street"
    OTHER = "other"


ITEM_ATTRIBUTES = {
    ServiceItemType.CAR: ("checked_service", "make_and_model", "color", "license_plate"),
    ServiceItemType.DRIVEWAY: ("selected_size",),
    ServiceItemType.LAWN: ("walkway", "front_yard", "backyard"),
    ServiceItemType.STREET: ("from_street", "to_street"),
    ServiceItemType.OTHER: ("selected_size",),
}

JOB_SIZES = ("small", "medium", "large", "x-large")

DRIVEWAY_SIZES = {"size1": "small", "size2": "medium", "size3": "large", "size4": "x-large"}
OTHER_JOB_SIZES = {"job1": "small", "job2": "medium", "job3": "large", "job4": "x-large"}

# Fields that identify an item; a patch may never erase or change them.
IDENTITY_FIELDS = ("id", "user_id", "object_type")
PATCHABLE_FIELDS = ("job_size", "image_ref", "message", "attributes")


class ItemValidationError(ValueError):
    pass


def parse_item_type(value: Any) -> ServiceItemType:
    try:
        return ServiceItemType(value)
    except ValueError:
        raise ItemValidationError(f"Unknown item type '{value}'") from None


def validate_attributes(item_type: ServiceItemType, attributes: Dict[str, Any]) -> Dict[str, Any]:
    """Reject keys that do not belong to the variant and malformed size selections."""
    if not isinstance(attributes, dict):
        raise ItemValidationError("Item attributes must be an object")

    allowed = ITEM_ATTRIBUTES[item_type]
    unknown = sorted(set(attributes) - set(allowed))
    if unknown:
        raise ItemValidationError(f"Unsupported attributes for {item_type.value}: {', '.join(unknown)}")

    selected = attributes.get("selected_size")
    if item_type == ServiceItemType.DRIVEWAY and selected is not None and selected not in DRIVEWAY_SIZES:
        raise ItemValidationError(f"Unknown driveway size '{selected}'")
    if item_type == ServiceItemType.OTHER and selected is not None and selected not in OTHER_JOB_SIZES:
        raise ItemValidationError(f"Unknown job size '{selected}'")

    return dict(attributes)


def derive_job_size(item_type: ServiceItemType, attributes: Dict[str, Any]) -> str:
    match item_type:
        case ServiceItemType.DRIVEWAY:
            return DRIVEWAY_SIZES.get(attributes.get("selected_size"), "small")
        case ServiceItemType.OTHER:
            return OTHER_JOB_SIZES.get(attributes.get("selected_size"), "small")
        case ServiceItemType.LAWN:
            areas = sum(1 for key in ITEM_ATTRIBUTES[ServiceItemType.LAWN] if attributes.get(key))
            return {2: "medium", 3: "large"}.get(areas, "small")
        case ServiceItemType.STREET:
            return "medium"
        case _:
            return "small"


def resolve_job_size(item_type: ServiceItemType, attributes: Dict[str, Any], job_size: Optional[str]) -> str:
    if job_size is None:
        return derive_job_size(item_type, attributes)
    if job_size not in JOB_SIZES:
        raise ItemValidationError(f"Unknown job size '{job_size}'")
    return job_size


@dataclass
class CartItemPatch:
    """
    Changeable fields of a cart item. None means "leave unchanged".

    `attributes` is merged key by key into the existing attributes.
    """

    job_size: Optional[str] = None
    image_ref: Optional[str] = None
    message: Optional[str] = None
    attributes: Optional[Dict[str, Any]] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], current: Dict[str, Any]) -> Tuple["CartItemPatch", Optional[str]]:
        """
        Build a patch from a request payload.

        Identity fields may be echoed back unchanged; erasing or changing one is an error.

        Returns:
            (patch, error message or None)
        """
        for field in IDENTITY_FIELDS:
            if field not in payload:
                continue
            value = payload[field]
            if value in (None, ""):
                return cls(), f"'{field}' cannot be removed from a cart item"
            if str(value) != str(current[field]):
                return cls(), f"'{field}' cannot be changed on a cart item"

        unknown = sorted(set(payload) - set(IDENTITY_FIELDS) - set(PATCHABLE_FIELDS))
        if unknown:
            return cls(), f"Unsupported fields: {', '.join(unknown)}"

        return cls(**{field: payload[field] for field in PATCHABLE_FIELDS if field in payload}), None
