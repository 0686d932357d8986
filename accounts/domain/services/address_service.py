"""
AddressService - saved addresses and the snapshots requests are created with.
"""

import logging
from typing import Any, Dict, List

from accounts.domain.models import Address
from jobs.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = ("name", "number", "unit", "street", "city", "state", "zip_code")
REQUIRED_ADDRESS_FIELDS = ("name", "street", "city", "state", "zip_code")


class AddressService(BaseService):
    """
    Service for the user's address book.

    Editing an address never affects requests already submitted with it: the
    ledger stores `get_snapshot()` output, a detached copy.
    """

    def list_addresses(self, user) -> ServiceResult[List[Address]]:
        return service_ok(list(Address.objects.filter(user=user)))

    @BaseService.log_performance
    def add_address(self, user, data: Dict[str, Any]) -> ServiceResult[Address]:
        missing = [field for field in REQUIRED_ADDRESS_FIELDS if not data.get(field)]
        if missing:
            return service_err(ErrorCodes.VALIDATION_ERROR, f"Missing address fields: {', '.join(missing)}")

        address = Address.objects.create(user=user, **{f: data.get(f, "") for f in ADDRESS_FIELDS})
        return service_ok(address)

    @BaseService.log_performance
    def update_address(self, user, address_id, data: Dict[str, Any]) -> ServiceResult[Address]:
        address = Address.objects.filter(pk=address_id, user=user).first()
        if address is None:
            return service_err(ErrorCodes.NOT_FOUND, f"Address {address_id} not found")

        for field in ADDRESS_FIELDS:
            if field in data:
                if field in REQUIRED_ADDRESS_FIELDS and not data[field]:
                    return service_err(ErrorCodes.VALIDATION_ERROR, f"Address field '{field}' cannot be empty")
                setattr(address, field, data[field])
        address.save()
        return service_ok(address)

    @BaseService.log_performance
    def remove_address(self, user, address_id) -> ServiceResult[bool]:
        deleted, _ = Address.objects.filter(pk=address_id, user=user).delete()
        if not deleted:
            return service_err(ErrorCodes.NOT_FOUND, f"Address {address_id} not found")
        return service_ok(True)

    def get_snapshot(self, user, address_id) -> ServiceResult[Dict[str, Any]]:
        """
        Return a frozen copy of one of the user's addresses.

        Returns:
            ServiceResult with a plain dict, NOT_FOUND for a missing or foreign address
        """
        if not address_id:
            return service_err(ErrorCodes.VALIDATION_ERROR, "An address is required")

        address = Address.objects.filter(pk=address_id, user=user).first()
        if address is None:
            return service_err(ErrorCodes.NOT_FOUND, f"Address {address_id} not found")
        return service_ok(address.to_snapshot())
