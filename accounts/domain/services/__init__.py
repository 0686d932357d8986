from accounts.domain.services.address_service import AddressService
from accounts.domain.services.notification_service import NotificationService


__all__ = ["AddressService", "NotificationService"]
