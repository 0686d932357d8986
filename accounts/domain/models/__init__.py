from accounts.domain.models.address import Address
from accounts.domain.models.notification import Notification
from accounts.domain.models.user import CustomUser


__all__ = [
    "CustomUser",
    "Address",
    "Notification",
]
