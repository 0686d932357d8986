from accounts.domain.models import Address, CustomUser, Notification


__all__ = ["CustomUser", "Address", "Notification"]
