from payment_system.domain.models import PayoutTransfer


__all__ = ["PayoutTransfer"]
