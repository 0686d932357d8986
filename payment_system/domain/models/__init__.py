from payment_system.domain.models.payout import PayoutTransfer


__all__ = ["PayoutTransfer"]
