from jobs.cart.domain.models import Cart, CartItem
from jobs.ledger.domain.models import ActiveRequest, CompletedRequest, Stage


__all__ = ["Cart", "CartItem", "ActiveRequest", "CompletedRequest", "Stage"]
