from jobs.cart.domain.services.cart_service import CartService
from jobs.cart.domain.services.item_types import CartItemPatch, ServiceItemType
from jobs.cart.domain.services.pricing_service import PricingService


__all__ = ["CartService", "CartItemPatch", "PricingService", "ServiceItemType"]
