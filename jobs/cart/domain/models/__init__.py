from jobs.cart.domain.models.cart import Cart, CartItem


__all__ = ["Cart", "CartItem"]
