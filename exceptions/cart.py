"""
Cart-related exceptions.
"""

from .base import NotFoundException, ValidationException


class EmptyCartException(ValidationException):
    """Raised when trying to checkout with empty cart."""

    def __init__(self, user_id: int):
        super().__init__(
            "Your cart is empty",
            details={'user_id': user_id}
        )
        self.user_id = user_id


class CartItemNotFoundException(NotFoundException):
    """Raised when cart item not found (or not owned by the caller)."""

    def __init__(self, cart_item_id: int):
        super().__init__(
            f"Cart item {cart_item_id} not found",
            details={'cart_item_id': cart_item_id}
        )
        self.cart_item_id = cart_item_id
