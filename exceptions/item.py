"""
Item-related exceptions.
"""

from .base import NotFoundException, ValidationException


class ItemNotFoundException(NotFoundException):
    """Raised when item is not found in database."""

    def __init__(self, item_id: int):
        super().__init__(
            f"Item {item_id} not found",
            details={'item_id': item_id}
        )
        self.item_id = item_id


class InvalidPriceException(ValidationException):
    """Raised when a price is not a positive integer amount of minor units."""

    def __init__(self, price, item_id: int | None = None):
        super().__init__(
            f"Invalid price {price!r}: must be a positive integer amount of cents",
            details={'price': price, 'item_id': item_id}
        )
        self.price = price
        self.item_id = item_id
