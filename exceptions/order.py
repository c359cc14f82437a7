"""
Order-related exceptions.
"""

from .base import ShopException, ValidationException


class CheckoutInProgressException(ValidationException):
    """Raised when another checkout for the same user is still running."""

    def __init__(self, user_id: int):
        super().__init__(
            f"A checkout for user {user_id} is already in progress",
            details={'user_id': user_id}
        )
        self.user_id = user_id


class InconsistentOrderException(ShopException):
    """
    Raised when the payment was captured but the order could not be persisted.

    The charge id is kept on the exception and in the reconciliation log so
    the payment can be matched manually.
    """

    code = "INCONSISTENT"

    def __init__(self, user_id: int, charge_id: str, amount: int, reason: str):
        super().__init__(
            f"Charge {charge_id} ({amount}) for user {user_id} succeeded but the order was not saved: {reason}",
            details={'user_id': user_id, 'charge_id': charge_id, 'amount': amount, 'reason': reason}
        )
        self.user_id = user_id
        self.charge_id = charge_id
        self.amount = amount
        self.reason = reason
