"""
Payment-related exceptions.
"""

from .base import ShopException


class PaymentFailedException(ShopException):
    """Raised when the payment gateway declines, errors or times out."""

    code = "PAYMENT_FAILED"

    def __init__(self, reason: str, decline_code: str | None = None, status: int | None = None):
        super().__init__(
            f"Payment failed: {reason}",
            details={'reason': reason, 'decline_code': decline_code, 'status': status}
        )
        self.reason = reason
        self.decline_code = decline_code
        self.status = status
