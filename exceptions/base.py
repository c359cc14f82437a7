"""
Base exception classes for the storefront API.
"""


class ShopException(Exception):
    """
    Base exception for all storefront errors.

    All custom exceptions in the API should inherit from this class.
    This allows catching all shop-specific exceptions with a single handler.

    Attributes:
        code: Stable machine-readable error kind, exposed to GraphQL clients
        message: Human-readable error message
        details: Optional dict with additional context (entity IDs, states, etc.)
    """

    code = "SHOP_ERROR"

    def __init__(self, message: str, details: dict | None = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            details: Optional dict with additional context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation with context."""
        if self.details:
            details_str = ', '.join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"


class UnauthenticatedException(ShopException):
    """Raised when an operation requires a signed-in user and there is none."""

    code = "UNAUTHENTICATED"

    def __init__(self, action: str | None = None):
        message = "You must be signed in"
        if action:
            message += f" to {action}"
        super().__init__(message, details={'action': action} if action else None)
        self.action = action


class ForbiddenException(ShopException):
    """Raised when the caller lacks ownership or the required permission."""

    code = "FORBIDDEN"

    def __init__(self, user_id: int, required: list[str] | None = None, reason: str | None = None):
        if reason:
            message = reason
        elif required:
            message = f"You don't have sufficient permissions: {', '.join(required)}"
        else:
            message = "You don't have permission to do that"
        super().__init__(message, details={'user_id': user_id, 'required': required})
        self.user_id = user_id
        self.required = required or []


class NotFoundException(ShopException):
    """Base exception for missing entities."""

    code = "NOT_FOUND"


class ValidationException(ShopException):
    """Base exception for rejected input or disallowed state."""

    code = "VALIDATION_FAILED"


class StoreUnavailableException(ShopException):
    """Raised when the data store cannot be reached or times out."""

    code = "STORE_UNAVAILABLE"

    def __init__(self, operation: str | None = None, reason: str | None = None):
        message = "The data store is currently unavailable"
        if reason:
            message += f": {reason}"
        super().__init__(message, details={'operation': operation, 'reason': reason})
        self.operation = operation
        self.reason = reason
