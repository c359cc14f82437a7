"""
User and authentication related exceptions.
"""

from .base import NotFoundException, ValidationException, ShopException


class UserNotFoundException(NotFoundException):
    """Raised when user is not found in database."""

    def __init__(self, user_id: int | None = None, email: str | None = None):
        if user_id:
            message = f"User with ID {user_id} not found"
            details = {'user_id': user_id}
        elif email:
            message = f"No such user found for email {email}"
            details = {'email': email}
        else:
            message = "User not found"
            details = {}

        super().__init__(message, details)
        self.user_id = user_id
        self.email = email


class EmailAlreadyRegisteredException(ValidationException):
    """Raised when signing up with an email that already has an account."""

    def __init__(self, email: str):
        super().__init__(
            f"An account with email {email} already exists",
            details={'email': email}
        )
        self.email = email


class InvalidCredentialsException(ValidationException):
    """Raised on sign in with unknown email or wrong password."""

    def __init__(self):
        super().__init__("Invalid email or password")


class PasswordMismatchException(ValidationException):
    """Raised when password and its confirmation differ."""

    def __init__(self):
        super().__init__("The informed passwords don't match")


class InvalidResetTokenException(NotFoundException):
    """Raised when a reset token is unknown, already used or expired."""

    def __init__(self):
        super().__init__("This token is either invalid or expired")


class MailDeliveryException(ShopException):
    """Raised when the mail server rejects or cannot take a message."""

    code = "MAIL_DELIVERY_FAILED"

    def __init__(self, recipient: str, reason: str):
        super().__init__(
            f"Could not deliver mail to {recipient}: {reason}",
            details={'recipient': recipient, 'reason': reason}
        )
        self.recipient = recipient
        self.reason = reason


class RateLimitExceededException(ValidationException):
    """Raised when an operation was attempted too often in its window."""

    def __init__(self, operation: str, reset_seconds: int):
        super().__init__(
            f"Too many attempts, try again in {max(1, reset_seconds // 60)} minutes",
            details={'operation': operation, 'reset_seconds': reset_seconds}
        )
        self.operation = operation
        self.reset_seconds = reset_seconds
