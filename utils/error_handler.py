"""
Error Handler Utility for GraphQL Resolvers

Provides centralized error handling with:
- Consistent client-facing messages
- Automatic exception to message mapping
- Logging for debugging

Usage in the GraphQL layer:
    from utils.error_handler import handle_service_error

    try:
        order = await checkout_service.checkout(user_id, token)
    except ShopException as e:
        error_message = handle_service_error(e)
"""

import logging

from exceptions import (
    ShopException,
    UnauthenticatedException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
    StoreUnavailableException,
    PaymentFailedException,
    InconsistentOrderException,
    MailDeliveryException,
)

GENERIC_ERROR_MESSAGE = "Something went wrong, please try again later"
INCONSISTENT_ORDER_MESSAGE = (
    "There was an issue processing your order. Your payment was received; "
    "our team has been notified and will contact you shortly"
)
STORE_UNAVAILABLE_MESSAGE = "The shop is temporarily unavailable, please try again in a moment"
MAIL_DELIVERY_MESSAGE = "We could not send the email right now, please try again later"

# None means "use the exception's own message"
ERROR_MESSAGES: dict[type[ShopException], str | None] = {
    UnauthenticatedException: None,
    ForbiddenException: None,
    NotFoundException: None,
    ValidationException: None,
    PaymentFailedException: None,
    StoreUnavailableException: STORE_UNAVAILABLE_MESSAGE,
    InconsistentOrderException: INCONSISTENT_ORDER_MESSAGE,
    MailDeliveryException: MAIL_DELIVERY_MESSAGE,
}


def handle_service_error(exception: ShopException) -> str:
    """
    Convert service exception to a client-facing error message.

    Subclasses inherit the message policy of the closest mapped base class.

    Args:
        exception: The custom exception raised by a service

    Returns:
        Message safe to show to the client

    Example:
        >>> handle_service_error(PaymentFailedException("Your card was declined"))
        'Payment failed: Your card was declined'
    """
    logging.warning(f"Service error handled: {type(exception).__name__} - {str(exception)}")

    for exception_class in type(exception).__mro__:
        if exception_class in ERROR_MESSAGES:
            return ERROR_MESSAGES[exception_class] or exception.message

    # Unknown ShopException subtype - never leak internal details
    logging.error(f"Unmapped exception type: {type(exception).__name__}")
    return GENERIC_ERROR_MESSAGE


def handle_unexpected_error(exception: Exception) -> str:
    """
    Handle unexpected exceptions (non-ShopException).

    Also logs the full exception for debugging.
    """
    logging.error(f"Unexpected error: {type(exception).__name__} - {str(exception)}", exc_info=exception)
    return GENERIC_ERROR_MESSAGE


def error_code(exception: Exception) -> str:
    """Stable machine-readable code for an exception, INTERNAL for unknown ones."""
    if isinstance(exception, ShopException):
        return exception.code
    return "INTERNAL"
