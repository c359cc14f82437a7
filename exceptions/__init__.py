"""
Custom exceptions for the storefront API.

This module provides a hierarchy of custom exceptions for consistent error handling
throughout the application. Every class carries a stable ``code`` that the GraphQL
layer exposes as ``extensions.code``.

Exception Hierarchy:
--------------------
ShopException (base)
├── UnauthenticatedException            UNAUTHENTICATED
├── ForbiddenException                  FORBIDDEN
├── NotFoundException                   NOT_FOUND
│   ├── UserNotFoundException
│   ├── ItemNotFoundException
│   ├── CartItemNotFoundException
│   └── InvalidResetTokenException
├── ValidationException                 VALIDATION_FAILED
│   ├── EmptyCartException
│   ├── PasswordMismatchException
│   ├── EmailAlreadyRegisteredException
│   ├── InvalidCredentialsException
│   ├── InvalidPriceException
│   ├── CheckoutInProgressException
│   └── RateLimitExceededException
├── PaymentFailedException              PAYMENT_FAILED
├── StoreUnavailableException           STORE_UNAVAILABLE
├── InconsistentOrderException          INCONSISTENT
└── MailDeliveryException               MAIL_DELIVERY_FAILED

Usage:
------
Services raise specific exceptions:
    raise ItemNotFoundException(item_id=123)

The GraphQL layer converts them into user-facing errors:
    message = handle_service_error(e)
"""

from .base import (
    ShopException,
    UnauthenticatedException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
    StoreUnavailableException,
)
from .cart import EmptyCartException, CartItemNotFoundException
from .item import ItemNotFoundException, InvalidPriceException
from .order import CheckoutInProgressException, InconsistentOrderException
from .payment import PaymentFailedException
from .user import (
    UserNotFoundException,
    EmailAlreadyRegisteredException,
    InvalidCredentialsException,
    PasswordMismatchException,
    InvalidResetTokenException,
    MailDeliveryException,
    RateLimitExceededException,
)

__all__ = [
    # Base
    'ShopException',
    'UnauthenticatedException',
    'ForbiddenException',
    'NotFoundException',
    'ValidationException',
    'StoreUnavailableException',

    # Cart
    'EmptyCartException',
    'CartItemNotFoundException',

    # Item
    'ItemNotFoundException',
    'InvalidPriceException',

    # Order
    'CheckoutInProgressException',
    'InconsistentOrderException',

    # Payment
    'PaymentFailedException',

    # User
    'UserNotFoundException',
    'EmailAlreadyRegisteredException',
    'InvalidCredentialsException',
    'PasswordMismatchException',
    'InvalidResetTokenException',
    'MailDeliveryException',
    'RateLimitExceededException',
]
