from enum import Enum


class RateLimitOperation(str, Enum):
    """
    Rate limit operation types.

    Each operation has its own independent rate limit counter.
    """

    PASSWORD_RESET_REQUEST = "password_reset_request"
    """
    Rate limit for password reset mails.
    Config: MAX_RESET_REQUESTS_PER_HOUR
    Default: 3 requests per hour per email
    """
