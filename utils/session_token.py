"""
Signed session tokens.

A token is ``<user_id>.<issued_at>.<signature>`` where the signature is an
HMAC-SHA256 over ``<user_id>.<issued_at>`` keyed with APP_SECRET (urlsafe
base64, no padding). It travels in an HTTP-only cookie and is validated by
SessionMiddleware on every request.
"""

import base64
import hashlib
import hmac
import logging
import time

import config

logger = logging.getLogger(__name__)


class SessionTokenError(Exception):
    """Raised when a session token is malformed, tampered with or expired."""
    pass


def _sign(payload: str, secret: str) -> str:
    digest = hmac.new(
        key=secret.encode("utf-8"),
        msg=payload.encode("utf-8"),
        digestmod=hashlib.sha256
    ).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def create_session_token(user_id: int, secret: str | None = None, issued_at: int | None = None) -> str:
    secret = secret or config.APP_SECRET
    issued_at = issued_at if issued_at is not None else int(time.time())
    payload = f"{user_id}.{issued_at}"
    return f"{payload}.{_sign(payload, secret)}"


def verify_session_token(token: str, secret: str | None = None, max_age_seconds: int | None = None) -> int:
    """
    Validate a session token and return the user id it was issued for.

    Args:
        token: Raw cookie value
        secret: Signing secret (defaults to config.APP_SECRET)
        max_age_seconds: Maximum token age (defaults to SESSION_MAX_AGE_DAYS)

    Returns:
        The authenticated user id

    Raises:
        SessionTokenError: If validation fails
    """
    if not token:
        raise SessionTokenError("No token provided")
    secret = secret or config.APP_SECRET
    if max_age_seconds is None:
        max_age_seconds = config.SESSION_MAX_AGE_DAYS * 24 * 60 * 60

    parts = token.split(".")
    if len(parts) != 3:
        raise SessionTokenError("Malformed token")
    user_id, issued_at, signature = parts

    # Constant-time comparison to prevent timing attacks
    if not hmac.compare_digest(_sign(f"{user_id}.{issued_at}", secret), signature):
        logger.warning("Session token signature mismatch")
        raise SessionTokenError("Invalid signature")

    try:
        user_id = int(user_id)
        issued_at = int(issued_at)
    except ValueError:
        raise SessionTokenError("Malformed token")

    age_seconds = time.time() - issued_at
    if age_seconds > max_age_seconds:
        raise SessionTokenError(f"Token too old ({int(age_seconds)}s > {max_age_seconds}s max)")
    if age_seconds < -60:  # Allow 60s clock skew
        raise SessionTokenError("Token issued in the future")

    return user_id
