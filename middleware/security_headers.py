"""Security Headers Middleware

Adds security headers to HTTP responses of the GraphQL endpoint.

The storefront frontend talks to the API from the browser with credentials
(session cookie), so these headers are worth enabling in production.
Disabled by default for local development.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import config


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that adds security headers to all HTTP responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        if not config.SECURITY_HEADERS_ENABLED:
            return response

        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"

        # The API is never meant to be framed
        response.headers["X-Frame-Options"] = "DENY"

        # Only meaningful when served over HTTPS
        if config.HSTS_ENABLED:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # Card data never touches this origin, tokenization happens on the frontend
        response.headers["Permissions-Policy"] = (
            "geolocation=(), microphone=(), camera=(), usb=()"
        )

        return response
