import asyncio
import logging

import aiohttp

import config

logger = logging.getLogger(__name__)


class StripeApiError(Exception):
    """Non-2xx answer from the gateway, carrying its error object."""

    def __init__(self, status: int, error: dict):
        self.status = status
        self.error = error or {}
        super().__init__(self.error.get("message") or f"HTTP {status}")

    @property
    def decline_code(self) -> str | None:
        return self.error.get("decline_code") or self.error.get("code")


class StripeApiWrapper:
    """
    Thin aiohttp client for the Stripe-compatible REST API.

    Requests are form-encoded and authenticated with the secret key as a
    bearer token. Responses are returned as decoded JSON.
    """

    @staticmethod
    def auth_headers(idempotency_key: str | None = None) -> dict:
        headers = {"Authorization": f"Bearer {config.STRIPE_API_KEY}"}
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key
        return headers

    @staticmethod
    async def fetch_api_request(url: str,
                                method: str = "GET",
                                data: dict | None = None,
                                headers: dict | None = None,
                                timeout_seconds: int | None = None) -> dict:
        """
        Perform one HTTP request against the gateway.

        Raises:
            StripeApiError: The gateway answered with an error status
            aiohttp.ClientError: Connection level failure
            asyncio.TimeoutError: No answer within the timeout
        """
        timeout = aiohttp.ClientTimeout(total=timeout_seconds or config.PAYMENT_TIMEOUT_SECONDS)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.request(method, url, data=data, headers=headers) as response:
                try:
                    payload = await response.json(content_type=None)
                except (aiohttp.ContentTypeError, ValueError):
                    payload = {}
                if response.status >= 400:
                    error = payload.get("error", {}) if isinstance(payload, dict) else {}
                    logger.warning(f"Gateway {method} {url} answered {response.status}: {error.get('message')}")
                    raise StripeApiError(response.status, error)
                return payload
