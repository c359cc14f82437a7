import asyncio
import logging
import uuid

import aiohttp
from pydantic import ValidationError

import config
from enums.currency import Currency
from exceptions import PaymentFailedException
from models.payment import ChargeDTO, ChargeRequestDTO
from payment_api.StripeApiWrapper import StripeApiWrapper, StripeApiError

logger = logging.getLogger(__name__)


class StripeGateway:
    """
    Charges a tokenized payment source through the gateway.

    Every failure mode (decline, invalid token, HTTP error, network error,
    timeout, unpaid charge) surfaces as PaymentFailedException. The call is
    never retried here: a retry could charge the customer twice.
    """

    def __init__(self, api_url: str | None = None, timeout_seconds: int | None = None):
        self.api_url = (api_url or config.STRIPE_API_URL).rstrip("/")
        self.timeout_seconds = timeout_seconds or config.PAYMENT_TIMEOUT_SECONDS

    async def create_charge(self, amount: int, currency: Currency, token: str,
                            description: str | None = None) -> ChargeDTO:
        if not token:
            raise PaymentFailedException("No payment token was provided")
        charge_request = ChargeRequestDTO(
            amount=amount,
            currency=currency.to_gateway_code(),
            source=token,
            description=description
        )
        try:
            payload = await StripeApiWrapper.fetch_api_request(
                f"{self.api_url}/charges",
                method="POST",
                data=charge_request.model_dump(exclude_none=True),
                headers=StripeApiWrapper.auth_headers(idempotency_key=str(uuid.uuid4())),
                timeout_seconds=self.timeout_seconds
            )
        except StripeApiError as e:
            raise PaymentFailedException(str(e), decline_code=e.decline_code, status=e.status) from e
        except asyncio.TimeoutError as e:
            logger.error(f"Payment gateway timed out after {self.timeout_seconds}s")
            raise PaymentFailedException("The payment provider did not respond in time") from e
        except aiohttp.ClientError as e:
            logger.error(f"Payment gateway unreachable: {e}")
            raise PaymentFailedException("The payment provider could not be reached") from e

        try:
            charge = ChargeDTO.model_validate(payload)
        except ValidationError as e:
            logger.error(f"Unreadable charge response from gateway: {e}")
            raise PaymentFailedException("The payment provider returned an unreadable response") from e
        if charge.paid is False or charge.status == "failed":
            raise PaymentFailedException(f"Charge {charge.id} was not captured", status=None)
        logger.info(f"Charge {charge.id} captured: {charge.amount} {charge.currency}")
        return charge
