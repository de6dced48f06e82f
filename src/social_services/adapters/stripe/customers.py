"""Stripe adapter – StripeCustomerGateway over the REST API."""
from __future__ import annotations

from social_services.adapters.http import HttpxHttpClient
from social_services.application.payments import PaymentCustomer
from social_services.kernel.errors import ExternalServiceError
from social_services.observability.logging import get_logger

__all__ = ["StripeCustomerGateway"]

logger = get_logger(__name__)

STRIPE_API_BASE = "https://api.stripe.com"


class StripeCustomerGateway:
    """PaymentCustomerGateway that calls ``POST /v1/customers``.

    Usage::

        async with HttpxHttpClient("stripe", base_url=STRIPE_API_BASE, auth=(api_key, "")) as http:
            gateway = StripeCustomerGateway(http)
            customer = await gateway.create_customer(email="a@b.c", name="Ann")
    """

    def __init__(self, http: HttpxHttpClient) -> None:
        self._http = http

    @classmethod
    def from_api_key(cls, api_key: str, base_url: str = STRIPE_API_BASE, timeout: float = 10.0) -> "StripeCustomerGateway":
        # Stripe authenticates with the secret key as basic-auth username
        return cls(HttpxHttpClient("stripe", base_url=base_url, timeout=timeout, auth=(api_key, "")))

    async def create_customer(self, *, email: str, name: str) -> PaymentCustomer:
        response = await self._http.post("/v1/customers", data={"email": email, "name": name})
        body = response.json()
        customer_id = body.get("id")
        if not customer_id:
            raise ExternalServiceError("stripe", "customer response has no id", status_code=response.status_code)
        logger.info("stripe.customer_created", customer_id=customer_id)
        return PaymentCustomer(id=customer_id, email=body.get("email", email), name=body.get("name", name))
