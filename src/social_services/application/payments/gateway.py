"""Application payments – PaymentCustomerGateway port and in-memory double."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from social_services.kernel.errors import ExternalServiceError

__all__ = ["InMemoryPaymentCustomerGateway", "PaymentCustomer", "PaymentCustomerGateway"]


@dataclass(frozen=True)
class PaymentCustomer:
    id: str
    email: str
    name: str


@runtime_checkable
class PaymentCustomerGateway(Protocol):
    """Port: register a customer with the payment provider."""

    async def create_customer(self, *, email: str, name: str) -> PaymentCustomer:
        """Raises :class:`ExternalServiceError` when the provider rejects the call."""
        ...


class InMemoryPaymentCustomerGateway:
    """Records customers locally; set ``fail=True`` to simulate provider errors."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.customers: list[PaymentCustomer] = []

    async def create_customer(self, *, email: str, name: str) -> PaymentCustomer:
        if self.fail:
            raise ExternalServiceError("payments", "payment provider unavailable", status_code=503)
        customer = PaymentCustomer(id=f"cus_{uuid.uuid4().hex[:14]}", email=email, name=name)
        self.customers.append(customer)
        return customer
