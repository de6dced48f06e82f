"""Application payments – payment-provider customer port."""
from social_services.application.payments.gateway import (
    InMemoryPaymentCustomerGateway,
    PaymentCustomer,
    PaymentCustomerGateway,
)

__all__ = ["InMemoryPaymentCustomerGateway", "PaymentCustomer", "PaymentCustomerGateway"]
