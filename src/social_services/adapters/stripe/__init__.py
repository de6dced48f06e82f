"""Stripe adapter – payment-provider customers."""
from social_services.adapters.stripe.customers import STRIPE_API_BASE, StripeCustomerGateway

__all__ = ["STRIPE_API_BASE", "StripeCustomerGateway"]
