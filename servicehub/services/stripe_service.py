"""Stripe payment integration service."""

from __future__ import annotations

import logging
from typing import Optional

import stripe

from ..domain.exceptions import ServerFaultError

logger = logging.getLogger(__name__)


class StripeService:
    """Creates Stripe payment intents on behalf of the marketplace."""

    def __init__(self, api_key: Optional[str]) -> None:
        self._api_key = api_key or None
        self._configure_stripe()

    def _configure_stripe(self) -> None:
        """Configure Stripe SDK with the current API key."""
        stripe.api_key = self._api_key

    def is_configured(self) -> bool:
        return bool(self._api_key)

    def create_payment_intent(self, amount: int, currency: str) -> str:
        """
        Create a payment intent and return its client secret.

        Args:
            amount: Amount in the currency's smallest unit (e.g. cents)
            currency: ISO currency code, passed through unchanged

        Returns:
            Client secret the frontend uses to confirm the payment
        """
        if not self.is_configured():
            raise ServerFaultError("Stripe not configured. Please set STRIPE_API_KEY first.")

        try:
            intent = stripe.PaymentIntent.create(amount=amount, currency=currency)
        except stripe.StripeError as e:
            logger.error("Failed to create payment intent: %s", str(e))
            raise ServerFaultError(str(e)) from e

        logger.info("Created payment intent %s for %s %s", intent.id, amount, currency)
        return intent.client_secret
